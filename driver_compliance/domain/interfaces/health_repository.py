"""Interface for durable store health probes."""
from abc import ABC, abstractmethod


class IHealthRepository(ABC):

    @abstractmethod
    async def ping(self) -> bool:
        """Return True if the durable store answers a trivial query."""
        pass
