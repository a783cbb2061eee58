"""Interface for password and refresh-token hashing."""
from abc import ABC, abstractmethod


class ICredentialHasher(ABC):
    """Memory-hard hashing with a fresh random salt per call."""

    @abstractmethod
    async def hash(self, plaintext: str) -> str:
        """
        Hash a secret.

        Raises:
            InternalError: If hashing fails
        """
        pass

    @abstractmethod
    async def verify(self, plaintext: str, hashed: str) -> bool:
        """Return True if ``plaintext`` matches ``hashed``."""
        pass
