"""Interface for the volatile key/value cache."""
from abc import ABC, abstractmethod
from typing import Optional


class ICacheStore(ABC):
    """
    Keyed, TTL-bound cache.

    Values are strings; callers serialize structured data themselves.
    Implementations raise ``CacheError`` when the backend is unreachable.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Retrieve a cached value.

        Args:
            key: Cache key

        Returns:
            Stored value, or None on miss
        """
        pass

    @abstractmethod
    async def set_with_ttl(self, key: str, value: str, ttl: int) -> None:
        """
        Store a value that expires after ``ttl`` seconds.

        Args:
            key: Cache key
            value: Serialized value
            ttl: Time to live in seconds
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a key. Returns True if something was removed."""
        pass

    @abstractmethod
    async def delete_by_prefix(self, prefix: str) -> int:
        """Delete every key starting with ``prefix``. Returns the number removed."""
        pass

    @abstractmethod
    async def generate_random_token(self, length: int) -> str:
        """
        Generate an unpredictable alphanumeric token.

        The token holds at least one letter and one digit.
        """
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Return True if the backend answers."""
        pass
