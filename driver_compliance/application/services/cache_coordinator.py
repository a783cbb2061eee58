"""Cache-aside coordination between the durable store and the cache."""
import json
import logging
import secrets
from datetime import date
from typing import Any, Awaitable, Callable, Optional, TypeVar
from uuid import UUID

from driver_compliance.domain.exceptions import CacheError
from driver_compliance.domain.interfaces.cache_store import ICacheStore
from driver_compliance.infrastructure.monitoring import track_cache_invalidation, track_cache_request

T = TypeVar("T")


class CacheKeys:
    """Deterministic cache keys for every cached query."""

    @staticmethod
    def workday_month(driver_id: UUID, month: int, year: int) -> str:
        return f"driver:{driver_id}:workdays:month:{year}-{month:02d}"

    @staticmethod
    def workday_period_prefix(driver_id: UUID) -> str:
        return f"driver:{driver_id}:workdays:period:"

    @classmethod
    def workday_period(cls, driver_id: UUID, start_date: date, end_date: date, page: int, limit: int) -> str:
        return (
            f"{cls.workday_period_prefix(driver_id)}"
            f"{start_date.isoformat()}:{end_date.isoformat()}:page:{page}:limit:{limit}"
        )

    @staticmethod
    def verify_email(driver_id: UUID) -> str:
        return f"driver:{driver_id}:verify_email"

    @staticmethod
    def reset_password(driver_id: UUID) -> str:
        return f"driver:{driver_id}:reset_password"

    @staticmethod
    def updates(version: str, page: int, limit: int) -> str:
        return f"updates:version:{version}:page:{page}:limit:{limit}"


class CacheAsideCoordinator:
    """
    Read-through on miss, invalidate on write.

    The cache never holds authoritative data: a read failure or an unreadable
    entry falls back to the durable store. Invalidation failures propagate.
    """

    def __init__(self, cache_store: ICacheStore):
        """
        Initialize the coordinator.

        Args:
            cache_store: Cache backend (Dependency Injection)
        """
        self.cache_store = cache_store
        self._logger = logging.getLogger(__name__)

    async def get_or_load(
        self,
        key: str,
        ttl: int,
        loader: Callable[[], Awaitable[T]],
        serialize: Callable[[T], Any],
        deserialize: Callable[[Any], T],
        cache_name: str = "default"
    ) -> T:
        """
        Return the cached projection for ``key``, loading it on miss.

        Args:
            key: Cache key
            ttl: Time to live of a freshly written entry, in seconds
            loader: Reads the projection from the durable store
            serialize: Turns the projection into JSON-compatible data
            deserialize: Rebuilds the projection from JSON-compatible data
            cache_name: Label used in metrics

        Returns:
            The projection
        """
        cached = await self._read(key)
        if cached is not None:
            try:
                value = deserialize(json.loads(cached))
                track_cache_request(cache_name, hit=True)
                self._logger.debug(f"Cache hit for {key}")
                return value
            except (ValueError, KeyError, TypeError) as e:
                self._logger.warning(f"Discarding unreadable cache entry {key}: {e}")

        track_cache_request(cache_name, hit=False)
        value = await loader()

        try:
            await self.cache_store.set_with_ttl(key, json.dumps(serialize(value)), ttl)
            self._logger.debug(f"Cached {key} with TTL {ttl}s")
        except CacheError as e:
            self._logger.warning(f"Failed to populate cache entry {key}: {e}")

        return value

    async def _read(self, key: str) -> Optional[str]:
        try:
            return await self.cache_store.get(key)
        except CacheError as e:
            self._logger.warning(f"Cache read failed for {key}, falling back to store: {e}")
            return None

    async def invalidate(self, key: str, cache_name: str = "default") -> None:
        await self.cache_store.delete(key)
        track_cache_invalidation(cache_name)
        self._logger.debug(f"Invalidated {key}")

    async def invalidate_prefix(self, prefix: str, cache_name: str = "default") -> int:
        removed = await self.cache_store.delete_by_prefix(prefix)
        track_cache_invalidation(cache_name)
        self._logger.debug(f"Invalidated {removed} keys under {prefix}")
        return removed

    async def invalidate_workdays(self, driver_id: UUID, workday_date: date) -> None:
        """Drop the month entry containing ``workday_date`` and every period entry of the driver."""
        await self.invalidate(
            CacheKeys.workday_month(driver_id, workday_date.month, workday_date.year),
            cache_name="workday_month",
        )
        await self.invalidate_prefix(CacheKeys.workday_period_prefix(driver_id), cache_name="workday_period")

    async def issue_token(self, key: str, ttl: int, length: int) -> str:
        """
        Generate a single-use token and store it under ``key``.

        Args:
            key: Cache key
            ttl: Token lifetime in seconds
            length: Token length

        Returns:
            The token
        """
        token = await self.cache_store.generate_random_token(length)
        await self.cache_store.set_with_ttl(key, token, ttl)
        return token

    async def check_token(self, key: str, token: str) -> bool:
        """
        Compare ``token`` with the single-use value stored under ``key``.

        The entry is left in place; callers revoke it with ``invalidate`` once
        the guarded operation has succeeded.

        Returns:
            True if the token matched, False on mismatch or miss
        """
        stored = await self.cache_store.get(key)
        if stored is None:
            return False
        return secrets.compare_digest(stored.encode(), token.encode())
