"""Cache store backed by Redis."""
import logging
import secrets
import string
from typing import List, Optional

import redis
from redis import asyncio as aioredis

from driver_compliance.domain.exceptions import CacheError
from driver_compliance.domain.interfaces.cache_store import ICacheStore

TOKEN_ALPHABET = string.ascii_letters + string.digits


class RedisCacheStore(ICacheStore):
    """
    Cache store using Redis string values with TTL.

    Prefix deletion walks the keyspace with SCAN rather than KEYS.
    """

    def __init__(self, redis_client: aioredis.Redis, scan_count: int = 500):
        """
        Initialize the cache store.

        Args:
            redis_client: Async Redis client instance (Dependency Injection)
            scan_count: Hint for the number of keys returned per SCAN step
        """
        self.redis = redis_client
        self.scan_count = scan_count
        self._logger = logging.getLogger(__name__)

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self.redis.get(key)
        except redis.RedisError as e:
            self._logger.error(f"Error reading {key} from Redis: {e}", exc_info=True)
            raise CacheError() from e

    async def set_with_ttl(self, key: str, value: str, ttl: int) -> None:
        try:
            await self.redis.setex(key, ttl, value)
        except redis.RedisError as e:
            self._logger.error(f"Error storing {key} in Redis: {e}", exc_info=True)
            raise CacheError() from e

    async def delete(self, key: str) -> bool:
        try:
            return await self.redis.delete(key) > 0
        except redis.RedisError as e:
            self._logger.error(f"Error deleting {key} from Redis: {e}", exc_info=True)
            raise CacheError() from e

    async def delete_by_prefix(self, prefix: str) -> int:
        """
        Delete every key starting with ``prefix``.

        Args:
            prefix: Key prefix

        Returns:
            Number of deleted keys
        """
        try:
            keys: List[str] = [key async for key in self.redis.scan_iter(match=f"{prefix}*", count=self.scan_count)]
            if not keys:
                return 0
            return await self.redis.delete(*keys)
        except redis.RedisError as e:
            self._logger.error(f"Error deleting keys under {prefix} from Redis: {e}", exc_info=True)
            raise CacheError() from e

    async def generate_random_token(self, length: int) -> str:
        if length < 2:
            raise ValueError("Token length must allow at least one letter and one digit")
        while True:
            token = "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))
            if any(c.isalpha() for c in token) and any(c.isdigit() for c in token):
                return token

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except redis.RedisError as e:
            self._logger.warning(f"Redis ping failed: {e}")
            return False
