"""Tests for the Redis cache store against a mocked client."""
from unittest.mock import AsyncMock, MagicMock

import pytest
import redis

from driver_compliance.domain.exceptions import CacheError
from driver_compliance.infrastructure.repositories.redis_cache_store import RedisCacheStore


def scan_results(*keys):
    async def scan_iter(match=None, count=None):
        for key in keys:
            yield key
    return scan_iter


@pytest.fixture
def redis_client():
    return AsyncMock()


@pytest.fixture
def store(redis_client):
    return RedisCacheStore(redis_client)


class TestRedisCacheStore:

    @pytest.mark.asyncio
    async def test_get(self, store, redis_client):
        redis_client.get.return_value = "value"
        assert await store.get("key") == "value"
        redis_client.get.assert_awaited_once_with("key")

    @pytest.mark.asyncio
    async def test_set_with_ttl(self, store, redis_client):
        await store.set_with_ttl("key", "value", 60)
        redis_client.setex.assert_awaited_once_with("key", 60, "value")

    @pytest.mark.asyncio
    async def test_delete(self, store, redis_client):
        redis_client.delete.return_value = 1
        assert await store.delete("key") is True
        redis_client.delete.return_value = 0
        assert await store.delete("key") is False

    @pytest.mark.asyncio
    async def test_delete_by_prefix_uses_scan(self, store, redis_client):
        redis_client.scan_iter = MagicMock(side_effect=scan_results("p:1", "p:2"))
        redis_client.delete.return_value = 2

        assert await store.delete_by_prefix("p:") == 2

        redis_client.scan_iter.assert_called_once_with(match="p:*", count=store.scan_count)
        redis_client.delete.assert_awaited_once_with("p:1", "p:2")
        redis_client.keys.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_by_prefix_without_matches(self, store, redis_client):
        redis_client.scan_iter = MagicMock(side_effect=scan_results())
        assert await store.delete_by_prefix("p:") == 0
        redis_client.delete.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method, args", [
        ("get", ("key",)),
        ("set_with_ttl", ("key", "value", 60)),
        ("delete", ("key",)),
    ])
    async def test_redis_errors_become_cache_errors(self, store, redis_client, method, args):
        redis_method = "setex" if method == "set_with_ttl" else method
        getattr(redis_client, redis_method).side_effect = redis.ConnectionError("down")
        with pytest.raises(CacheError):
            await getattr(store, method)(*args)

    @pytest.mark.asyncio
    async def test_ping(self, store, redis_client):
        redis_client.ping.return_value = True
        assert await store.ping() is True
        redis_client.ping.side_effect = redis.ConnectionError("down")
        assert await store.ping() is False

    @pytest.mark.asyncio
    async def test_random_token(self, store):
        token = await store.generate_random_token(100)
        assert len(token) == 100
        assert token.isalnum()
        assert any(c.isalpha() for c in token)
        assert any(c.isdigit() for c in token)

    @pytest.mark.asyncio
    async def test_random_token_too_short(self, store):
        with pytest.raises(ValueError):
            await store.generate_random_token(1)
