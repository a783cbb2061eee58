"""Tests for the health service."""
import pytest

from driver_compliance.application.services import HealthService
from driver_compliance.domain.entities.health import HealthStatus
from driver_compliance.domain.exceptions import CacheUnhealthy, DatabaseUnhealthy
from tests.fakes import StubHealthRepository


class TestHealthService:

    @pytest.mark.asyncio
    async def test_healthy(self, cache_store):
        service = HealthService(StubHealthRepository(), cache_store)
        assert await service.check_health() == HealthStatus(database=True, cache=True)

    @pytest.mark.asyncio
    async def test_database_down(self, cache_store):
        service = HealthService(StubHealthRepository(healthy=False), cache_store)
        with pytest.raises(DatabaseUnhealthy):
            await service.check_health()

    @pytest.mark.asyncio
    async def test_database_error(self, cache_store):
        service = HealthService(StubHealthRepository(error=True), cache_store)
        with pytest.raises(DatabaseUnhealthy) as exc_info:
            await service.check_health()
        assert exc_info.value.to_dict()["error_code"] == "DATABASE_UNHEALTHY"

    @pytest.mark.asyncio
    async def test_cache_down(self, cache_store):
        cache_store.healthy = False
        service = HealthService(StubHealthRepository(), cache_store)
        with pytest.raises(CacheUnhealthy):
            await service.check_health()
