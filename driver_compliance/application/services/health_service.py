"""Dependency health checks."""
import logging

from driver_compliance.domain.entities.health import HealthStatus
from driver_compliance.domain.exceptions import DomainError
from driver_compliance.domain.interfaces.cache_store import ICacheStore
from driver_compliance.domain.interfaces.health_repository import IHealthRepository


class HealthService:
    """Pings the durable store and the cache."""

    def __init__(self, health_repository: IHealthRepository, cache_store: ICacheStore):
        self.health_repository = health_repository
        self.cache_store = cache_store
        self._logger = logging.getLogger(__name__)

    async def check_health(self) -> HealthStatus:
        """
        Check every backing store.

        Returns:
            HealthStatus with both stores up

        Raises:
            DatabaseUnhealthy: If the durable store does not answer
            CacheUnhealthy: If the cache does not answer
        """
        status = HealthStatus(
            database=await self._probe("database", self.health_repository.ping),
            cache=await self._probe("cache", self.cache_store.ping),
        )
        return status.raise_for_status()

    async def _probe(self, name: str, ping) -> bool:
        try:
            healthy = await ping()
        except DomainError as e:
            self._logger.error(f"Health check for {name} failed: {e}")
            return False
        if not healthy:
            self._logger.error(f"Health check for {name} failed")
        return healthy
