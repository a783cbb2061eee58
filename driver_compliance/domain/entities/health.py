"""Health entities."""
from dataclasses import dataclass

from driver_compliance.domain.exceptions import CacheUnhealthy, DatabaseUnhealthy


@dataclass
class HealthStatus:
    database: bool
    cache: bool

    def raise_for_status(self) -> "HealthStatus":
        """Return self when healthy, raise the first failing dependency otherwise."""
        if not self.database:
            raise DatabaseUnhealthy()
        if not self.cache:
            raise CacheUnhealthy()
        return self
