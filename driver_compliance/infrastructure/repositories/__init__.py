"""Repository implementations (Infrastructure Layer).

Repository implementations for data persistence.
These implement domain interfaces defined in driver_compliance.domain.interfaces.
"""
from driver_compliance.infrastructure.repositories.driver_repository import SqlDriverRepository
from driver_compliance.infrastructure.repositories.health_repository import SqlHealthRepository
from driver_compliance.infrastructure.repositories.mail_repository import SqlMailRepository
from driver_compliance.infrastructure.repositories.redis_cache_store import RedisCacheStore
from driver_compliance.infrastructure.repositories.update_repository import SqlUpdateRepository
from driver_compliance.infrastructure.repositories.workday_repository import SqlWorkdayRepository

__all__ = [
    "SqlDriverRepository",
    "SqlHealthRepository",
    "SqlMailRepository",
    "RedisCacheStore",
    "SqlUpdateRepository",
    "SqlWorkdayRepository",
]
