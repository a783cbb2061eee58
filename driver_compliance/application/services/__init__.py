"""Application services (Service Layer).

Services orchestrate the domain: they enforce business invariants and keep
the durable store and the cache consistent.
"""
from driver_compliance.application.services.cache_coordinator import CacheAsideCoordinator, CacheKeys
from driver_compliance.application.services.document_service import DocumentService
from driver_compliance.application.services.driver_service import DriverService
from driver_compliance.application.services.health_service import HealthService
from driver_compliance.application.services.mail_service import MailService
from driver_compliance.application.services.rest_period_validator import validate_rest_periods
from driver_compliance.application.services.token_service import TokenService
from driver_compliance.application.services.update_service import UpdateService
from driver_compliance.application.services.workday_service import WorkdayService

__all__ = [
    "CacheAsideCoordinator",
    "CacheKeys",
    "DocumentService",
    "DriverService",
    "HealthService",
    "MailService",
    "validate_rest_periods",
    "TokenService",
    "UpdateService",
    "WorkdayService",
]
