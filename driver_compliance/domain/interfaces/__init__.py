"""Domain interfaces following Dependency Inversion Principle."""

from driver_compliance.domain.interfaces.driver_repository import IDriverRepository
from driver_compliance.domain.interfaces.workday_repository import IWorkdayRepository
from driver_compliance.domain.interfaces.update_repository import IUpdateRepository
from driver_compliance.domain.interfaces.cache_store import ICacheStore
from driver_compliance.domain.interfaces.credential_hasher import ICredentialHasher
from driver_compliance.domain.interfaces.mail import IMailRepository, IMailSender
from driver_compliance.domain.interfaces.document_generator import IDocumentGenerator
from driver_compliance.domain.interfaces.health_repository import IHealthRepository

__all__ = [
    "IDriverRepository",
    "IWorkdayRepository",
    "IUpdateRepository",
    "ICacheStore",
    "ICredentialHasher",
    "IMailRepository",
    "IMailSender",
    "IDocumentGenerator",
    "IHealthRepository",
]
