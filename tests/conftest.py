"""Shared fixtures: services wired on in-memory stores."""
from datetime import datetime, timezone

import pytest

from driver_compliance.application.services import (
    CacheAsideCoordinator,
    DriverService,
    MailService,
    TokenService,
    WorkdayService,
)
from driver_compliance.config.settings import TestingConfig
from driver_compliance.infrastructure.security import WerkzeugCredentialHasher
from tests.fakes import (
    InMemoryCacheStore,
    InMemoryDriverRepository,
    InMemoryMailRepository,
    InMemoryWorkdayRepository,
    RecordingMailSender,
)

NOW = datetime(2025, 3, 15, 12, 0, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


class ManualClock:
    """Monotonic clock advanced by hand."""

    def __init__(self):
        self.value = 0.0

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


@pytest.fixture
def driver_repository():
    return InMemoryDriverRepository()


@pytest.fixture
def workday_repository():
    return InMemoryWorkdayRepository()


@pytest.fixture
def cache_clock():
    return ManualClock()


@pytest.fixture
def cache_store(cache_clock):
    return InMemoryCacheStore(clock=cache_clock)


@pytest.fixture
def cache(cache_store):
    return CacheAsideCoordinator(cache_store)


@pytest.fixture
def hasher():
    return WerkzeugCredentialHasher(TestingConfig.PASSWORD_HASH_METHOD)


@pytest.fixture
def token_service():
    return TokenService(
        secret_key=TestingConfig.JWT_SECRET_KEY,
        access_ttl=TestingConfig.JWT_ACCESS_TTL,
        refresh_ttl=TestingConfig.JWT_REFRESH_TTL,
        domain_name=TestingConfig.DOMAIN_NAME,
    )


@pytest.fixture
def mail_sender():
    return RecordingMailSender()


@pytest.fixture
def mail_repository():
    return InMemoryMailRepository()


@pytest.fixture
def mail_service(mail_sender, mail_repository, cache):
    return MailService(
        mail_sender=mail_sender,
        mail_repository=mail_repository,
        cache=cache,
        verify_email_ttl=TestingConfig.VERIFY_EMAIL_TTL,
        reset_password_ttl=TestingConfig.RESET_PASSWORD_TTL,
        token_length=TestingConfig.VERIFICATION_TOKEN_LENGTH,
        clock=lambda: NOW,
    )


@pytest.fixture
def driver_service(driver_repository, hasher, token_service, cache, mail_service):
    return DriverService(
        driver_repository=driver_repository,
        credential_hasher=hasher,
        token_service=token_service,
        cache=cache,
        mail_service=mail_service,
        email_domain_denylist=TestingConfig.EMAIL_DOMAIN_DENYLIST,
        clock=lambda: NOW,
    )


@pytest.fixture
def workday_service(workday_repository, cache):
    return WorkdayService(
        workday_repository=workday_repository,
        cache=cache,
        workday_cache_ttl=TestingConfig.WORKDAY_CACHE_TTL,
        garbage_retention_days=TestingConfig.GARBAGE_RETENTION_DAYS,
        today=lambda: TODAY,
    )
