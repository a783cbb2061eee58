"""Service container for dependency injection (IoC Container Pattern)."""
import logging
from typing import Optional, Type

from driver_compliance.application.services import (
    CacheAsideCoordinator,
    DocumentService,
    DriverService,
    HealthService,
    MailService,
    TokenService,
    UpdateService,
    WorkdayService,
)
from driver_compliance.config.settings import Config
from driver_compliance.infrastructure.clients import HttpDocumentGenerator, SmtpMailSender
from driver_compliance.infrastructure.database import Database
from driver_compliance.infrastructure.monitoring import register_metrics
from driver_compliance.infrastructure.redis_client import RedisClientFactory
from driver_compliance.infrastructure.repositories import (
    RedisCacheStore,
    SqlDriverRepository,
    SqlHealthRepository,
    SqlMailRepository,
    SqlUpdateRepository,
    SqlWorkdayRepository,
)
from driver_compliance.infrastructure.security import WerkzeugCredentialHasher


class ServiceContainer:
    """
    Service container implementing Dependency Injection pattern.

    Owns the connection resources (database engine, Redis pool, HTTP client)
    and every service built on them. Build it with ``create`` and release it
    with ``close``.
    """

    def __init__(
        self,
        database: Database,
        redis_factory: RedisClientFactory,
        document_generator: HttpDocumentGenerator,
        driver_service: DriverService,
        workday_service: WorkdayService,
        update_service: UpdateService,
        mail_service: MailService,
        document_service: DocumentService,
        health_service: HealthService
    ):
        self._logger = logging.getLogger(__name__)
        self.database = database
        self.redis_factory = redis_factory
        self.document_generator = document_generator
        self.driver_service = driver_service
        self.workday_service = workday_service
        self.update_service = update_service
        self.mail_service = mail_service
        self.document_service = document_service
        self.health_service = health_service

    @classmethod
    async def create(cls, config: Optional[Type[Config]] = None) -> "ServiceContainer":
        """
        Build every resource and service from configuration.

        Args:
            config: Configuration class (defaults to ``Config``)

        Returns:
            Ready-to-use container
        """
        config = config or Config
        logger = logging.getLogger(__name__)
        register_metrics(config)

        database = Database(config.DATABASE_URL, pool_size=config.DB_POOL_SIZE, echo=config.DEBUG)
        redis_factory = RedisClientFactory(config.REDIS_URL)
        redis_client = await redis_factory.connect()
        logger.info("Infrastructure initialized")

        cache_store = RedisCacheStore(redis_client)
        cache = CacheAsideCoordinator(cache_store)
        driver_repository = SqlDriverRepository(database)
        workday_repository = SqlWorkdayRepository(database)

        token_service = TokenService(
            secret_key=config.JWT_SECRET_KEY,
            algorithm=config.JWT_ALGORITHM,
            access_ttl=config.JWT_ACCESS_TTL,
            refresh_ttl=config.JWT_REFRESH_TTL,
            domain_name=config.DOMAIN_NAME,
        )
        mail_service = MailService(
            mail_sender=SmtpMailSender(
                host=config.SMTP_HOST,
                port=config.SMTP_PORT,
                sender=config.MAIL_FROM,
                username=config.SMTP_USERNAME,
                password=config.SMTP_PASSWORD,
                use_tls=config.SMTP_USE_TLS,
            ),
            mail_repository=SqlMailRepository(database),
            cache=cache,
            verify_email_ttl=config.VERIFY_EMAIL_TTL,
            reset_password_ttl=config.RESET_PASSWORD_TTL,
            token_length=config.VERIFICATION_TOKEN_LENGTH,
        )
        driver_service = DriverService(
            driver_repository=driver_repository,
            credential_hasher=WerkzeugCredentialHasher(config.PASSWORD_HASH_METHOD),
            token_service=token_service,
            cache=cache,
            mail_service=mail_service,
            email_domain_denylist=config.EMAIL_DOMAIN_DENYLIST,
        )
        workday_service = WorkdayService(
            workday_repository=workday_repository,
            cache=cache,
            workday_cache_ttl=config.WORKDAY_CACHE_TTL,
            garbage_retention_days=config.GARBAGE_RETENTION_DAYS,
        )
        document_generator = HttpDocumentGenerator(
            config.DOCUMENT_SERVICE_URL, timeout=config.DOCUMENT_SERVICE_TIMEOUT
        )

        container = cls(
            database=database,
            redis_factory=redis_factory,
            document_generator=document_generator,
            driver_service=driver_service,
            workday_service=workday_service,
            update_service=UpdateService(SqlUpdateRepository(database), cache, config.UPDATE_CACHE_TTL),
            mail_service=mail_service,
            document_service=DocumentService(
                driver_repository, workday_repository, workday_service, document_generator
            ),
            health_service=HealthService(SqlHealthRepository(database), cache_store),
        )
        logger.info("ServiceContainer created")
        return container

    async def close(self) -> None:
        """Release every connection resource."""
        await self.document_generator.close()
        await self.redis_factory.close()
        await self.database.close()
        self._logger.info("ServiceContainer closed")
