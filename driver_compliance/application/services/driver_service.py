"""Driver lifecycle service: signup, login, verification and sessions."""
import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple
from uuid import UUID

from driver_compliance.application.services.cache_coordinator import CacheAsideCoordinator, CacheKeys
from driver_compliance.application.services.mail_service import MailService
from driver_compliance.application.services.rest_period_validator import validate_rest_periods
from driver_compliance.application.services.token_service import TokenService
from driver_compliance.domain.entities.driver import (
    CreateDriverRequest,
    Driver,
    EntityType,
    LoginDriverRequest,
    RestPeriod,
    UserIdentity,
    dump_rest_periods,
)
from driver_compliance.domain.exceptions import (
    AccountAlreadyVerified,
    DomainError,
    DriverLimitReached,
    DriverNotFound,
    DriverSuspension,
    EmailDomainDenylisted,
    InvalidCredentials,
    InvalidVerificationKey,
    Unauthorized,
)
from driver_compliance.domain.interfaces.credential_hasher import ICredentialHasher
from driver_compliance.domain.interfaces.driver_repository import IDriverRepository
from driver_compliance.infrastructure.monitoring import track_auth_event
from driver_compliance.utils.clock import utcnow
from driver_compliance.utils.identity_normalizer import DriverIdentityNormalizer


class DriverService:
    """
    Orchestrates the driver account lifecycle.

    Enforces the signup quota and email-domain denylist, checks credentials
    and suspensions at login, verifies accounts with single-use keys and
    rotates the stored refresh-token hash on every token issuance.
    """

    def __init__(
        self,
        driver_repository: IDriverRepository,
        credential_hasher: ICredentialHasher,
        token_service: TokenService,
        cache: CacheAsideCoordinator,
        mail_service: MailService,
        email_domain_denylist: Optional[Iterable[str]] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize driver service.

        Args:
            driver_repository: Durable driver store (Dependency Injection)
            credential_hasher: Password and refresh-token hasher
            token_service: JWT issuer
            cache: Coordinator holding the single-use verification keys
            mail_service: Sender of password-reset mails
            email_domain_denylist: Domains refused at signup
            clock: Returns the current aware datetime
        """
        self.driver_repository = driver_repository
        self.credential_hasher = credential_hasher
        self.token_service = token_service
        self.cache = cache
        self.mail_service = mail_service
        self.email_domain_denylist = {domain.strip().lower() for domain in (email_domain_denylist or [])}
        self._clock = clock or utcnow
        self._logger = logging.getLogger(__name__)

    async def signup(self, create_request: CreateDriverRequest) -> Driver:
        """
        Create a driver account.

        Args:
            create_request: Signup payload with the plaintext password

        Returns:
            The created driver

        Raises:
            DriverLimitReached: If the active driver limit is reached
            EmailDomainDenylisted: If the email domain is refused
            DriverAlreadyExists: If the email is taken
        """
        await self._check_driver_limit()

        email = DriverIdentityNormalizer.normalize_email(create_request.email)
        domain = DriverIdentityNormalizer.email_domain(email)
        if domain in self.email_domain_denylist:
            self._logger.warning(f"Signup refused for denylisted domain {domain}")
            track_auth_event("signup", False)
            raise EmailDomainDenylisted(domain)

        password_hash = await self.credential_hasher.hash(create_request.password)
        normalized = CreateDriverRequest(
            firstname=DriverIdentityNormalizer.title_case(create_request.firstname),
            lastname=DriverIdentityNormalizer.title_case(create_request.lastname),
            email=email,
            password=password_hash,
            language=create_request.language,
            gender=create_request.gender,
        )

        driver = await self.driver_repository.create_driver(normalized)
        track_auth_event("signup", True)
        self._logger.info(f"Driver {driver.id} signed up")
        return driver

    async def _check_driver_limit(self) -> None:
        limit = await self.driver_repository.get_active_limit(EntityType.DRIVER, self._clock())
        if limit is None:
            return

        count = await self.driver_repository.count_drivers()
        if count >= limit.maximum_limit:
            self._logger.warning(f"Driver limit reached ({count}/{limit.maximum_limit})")
            track_auth_event("signup", False)
            raise DriverLimitReached(
                start_at=limit.start_at.isoformat(),
                end_at=limit.end_at.isoformat() if limit.end_at else None,
            )

    async def login(self, login_request: LoginDriverRequest) -> Driver:
        """
        Check credentials and suspensions.

        Args:
            login_request: Email and plaintext password

        Returns:
            The authenticated driver, ready for token issuance

        Raises:
            InvalidCredentials: If the email is unknown or the password is wrong
            DriverSuspension: If an active suspension blocks access
        """
        email = DriverIdentityNormalizer.normalize_email(login_request.email)
        try:
            driver = await self.driver_repository.get_driver_by_email(email)
        except DomainError as e:
            self._logger.error(f"Driver lookup failed during login: {e}", exc_info=True)
            track_auth_event("login", False)
            raise InvalidCredentials() from e

        if driver is None or not await self.credential_hasher.verify(login_request.password, driver.password_hash):
            track_auth_event("login", False)
            raise InvalidCredentials()

        now = self._clock()
        suspension = await self.driver_repository.get_active_suspension(driver.id, now)
        if suspension is not None and not suspension.can_access_restricted_space:
            self._logger.error(f"Suspended driver {driver.id} attempted to log in")
            track_auth_event("login", False)
            raise DriverSuspension(
                driver_message=suspension.driver_message,
                start_at=suspension.start_at.isoformat(),
                end_at=suspension.end_at.isoformat() if suspension.end_at else None,
            )

        driver = await self.driver_repository.touch_last_login(driver.id, now)
        track_auth_event("login", True)
        return driver

    async def verify_account(self, driver_id: UUID, token: str) -> Driver:
        """
        Verify a driver account with the key sent by mail.

        The key is single-use: it is deleted once the account is verified.

        Raises:
            InvalidVerificationKey: If the driver is unknown or the key does not match
            AccountAlreadyVerified: If the account is already verified
        """
        driver = await self.driver_repository.get_driver_by_id(driver_id)
        if driver is None:
            track_auth_event("verify", False)
            raise InvalidVerificationKey()

        if driver.is_verified:
            track_auth_event("verify", False)
            raise AccountAlreadyVerified()

        key = CacheKeys.verify_email(driver_id)
        if not await self.cache.check_token(key, token):
            track_auth_event("verify", False)
            raise InvalidVerificationKey()

        driver = await self.driver_repository.mark_verified(driver_id, self._clock())
        await self.cache.invalidate(key, cache_name="verification_token")
        track_auth_event("verify", True)
        self._logger.info(f"Driver {driver_id} verified")
        return driver

    async def generate_tokens(self, driver: Driver) -> Tuple[str, str]:
        """
        Issue a session and store the hash of its refresh token.

        Any previously issued refresh token stops being accepted.

        Returns:
            Tuple of (access_token, refresh cookie directive)
        """
        access_token, refresh_token = self.token_service.issue(driver)
        refresh_token_hash = await self.credential_hasher.hash(refresh_token)
        await self.driver_repository.set_refresh_token_hash(driver.id, refresh_token_hash)
        return access_token, self.token_service.build_refresh_cookie(refresh_token)

    async def refresh_session(self, refresh_token: str) -> Tuple[str, str]:
        """
        Rotate a session from its refresh token.

        Raises:
            Unauthorized: ``REFRESH_TOKEN_REUSED`` if the token is not the last
                one issued, or the token validation code otherwise
        """
        identity = self.token_service.validate_refresh_token(refresh_token)
        driver = await self.driver_repository.get_driver_by_id(identity.user_id)
        if driver is None:
            track_auth_event("refresh", False)
            raise Unauthorized()

        if not driver.refresh_token_hash or not await self.credential_hasher.verify(
            refresh_token, driver.refresh_token_hash
        ):
            self._logger.warning(f"Refresh token reuse detected for driver {driver.id}")
            track_auth_event("refresh", False)
            raise Unauthorized("REFRESH_TOKEN_REUSED", "Refresh token has already been used")

        tokens = await self.generate_tokens(driver)
        track_auth_event("refresh", True)
        return tokens

    def logout(self) -> str:
        """Return the cookie directive that clears the refresh token client-side."""
        return self.token_service.build_expired_cookie()

    def authenticate(self, access_token: str) -> UserIdentity:
        return self.token_service.validate_access_token(access_token)

    async def get_driver(self, driver_id: UUID) -> Driver:
        driver = await self.driver_repository.get_driver_by_id(driver_id)
        if driver is None:
            raise DriverNotFound()
        return driver

    async def delete_driver(self, driver_id: UUID) -> None:
        await self.driver_repository.delete_driver(driver_id)
        self._logger.info(f"Driver {driver_id} deleted")

    async def get_rest_periods(self, driver_id: UUID) -> List[RestPeriod]:
        driver = await self.get_driver(driver_id)
        return driver.rest_periods

    async def set_rest_periods(self, driver_id: UUID, rest_periods: List[RestPeriod]) -> List[RestPeriod]:
        """
        Replace the rest periods of a driver.

        Raises:
            InvalidRestPeriod: If the set does not partition the day
            DriverNotFound: If the driver does not exist
        """
        periods = validate_rest_periods(rest_periods)
        await self.driver_repository.set_rest_periods(driver_id, dump_rest_periods(periods))
        return periods

    async def delete_rest_periods(self, driver_id: UUID) -> None:
        await self.driver_repository.set_rest_periods(driver_id, None)

    async def request_password_reset(self, email: str) -> None:
        """
        Mail a password-reset key to the owner of ``email``.

        Unknown emails are ignored.
        """
        driver = await self.driver_repository.get_driver_by_email(DriverIdentityNormalizer.normalize_email(email))
        if driver is None:
            self._logger.info("Password reset requested for an unknown email")
            return
        await self.mail_service.send_password_reset_email(driver)

    async def reset_password(self, driver_id: UUID, token: str, new_password: str) -> Driver:
        """
        Set a new password with a reset key. Open sessions stop refreshing.

        Raises:
            InvalidVerificationKey: If the driver is unknown or the key does not match
        """
        driver = await self.driver_repository.get_driver_by_id(driver_id)
        key = CacheKeys.reset_password(driver_id)
        if driver is None or not await self.cache.check_token(key, token):
            raise InvalidVerificationKey()

        password_hash = await self.credential_hasher.hash(new_password)
        driver = await self.driver_repository.update_password(driver_id, password_hash)
        await self.cache.invalidate(key, cache_name="reset_token")
        self._logger.info(f"Password reset for driver {driver_id}")
        return driver
