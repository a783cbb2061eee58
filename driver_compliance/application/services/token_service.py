"""Session token issuance and validation (JWT)."""
import logging
import re
import secrets
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Tuple
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt

from driver_compliance.domain.entities.driver import Driver, UserIdentity
from driver_compliance.domain.exceptions import Unauthorized
from driver_compliance.utils.clock import utcnow

REFRESH_COOKIE_NAME = "refresh_token"
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def cookie_domain(domain_name: str) -> str:
    """Strip the scheme and port from a configured domain name."""
    host = re.sub(r"^https?://", "", domain_name.strip())
    return host.split("/", 1)[0].split(":", 1)[0]


class TokenService:
    """
    Issues and validates the access and refresh tokens of a driver session.

    Access tokens carry the driver's identity and verification flag; refresh
    tokens carry only the subject. Both are signed with the same key.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        access_ttl: int = 3600,
        refresh_ttl: int = 86400,
        domain_name: str = "localhost",
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize token service.

        Args:
            secret_key: Signing key
            algorithm: JWS algorithm
            access_ttl: Access token lifetime in seconds
            refresh_ttl: Refresh token lifetime in seconds
            domain_name: Public domain the refresh cookie is scoped to
            clock: Returns the current aware datetime
        """
        if not secret_key:
            raise ValueError("A secret key is required to sign tokens")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.domain = cookie_domain(domain_name)
        self._clock = clock or utcnow
        self._logger = logging.getLogger(__name__)

    def _encode(self, claims: Dict[str, Any], ttl: int) -> str:
        issued_at = int(self._clock().timestamp())
        payload = {**claims, "iat": issued_at, "exp": issued_at + ttl}
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def _decode(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise Unauthorized("TOKEN_EXPIRED", "Token has expired")
        except JWTError as e:
            self._logger.debug(f"Rejected token: {e}")
            raise Unauthorized()

    def create_access_token(self, driver: Driver) -> str:
        claims = {
            "sub": str(driver.id),
            "typ": ACCESS_TOKEN_TYPE,
            "driver": {
                "id": str(driver.id),
                "first_name": driver.firstname,
                "last_name": driver.lastname,
                "email": driver.email,
                "verified": driver.is_verified,
            },
        }
        return self._encode(claims, self.access_ttl)

    def create_refresh_token(self, driver: Driver) -> str:
        claims = {"sub": str(driver.id), "typ": REFRESH_TOKEN_TYPE, "jti": secrets.token_hex(16)}
        return self._encode(claims, self.refresh_ttl)

    def issue(self, driver: Driver) -> Tuple[str, str]:
        """Return a fresh (access_token, refresh_token) pair."""
        return self.create_access_token(driver), self.create_refresh_token(driver)

    def validate_access_token(self, token: str) -> UserIdentity:
        """
        Validate an access token.

        Raises:
            Unauthorized: ``TOKEN_EXPIRED`` when expired, ``DRIVER_NOT_VERIFIED``
                when the embedded driver is not verified, ``UNAUTHORIZED`` otherwise
        """
        claims = self._decode(token)
        driver_claims = claims.get("driver")
        if claims.get("typ") != ACCESS_TOKEN_TYPE or not isinstance(driver_claims, dict):
            raise Unauthorized()
        if not driver_claims.get("verified"):
            raise Unauthorized("DRIVER_NOT_VERIFIED", "Driver account is not verified")
        return UserIdentity(user_id=self._subject(claims), claims=claims)

    def validate_refresh_token(self, token: str) -> UserIdentity:
        """
        Validate a refresh token.

        Raises:
            Unauthorized: ``TOKEN_EXPIRED`` when expired, ``UNAUTHORIZED`` for
                anything that is not a refresh token
        """
        claims = self._decode(token)
        if claims.get("typ") != REFRESH_TOKEN_TYPE:
            raise Unauthorized()
        return UserIdentity(user_id=self._subject(claims), claims=claims)

    @staticmethod
    def _subject(claims: Dict[str, Any]) -> UUID:
        try:
            return UUID(claims["sub"])
        except (KeyError, TypeError, ValueError):
            raise Unauthorized()

    def build_refresh_cookie(self, refresh_token: str) -> str:
        """Set-Cookie directive carrying the refresh token."""
        return (
            f"{REFRESH_COOKIE_NAME}={refresh_token}; Path=/; Domain={self.domain}; "
            f"HttpOnly; Secure; SameSite=Lax; Max-Age={self.refresh_ttl}"
        )

    def build_expired_cookie(self) -> str:
        """Set-Cookie directive that clears the refresh token on the client."""
        return (
            f"{REFRESH_COOKIE_NAME}=''; Path=/; Domain={self.domain}; "
            f"HttpOnly; Secure; SameSite=Lax; Max-Age=0"
        )
