"""Domain error taxonomy.

Every error raised across the service boundary derives from ``DomainError``
and carries a stable ``error_code`` plus a ``content`` dict with structured
details, so callers can map errors without parsing messages.
"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for all domain errors."""

    error_code: str = "INTERNAL_ERROR"
    default_message: str = "An internal error occurred"

    def __init__(self, message: Optional[str] = None, **content: Any):
        self.message = message or self.default_message
        self.content: Dict[str, Any] = {k: v for k, v in content.items() if v is not None}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for transport layers."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "content": self.content or None,
        }


# Infrastructure failures collapse into these.

class InternalError(DomainError):
    """Generic internal failure (hashing, serialization, transport)."""


class DatabaseError(InternalError):
    default_message = "A database error occurred"


class CacheError(InternalError):
    default_message = "A cache error occurred"


# Authentication

class AuthenticationError(DomainError):
    error_code = "UNAUTHORIZED"
    default_message = "Unauthorized access"


class Unauthorized(AuthenticationError):
    """Token rejected. ``error_code`` tells which check failed."""

    def __init__(self, error_code: str = "UNAUTHORIZED", message: Optional[str] = None):
        self.error_code = error_code
        super().__init__(message)


# Driver

class DriverError(DomainError):
    """Base class for driver errors."""


class InvalidCredentials(DriverError):
    error_code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class DriverAlreadyExists(DriverError):
    error_code = "DRIVER_ALREADY_EXISTS"
    default_message = "Driver already exists"


class EmailDomainDenylisted(DriverError):
    error_code = "EMAIL_DOMAIN_DENYLISTED"

    def __init__(self, domain: str):
        self.domain = domain
        super().__init__(f"Email domain '{domain}' is denylisted", domain=domain)


class DriverNotFound(DriverError):
    error_code = "DRIVER_NOT_FOUND"
    default_message = "Driver not found"


class DriverLimitReached(DriverError):
    error_code = "DRIVER_LIMIT_REACHED"
    default_message = "Driver limit reached"

    def __init__(self, start_at: str, end_at: Optional[str] = None):
        self.start_at = start_at
        self.end_at = end_at
        super().__init__(start_at=start_at, end_at=end_at)


class DriverLimitationNotFound(DriverError):
    error_code = "DRIVER_LIMITATION_NOT_FOUND"
    default_message = "Driver limitation not found"


class DriverSuspension(DriverError):
    error_code = "DRIVER_SUSPENDED"
    default_message = "Driver is suspended"

    def __init__(self, driver_message: Optional[str], start_at: str, end_at: Optional[str] = None):
        self.driver_message = driver_message
        self.start_at = start_at
        self.end_at = end_at
        super().__init__(message=None, driver_message=driver_message, start_at=start_at, end_at=end_at)


class DriverSuspensionNotFound(DriverError):
    error_code = "DRIVER_SUSPENSION_NOT_FOUND"
    default_message = "Driver suspension not found"


class InvalidRestPeriod(DriverError):
    error_code = "INVALID_REST_PERIOD"

    def __init__(self, details: str):
        self.details = details
        super().__init__(f"Invalid rest period: {details}", details=details)


class InvalidVerificationKey(DriverError):
    error_code = "INVALID_VERIFICATION_KEY"
    default_message = "Invalid verification key"


class AccountAlreadyVerified(DriverError):
    error_code = "ACCOUNT_ALREADY_VERIFIED"
    default_message = "Account already verified"


# Workday

class WorkdayError(DomainError):
    """Base class for workday errors."""


class WorkdayAlreadyExists(WorkdayError):
    error_code = "WORKDAY_ALREADY_EXISTS"
    default_message = "Workday already exists for the given date"


class WorkdayNotFound(WorkdayError):
    error_code = "WORKDAY_NOT_FOUND"
    default_message = "Workday not found"


class WorkdayGarbageAlreadyExists(WorkdayError):
    error_code = "WORKDAY_GARBAGE_ALREADY_EXISTS"
    default_message = "Workday is already scheduled for deletion"


class WorkdayGarbageNotFound(WorkdayError):
    error_code = "WORKDAY_GARBAGE_NOT_FOUND"
    default_message = "Workday garbage not found"


# Mail

class MailError(DomainError):
    """Base class for mail errors."""


class MailNotSent(MailError):
    error_code = "MAIL_NOT_SENT"
    default_message = "Cannot send email message"


class MailTypeNotFound(MailError):
    error_code = "MAIL_TYPE_NOT_FOUND"
    default_message = "Mail type not found"


class MailNotFound(MailError):
    error_code = "MAIL_NOT_FOUND"
    default_message = "Mail not found"


# Updates

class UpdateError(DomainError):
    """Base class for update errors."""


class UpdateNotFound(UpdateError):
    error_code = "UPDATE_NOT_FOUND"
    default_message = "The requested update was not found"


# Documents

class DocumentError(DomainError):
    """Base class for document errors."""


class DocumentGenerationFailed(DocumentError):
    error_code = "DOCUMENT_GENERATION_FAILED"
    default_message = "The document could not be generated"


# Health

class HealthError(DomainError):
    """Base class for health errors."""


class DatabaseUnhealthy(HealthError):
    error_code = "DATABASE_UNHEALTHY"
    default_message = "Database is unhealthy"


class CacheUnhealthy(HealthError):
    error_code = "CACHE_UNHEALTHY"
    default_message = "Cache is unhealthy"
