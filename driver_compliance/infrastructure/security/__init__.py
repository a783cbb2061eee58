"""Security adapters."""
from driver_compliance.infrastructure.security.password_hasher import WerkzeugCredentialHasher

__all__ = ["WerkzeugCredentialHasher"]
