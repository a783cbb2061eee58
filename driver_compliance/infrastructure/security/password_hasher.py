"""Credential hashing with werkzeug's scrypt."""
import asyncio
import logging

from werkzeug.security import check_password_hash, generate_password_hash

from driver_compliance.domain.exceptions import InternalError
from driver_compliance.domain.interfaces.credential_hasher import ICredentialHasher


class WerkzeugCredentialHasher(ICredentialHasher):
    """
    Hashes secrets with scrypt and a random salt per call.

    The work runs in a worker thread to keep the event loop free.
    """

    def __init__(self, method: str = "scrypt:32768:8:1", salt_length: int = 16):
        """
        Initialize the hasher.

        Args:
            method: werkzeug hash method, ``scrypt:n:r:p``
            salt_length: Length of the random salt
        """
        self.method = method
        self.salt_length = salt_length
        self._logger = logging.getLogger(__name__)

    async def hash(self, plaintext: str) -> str:
        try:
            return await asyncio.to_thread(
                generate_password_hash, plaintext, method=self.method, salt_length=self.salt_length
            )
        except (ValueError, TypeError) as e:
            self._logger.error(f"Failed to hash credential: {e}", exc_info=True)
            raise InternalError("Failed to hash credential") from e

    async def verify(self, plaintext: str, hashed: str) -> bool:
        try:
            return await asyncio.to_thread(check_password_hash, hashed, plaintext)
        except (ValueError, TypeError) as e:
            self._logger.warning(f"Stored credential hash is unreadable: {e}")
            return False
