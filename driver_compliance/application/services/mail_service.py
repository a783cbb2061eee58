"""Service for the transactional mails sent to drivers."""
import logging
from datetime import datetime
from typing import Callable, Optional

from driver_compliance.application.services.cache_coordinator import CacheAsideCoordinator, CacheKeys
from driver_compliance.domain.entities.driver import Driver
from driver_compliance.domain.entities.mail import DriverMail, DriverMailType, MailStatus
from driver_compliance.domain.exceptions import MailNotSent
from driver_compliance.domain.interfaces.mail import IMailRepository, IMailSender
from driver_compliance.utils.clock import utcnow


class MailService:
    """
    Sends verification and password-reset mails.

    Each mail is recorded as PENDING before it is handed to the sender, then
    moved to SUCCESS or FAILED depending on the outcome.
    """

    def __init__(
        self,
        mail_sender: IMailSender,
        mail_repository: IMailRepository,
        cache: CacheAsideCoordinator,
        verify_email_ttl: int = 900,
        reset_password_ttl: int = 900,
        token_length: int = 100,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize mail service.

        Args:
            mail_sender: Outgoing mail transport (Dependency Injection)
            mail_repository: Mail log (Dependency Injection)
            cache: Coordinator holding the single-use tokens
            verify_email_ttl: Verification token lifetime in seconds
            reset_password_ttl: Reset token lifetime in seconds
            token_length: Length of generated tokens
            clock: Returns the current aware datetime
        """
        self.mail_sender = mail_sender
        self.mail_repository = mail_repository
        self.cache = cache
        self.verify_email_ttl = verify_email_ttl
        self.reset_password_ttl = reset_password_ttl
        self.token_length = token_length
        self._clock = clock or utcnow
        self._logger = logging.getLogger(__name__)

    async def send_creation_email(self, driver: Driver) -> DriverMail:
        """
        Issue a verification token and mail it to a new driver.

        Args:
            driver: Freshly created driver

        Returns:
            The mail log entry in its final state

        Raises:
            MailNotSent: If the transport rejected the message
        """
        token = await self.cache.issue_token(
            CacheKeys.verify_email(driver.id), self.verify_email_ttl, self.token_length
        )
        body = (
            f"Hello {driver.firstname},\n\n"
            f"Welcome! Use the following key to verify your account:\n\n{token}\n\n"
            f"This key expires in {self.verify_email_ttl // 60} minutes."
        )
        return await self._send(
            driver,
            DriverMailType.ACCOUNT_VERIFICATION,
            subject="Verify your account",
            body=body,
            description="Account creation verification email",
        )

    async def send_password_reset_email(self, driver: Driver) -> DriverMail:
        """Issue a password-reset token and mail it to ``driver``."""
        token = await self.cache.issue_token(
            CacheKeys.reset_password(driver.id), self.reset_password_ttl, self.token_length
        )
        body = (
            f"Hello {driver.firstname},\n\n"
            f"Use the following key to reset your password:\n\n{token}\n\n"
            f"This key expires in {self.reset_password_ttl // 60} minutes."
        )
        return await self._send(
            driver,
            DriverMailType.PASSWORD_RESET,
            subject="Reset your password",
            body=body,
            description="Password reset email",
        )

    async def _send(
        self,
        driver: Driver,
        mail_type: DriverMailType,
        subject: str,
        body: str,
        description: str
    ) -> DriverMail:
        mail = await self.mail_repository.create_mail(
            driver_id=driver.id,
            mail_type=mail_type,
            email_used=driver.email,
            description=description,
        )

        try:
            await self.mail_sender.send_email(driver.email, subject, body)
        except MailNotSent:
            self._logger.error(f"Failed to send {mail_type.name} mail {mail.id} to driver {driver.id}")
            await self.mail_repository.update_mail_status(mail.id, MailStatus.FAILED)
            raise

        self._logger.info(f"Sent {mail_type.name} mail {mail.id} to driver {driver.id}")
        return await self.mail_repository.update_mail_status(mail.id, MailStatus.SUCCESS, sent_at=self._clock())
