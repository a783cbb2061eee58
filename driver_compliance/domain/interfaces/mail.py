"""Interfaces for outgoing mail and the mail log."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from driver_compliance.domain.entities.mail import DriverMail, DriverMailType, MailStatus


class IMailSender(ABC):
    """Transport for outgoing mail."""

    @abstractmethod
    async def send_email(self, to: str, subject: str, body: str) -> None:
        """
        Send a plain-text email.

        Args:
            to: Recipient address
            subject: Subject line
            body: Plain-text body

        Raises:
            MailNotSent: If the transport rejected the message
        """
        pass


class IMailRepository(ABC):
    """Durable log of the mails sent to drivers."""

    @abstractmethod
    async def create_mail(
        self,
        driver_id: UUID,
        mail_type: DriverMailType,
        email_used: str,
        description: str,
        content: Optional[str] = None
    ) -> DriverMail:
        """
        Record a mail in PENDING state.

        Raises:
            MailTypeNotFound: If ``mail_type`` is not a known type
        """
        pass

    @abstractmethod
    async def update_mail_status(
        self,
        mail_id: UUID,
        status: MailStatus,
        sent_at: Optional[datetime] = None
    ) -> DriverMail:
        """
        Move a mail to its final status.

        Raises:
            MailNotFound: If no row matches
        """
        pass
