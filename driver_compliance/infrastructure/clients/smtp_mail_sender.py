"""SMTP mail transport."""
import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from driver_compliance.domain.exceptions import MailNotSent
from driver_compliance.domain.interfaces.mail import IMailSender


class SmtpMailSender(IMailSender):
    """Sends plain-text mail through an SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        timeout: float = 30
    ):
        """
        Initialize the sender.

        Args:
            host: SMTP relay host
            port: SMTP relay port
            sender: From address
            username: Optional login
            password: Optional password
            use_tls: Upgrade the connection with STARTTLS
            timeout: Socket timeout in seconds
        """
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout
        self._logger = logging.getLogger(__name__)

    def _build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        return message

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username and self.password:
                smtp.login(self.username, self.password)
            smtp.send_message(message)

    async def send_email(self, to: str, subject: str, body: str) -> None:
        message = self._build_message(to, subject, body)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            self._logger.error(f"Failed to send email to {to}: {e}", exc_info=True)
            raise MailNotSent() from e
        self._logger.debug(f"Email '{subject}' sent to {to}")
