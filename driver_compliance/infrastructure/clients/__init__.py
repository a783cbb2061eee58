"""Clients for external services."""
from driver_compliance.infrastructure.clients.document_client import HttpDocumentGenerator
from driver_compliance.infrastructure.clients.smtp_mail_sender import SmtpMailSender

__all__ = [
    "HttpDocumentGenerator",
    "SmtpMailSender",
]
