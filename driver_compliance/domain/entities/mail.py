"""Mail log entities."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID


class MailStatus(str, Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class DriverMailType(int, Enum):
    """Identifiers of the ``driver_mail_types`` rows."""

    ACCOUNT_VERIFICATION = 1
    PASSWORD_RESET = 2
    ACCOUNT_CHANGE = 3
    MONTHLY_REPORTS = 4


@dataclass
class DriverMail:
    """A mail sent (or attempted) to a driver."""

    id: UUID
    driver_id: UUID
    mail_type: DriverMailType
    email_used: str
    status: MailStatus
    description: str
    created_at: datetime
    content: Optional[str] = None
    sent_at: Optional[datetime] = None
