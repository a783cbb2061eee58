"""SQL repository for the driver mail log."""
from datetime import datetime
from typing import Any, Mapping, Optional
from uuid import UUID

from sqlalchemy import insert, update
from sqlalchemy.exc import IntegrityError

from driver_compliance.domain.entities.mail import DriverMail, DriverMailType, MailStatus
from driver_compliance.domain.exceptions import MailNotFound, MailTypeNotFound
from driver_compliance.domain.interfaces.mail import IMailRepository
from driver_compliance.infrastructure.repositories.base import FOREIGN_KEY_VIOLATION, SqlRepository, sqlstate
from driver_compliance.infrastructure.repositories.models import driver_mails


def _to_mail(row: Mapping[str, Any]) -> DriverMail:
    data = dict(row)
    data["mail_type"] = DriverMailType(data.pop("mail_type_id"))
    return DriverMail(**data)


class SqlMailRepository(SqlRepository, IMailRepository):
    """Records every transactional mail and its delivery status."""

    async def create_mail(
        self,
        driver_id: UUID,
        mail_type: DriverMailType,
        email_used: str,
        description: str,
        content: Optional[str] = None
    ) -> DriverMail:
        statement = insert(driver_mails).values(
            driver_id=driver_id,
            mail_type_id=int(mail_type),
            email_used=email_used,
            status=MailStatus.PENDING,
            description=description,
            content=content,
        ).returning(*driver_mails.c)

        async with self._session() as session:
            try:
                row = (await session.execute(statement)).mappings().one()
                await session.commit()
            except IntegrityError as e:
                if sqlstate(e) == FOREIGN_KEY_VIOLATION:
                    raise MailTypeNotFound()
                raise
            return _to_mail(row)

    async def update_mail_status(
        self,
        mail_id: UUID,
        status: MailStatus,
        sent_at: Optional[datetime] = None
    ) -> DriverMail:
        statement = (
            update(driver_mails)
            .where(driver_mails.c.id == mail_id)
            .values(status=status, sent_at=sent_at)
            .returning(*driver_mails.c)
        )
        async with self._session() as session:
            row = (await session.execute(statement)).mappings().first()
            await session.commit()
            if row is None:
                raise MailNotFound()
            return _to_mail(row)
