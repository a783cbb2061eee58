"""In-memory implementations of the domain interfaces."""
import itertools
import secrets
import string
import time
import uuid
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple
from uuid import UUID

from driver_compliance.domain.entities.driver import (
    CreateDriverRequest,
    Driver,
    EntityLimit,
    EntityType,
    Suspension,
)
from driver_compliance.domain.entities.mail import DriverMail, DriverMailType, MailStatus
from driver_compliance.domain.entities.update import UpdateRow
from driver_compliance.domain.entities.workday import Workday, WorkdayGarbage, WorkdayRequest, WorkdayRow
from driver_compliance.domain.exceptions import (
    CacheError,
    DatabaseError,
    DriverAlreadyExists,
    DriverLimitationNotFound,
    DriverNotFound,
    DriverSuspensionNotFound,
    MailNotFound,
    MailNotSent,
    UpdateNotFound,
    WorkdayAlreadyExists,
    WorkdayGarbageAlreadyExists,
    WorkdayGarbageNotFound,
    WorkdayNotFound,
)
from driver_compliance.domain.interfaces import (
    ICacheStore,
    IDocumentGenerator,
    IDriverRepository,
    IHealthRepository,
    IMailRepository,
    IMailSender,
    IUpdateRepository,
    IWorkdayRepository,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryDriverRepository(IDriverRepository):
    """Driver store handing out copies, so callers only see committed state."""

    def __init__(self):
        self.drivers: Dict[UUID, Driver] = {}
        self.limits: Dict[int, EntityLimit] = {}
        self.suspensions: Dict[int, Suspension] = {}
        self._ids = itertools.count(1)

    def _stored(self, driver_id: UUID) -> Driver:
        if driver_id not in self.drivers:
            raise DriverNotFound()
        return self.drivers[driver_id]

    async def count_drivers(self) -> int:
        return len(self.drivers)

    async def get_driver_by_id(self, driver_id: UUID) -> Optional[Driver]:
        driver = self.drivers.get(driver_id)
        return replace(driver) if driver else None

    async def get_driver_by_email(self, email: str) -> Optional[Driver]:
        driver = next((d for d in self.drivers.values() if d.email == email), None)
        return replace(driver) if driver else None

    async def create_driver(self, create_request: CreateDriverRequest) -> Driver:
        if await self.get_driver_by_email(create_request.email):
            raise DriverAlreadyExists()
        driver = Driver(
            id=uuid.uuid4(),
            firstname=create_request.firstname,
            lastname=create_request.lastname,
            email=create_request.email,
            password_hash=create_request.password,
            language=create_request.language,
            gender=create_request.gender,
            created_at=_now(),
        )
        self.drivers[driver.id] = driver
        return replace(driver)

    async def update_driver(self, driver: Driver) -> Driver:
        stored = self._stored(driver.id)
        updated = replace(driver, verified_at=stored.verified_at or driver.verified_at)
        self.drivers[driver.id] = updated
        return replace(updated)

    async def touch_last_login(self, driver_id: UUID, at: datetime) -> Driver:
        stored = self._stored(driver_id)
        stored.last_login_at = at
        return replace(stored)

    async def set_refresh_token_hash(self, driver_id: UUID, refresh_token_hash: Optional[str]) -> None:
        self._stored(driver_id).refresh_token_hash = refresh_token_hash

    async def mark_verified(self, driver_id: UUID, at: datetime) -> Driver:
        stored = self._stored(driver_id)
        stored.verified_at = stored.verified_at or at
        return replace(stored)

    async def update_password(self, driver_id: UUID, password_hash: str) -> Driver:
        stored = self._stored(driver_id)
        stored.password_hash = password_hash
        stored.refresh_token_hash = None
        return replace(stored)

    async def delete_driver(self, driver_id: UUID) -> None:
        if self.drivers.pop(driver_id, None) is None:
            raise DriverNotFound()

    async def set_rest_periods(self, driver_id: UUID, rest_json: Optional[str]) -> None:
        if driver_id not in self.drivers:
            raise DriverNotFound()
        self.drivers[driver_id].rest_json = rest_json

    async def get_active_limit(self, entity_type: EntityType, at: datetime) -> Optional[EntityLimit]:
        active = [l for l in self.limits.values() if l.entity_type == entity_type and l.is_active(at)]
        return max(active, key=lambda l: l.start_at, default=None)

    async def create_limit(self, limit: EntityLimit) -> EntityLimit:
        limit.id = next(self._ids)
        self.limits[limit.id] = limit
        return limit

    async def delete_limit(self, limit_id: int) -> None:
        if self.limits.pop(limit_id, None) is None:
            raise DriverLimitationNotFound()

    async def get_active_suspension(self, driver_id: UUID, at: datetime) -> Optional[Suspension]:
        active = [s for s in self.suspensions.values() if s.driver_id == driver_id and s.is_active(at)]
        return max(active, key=lambda s: s.start_at, default=None)

    async def create_suspension(self, suspension: Suspension) -> Suspension:
        suspension.id = next(self._ids)
        self.suspensions[suspension.id] = suspension
        return suspension

    async def delete_suspension(self, suspension_id: int) -> None:
        if self.suspensions.pop(suspension_id, None) is None:
            raise DriverSuspensionNotFound()


class InMemoryWorkdayRepository(IWorkdayRepository):
    """Workday store with the same constraints as the relational schema."""

    def __init__(self):
        self.workdays: Dict[Tuple[UUID, date], WorkdayRow] = {}
        self.garbage: Dict[Tuple[UUID, date], WorkdayGarbage] = {}
        self.reads = 0

    def _active(self, driver_id: UUID) -> List[WorkdayRow]:
        return sorted(
            (
                row for key, row in self.workdays.items()
                if key[0] == driver_id and key not in self.garbage
            ),
            key=lambda row: row.date,
        )

    async def get_workdays_by_month(self, driver_id: UUID, month: int, year: int) -> List[WorkdayRow]:
        self.reads += 1
        return [row for row in self._active(driver_id) if row.date.month == month and row.date.year == year]

    async def get_workdays_by_period(
        self,
        driver_id: UUID,
        start_date: date,
        end_date: date,
        page: int,
        limit: int
    ) -> Tuple[List[WorkdayRow], int]:
        self.reads += 1
        rows = [row for row in self._active(driver_id) if start_date <= row.date <= end_date]
        offset = (page - 1) * limit
        return rows[offset:offset + limit], len(rows)

    async def create_workday(self, driver_id: UUID, request: WorkdayRequest) -> WorkdayRow:
        key = (driver_id, request.date)
        if key in self.workdays:
            raise WorkdayAlreadyExists()
        row = WorkdayRow(
            driver_id=driver_id,
            date=request.date,
            start_time=request.start_time,
            end_time=request.end_time,
            rest_time=request.rest_time,
            overnight_rest=request.overnight_rest,
        )
        self.workdays[key] = row
        return row

    async def update_workday(self, driver_id: UUID, request: WorkdayRequest) -> WorkdayRow:
        key = (driver_id, request.date)
        if key not in self.workdays:
            raise WorkdayNotFound()
        row = WorkdayRow(
            driver_id=driver_id,
            date=request.date,
            start_time=request.start_time,
            end_time=request.end_time,
            rest_time=request.rest_time,
            overnight_rest=request.overnight_rest,
        )
        self.workdays[key] = row
        return row

    async def delete_workday(self, driver_id: UUID, workday_date: date) -> None:
        key = (driver_id, workday_date)
        if self.workdays.pop(key, None) is None:
            raise WorkdayNotFound()
        self.garbage.pop(key, None)

    async def get_workday_garbage(self, driver_id: UUID) -> List[WorkdayGarbage]:
        return sorted(
            (g for key, g in self.garbage.items() if key[0] == driver_id),
            key=lambda g: g.workday_date,
        )

    async def create_workday_garbage(
        self,
        driver_id: UUID,
        workday_date: date,
        scheduled_deletion_date: date,
        created_at: Optional[datetime] = None
    ) -> WorkdayGarbage:
        key = (driver_id, workday_date)
        if key not in self.workdays:
            raise WorkdayNotFound()
        if key in self.garbage:
            raise WorkdayGarbageAlreadyExists()
        garbage = WorkdayGarbage(
            driver_id=driver_id,
            workday_date=workday_date,
            scheduled_deletion_date=scheduled_deletion_date,
            created_at=created_at or _now(),
        )
        self.garbage[key] = garbage
        return garbage

    async def delete_workday_garbage(self, driver_id: UUID, workday_date: date) -> None:
        if self.garbage.pop((driver_id, workday_date), None) is None:
            raise WorkdayGarbageNotFound()

    async def get_document_years(self, driver_id: UUID) -> List[int]:
        return sorted({row.date.year for row in self._active(driver_id)})

    async def get_document_months(self, driver_id: UUID, year: int) -> List[int]:
        return sorted({row.date.month for row in self._active(driver_id) if row.date.year == year})


class InMemoryUpdateRepository(IUpdateRepository):

    def __init__(self, rows: Optional[List[UpdateRow]] = None):
        self.rows = rows or []
        self.reads = 0

    async def get_updates_by_version(self, version: str, page: int, limit: int) -> Tuple[List[UpdateRow], int]:
        self.reads += 1
        drivers_rows = [row for row in self.rows if row.entity_type == EntityType.DRIVER]
        reference = next((row for row in drivers_rows if row.version == version), None)
        if reference is None:
            raise UpdateNotFound()
        newer = sorted((row for row in drivers_rows if row.created_at > reference.created_at), key=lambda r: r.created_at)
        offset = (page - 1) * limit
        return newer[offset:offset + limit], len(newer)


class InMemoryCacheStore(ICacheStore):
    """Cache with TTL expiry driven by an injectable monotonic clock."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self.entries: Dict[str, Tuple[str, float]] = {}
        self.fail_reads = False
        self.healthy = True

    async def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise CacheError()
        entry = self.entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self.entries[key]
            return None
        return value

    async def set_with_ttl(self, key: str, value: str, ttl: int) -> None:
        self.entries[key] = (value, self._clock() + ttl)

    async def delete(self, key: str) -> bool:
        return self.entries.pop(key, None) is not None

    async def delete_by_prefix(self, prefix: str) -> int:
        keys = [key for key in self.entries if key.startswith(prefix)]
        for key in keys:
            del self.entries[key]
        return len(keys)

    async def generate_random_token(self, length: int) -> str:
        alphabet = string.ascii_letters + string.digits
        while True:
            token = "".join(secrets.choice(alphabet) for _ in range(length))
            if any(c.isalpha() for c in token) and any(c.isdigit() for c in token):
                return token

    async def ping(self) -> bool:
        return self.healthy


class RecordingMailSender(IMailSender):

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: List[Tuple[str, str, str]] = []

    async def send_email(self, to: str, subject: str, body: str) -> None:
        if self.fail:
            raise MailNotSent()
        self.sent.append((to, subject, body))


class InMemoryMailRepository(IMailRepository):

    def __init__(self):
        self.mails: Dict[UUID, DriverMail] = {}

    async def create_mail(
        self,
        driver_id: UUID,
        mail_type: DriverMailType,
        email_used: str,
        description: str,
        content: Optional[str] = None
    ) -> DriverMail:
        mail = DriverMail(
            id=uuid.uuid4(),
            driver_id=driver_id,
            mail_type=mail_type,
            email_used=email_used,
            status=MailStatus.PENDING,
            description=description,
            content=content,
            created_at=_now(),
        )
        self.mails[mail.id] = mail
        return mail

    async def update_mail_status(
        self,
        mail_id: UUID,
        status: MailStatus,
        sent_at: Optional[datetime] = None
    ) -> DriverMail:
        mail = self.mails.get(mail_id)
        if mail is None:
            raise MailNotFound()
        mail.status = status
        mail.sent_at = sent_at
        return mail


class StubDocumentGenerator(IDocumentGenerator):

    def __init__(self, document: Optional[bytes] = b"%PDF-1.7"):
        self.document = document
        self.calls: List[dict] = []

    async def generate_monthly_report(
        self,
        firstname: str,
        lastname: str,
        language: str,
        month: int,
        year: int,
        workdays: List[Workday]
    ) -> Optional[bytes]:
        self.calls.append({
            "firstname": firstname,
            "lastname": lastname,
            "language": language,
            "month": month,
            "year": year,
            "workdays": workdays,
        })
        return self.document


class StubHealthRepository(IHealthRepository):

    def __init__(self, healthy: bool = True, error: bool = False):
        self.healthy = healthy
        self.error = error

    async def ping(self) -> bool:
        if self.error:
            raise DatabaseError()
        return self.healthy
