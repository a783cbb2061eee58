"""Tests for the SQL repositories against a mocked session."""
import uuid
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date, datetime, time, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import select
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError, OperationalError

from driver_compliance.domain.entities.driver import Driver, EntityType
from driver_compliance.domain.entities.mail import DriverMailType
from driver_compliance.domain.entities.workday import WorkdayRequest
from driver_compliance.domain.exceptions import (
    DatabaseError,
    DriverAlreadyExists,
    DriverNotFound,
    MailTypeNotFound,
    UpdateNotFound,
    WorkdayAlreadyExists,
    WorkdayGarbageAlreadyExists,
    WorkdayGarbageNotFound,
    WorkdayNotFound,
)
from driver_compliance.domain.entities.driver import CreateDriverRequest
from driver_compliance.infrastructure.repositories import (
    SqlDriverRepository,
    SqlMailRepository,
    SqlUpdateRepository,
    SqlWorkdayRepository,
)
from driver_compliance.infrastructure.repositories.base import (
    FOREIGN_KEY_VIOLATION,
    UNIQUE_VIOLATION,
    sqlstate,
)
from driver_compliance.infrastructure.repositories.driver_repository import _active_window
from driver_compliance.infrastructure.repositories.models import maximum_entity_limits, workdays
from driver_compliance.infrastructure.repositories.workday_repository import _active, _month_bounds

NOW = datetime(2025, 3, 15, 12, 0, 0, tzinfo=timezone.utc)
DRIVER_ID = uuid.uuid4()


class PgError(Exception):
    """Driver-level error exposing a SQLSTATE the way asyncpg does."""

    def __init__(self, code):
        super().__init__(code)
        self.sqlstate = code


class LegacyPgError(Exception):

    def __init__(self, code):
        super().__init__(code)
        self.pgcode = code


class SessionDatabase:
    """Database handle whose sessions are a single mock."""

    def __init__(self, mock_session):
        self.mock_session = mock_session

    @asynccontextmanager
    async def session(self):
        yield self.mock_session


def integrity_error(code) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, PgError(code))


def result_with(row=None, rows=None, rowcount=1, scalar=None) -> MagicMock:
    result = MagicMock()
    result.mappings.return_value.first.return_value = row
    result.mappings.return_value.one.return_value = row
    result.mappings.return_value.all.return_value = rows or []
    result.rowcount = rowcount
    result.scalar_one.return_value = scalar
    result.scalar_one_or_none.return_value = scalar
    return result


def session_returning(*results) -> AsyncMock:
    session = AsyncMock()
    session.execute.side_effect = list(results)
    return session


def session_raising(error) -> AsyncMock:
    session = AsyncMock()
    session.execute.side_effect = error
    return session


def compiled(statement):
    return statement.compile(dialect=postgresql.dialect())


def driver_row(**overrides) -> dict:
    driver = Driver(
        id=DRIVER_ID,
        firstname="John",
        lastname="Doe",
        email="john.doe@example.com",
        password_hash="hash",
        language="fr",
        created_at=NOW,
    )
    row = asdict(driver)
    row.update(overrides)
    return row


def workday_request() -> WorkdayRequest:
    return WorkdayRequest(date=date(2025, 3, 3), start_time=time(8, 0), rest_time=time(1, 0))


class TestSqlState:

    def test_reads_sqlstate(self):
        assert sqlstate(integrity_error(UNIQUE_VIOLATION)) == "23505"

    def test_reads_pgcode(self):
        assert sqlstate(IntegrityError("INSERT ...", {}, LegacyPgError(FOREIGN_KEY_VIOLATION))) == "23503"

    def test_missing_code(self):
        assert sqlstate(IntegrityError("INSERT ...", {}, Exception("boom"))) is None


class TestQueryBuilding:

    @pytest.mark.parametrize("month, year, expected", [
        (12, 2024, (date(2024, 12, 1), date(2025, 1, 1))),
        (2, 2024, (date(2024, 2, 1), date(2024, 3, 1))),
        (1, 2025, (date(2025, 1, 1), date(2025, 2, 1))),
    ])
    def test_month_bounds(self, month, year, expected):
        assert _month_bounds(month, year) == expected

    def test_active_window_is_open_ended_and_half_open(self):
        statement = compiled(select(maximum_entity_limits).where(_active_window(maximum_entity_limits, NOW)))
        sql = str(statement)

        assert "maximum_entity_limits.start_at <=" in sql
        assert "maximum_entity_limits.end_at IS NULL OR maximum_entity_limits.end_at >" in sql
        assert list(statement.params.values()).count(NOW) == 2

    def test_active_workdays_exclude_garbage(self):
        sql = str(compiled(select(workdays).where(_active(DRIVER_ID))))

        assert "NOT (EXISTS" in sql
        assert "workday_garbage.driver_id = workdays.driver_id" in sql
        assert "workday_garbage.workday_date = workdays.date" in sql

    @pytest.mark.asyncio
    async def test_month_query_is_bounded_by_next_month(self):
        session = session_returning(result_with(rows=[]))
        repository = SqlWorkdayRepository(SessionDatabase(session))

        assert await repository.get_workdays_by_month(DRIVER_ID, 12, 2024) == []

        params = compiled(session.execute.call_args.args[0]).params
        assert date(2024, 12, 1) in params.values()
        assert date(2025, 1, 1) in params.values()

    @pytest.mark.asyncio
    async def test_mark_verified_keeps_first_instant(self):
        session = session_returning(result_with(row=driver_row(verified_at=NOW)))
        repository = SqlDriverRepository(SessionDatabase(session))

        driver = await repository.mark_verified(DRIVER_ID, NOW)

        assert driver.verified_at == NOW
        sql = str(compiled(session.execute.call_args.args[0]))
        assert "verified_at=coalesce(drivers.verified_at" in sql
        session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_full_update_cannot_clear_verification(self):
        session = session_returning(result_with(row=driver_row(verified_at=NOW)))
        repository = SqlDriverRepository(SessionDatabase(session))
        stale = Driver(**driver_row(verified_at=None, firstname="Johnny"))

        updated = await repository.update_driver(stale)

        assert updated.verified_at == NOW
        assert "verified_at=coalesce(drivers.verified_at" in str(compiled(session.execute.call_args.args[0]))

    @pytest.mark.asyncio
    async def test_refresh_hash_update_touches_one_column(self):
        session = session_returning(result_with(row=driver_row(refresh_token_hash="new-hash")))
        repository = SqlDriverRepository(SessionDatabase(session))

        await repository.set_refresh_token_hash(DRIVER_ID, "new-hash")

        sql = str(compiled(session.execute.call_args.args[0]))
        assert "SET refresh_token_hash=" in sql
        assert "verified_at" not in sql.split("RETURNING")[0]
        assert "rest_json" not in sql.split("RETURNING")[0]


class TestIntegrityMapping:

    @pytest.mark.asyncio
    async def test_duplicate_email(self):
        repository = SqlDriverRepository(SessionDatabase(session_raising(integrity_error(UNIQUE_VIOLATION))))
        request = CreateDriverRequest(
            firstname="John", lastname="Doe", email="john.doe@example.com", password="hash", language="fr"
        )
        with pytest.raises(DriverAlreadyExists):
            await repository.create_driver(request)

    @pytest.mark.asyncio
    async def test_duplicate_workday(self):
        repository = SqlWorkdayRepository(SessionDatabase(session_raising(integrity_error(UNIQUE_VIOLATION))))
        with pytest.raises(WorkdayAlreadyExists):
            await repository.create_workday(DRIVER_ID, workday_request())

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code, expected", [
        (UNIQUE_VIOLATION, WorkdayGarbageAlreadyExists),
        (FOREIGN_KEY_VIOLATION, WorkdayNotFound),
    ])
    async def test_garbage_conflicts(self, code, expected):
        repository = SqlWorkdayRepository(SessionDatabase(session_raising(integrity_error(code))))
        with pytest.raises(expected):
            await repository.create_workday_garbage(DRIVER_ID, date(2025, 3, 3), date(2025, 4, 14))

    @pytest.mark.asyncio
    async def test_unknown_mail_type(self):
        repository = SqlMailRepository(SessionDatabase(session_raising(integrity_error(FOREIGN_KEY_VIOLATION))))
        with pytest.raises(MailTypeNotFound):
            await repository.create_mail(DRIVER_ID, DriverMailType.PASSWORD_RESET, "john.doe@example.com", "reset")

    @pytest.mark.asyncio
    async def test_unmapped_constraint_is_database_error(self):
        repository = SqlWorkdayRepository(SessionDatabase(session_raising(integrity_error("23514"))))
        with pytest.raises(DatabaseError):
            await repository.create_workday(DRIVER_ID, workday_request())

    @pytest.mark.asyncio
    async def test_driver_failure_is_database_error(self):
        error = OperationalError("SELECT ...", {}, Exception("connection refused"))
        repository = SqlDriverRepository(SessionDatabase(session_raising(error)))
        with pytest.raises(DatabaseError):
            await repository.get_driver_by_email("john.doe@example.com")


class TestMissingRows:

    @pytest.mark.asyncio
    async def test_delete_unknown_driver(self):
        repository = SqlDriverRepository(SessionDatabase(session_returning(result_with(rowcount=0))))
        with pytest.raises(DriverNotFound):
            await repository.delete_driver(DRIVER_ID)

    @pytest.mark.asyncio
    async def test_verify_unknown_driver(self):
        repository = SqlDriverRepository(SessionDatabase(session_returning(result_with(row=None))))
        with pytest.raises(DriverNotFound):
            await repository.mark_verified(DRIVER_ID, NOW)

    @pytest.mark.asyncio
    async def test_update_unknown_workday(self):
        repository = SqlWorkdayRepository(SessionDatabase(session_returning(result_with(row=None))))
        with pytest.raises(WorkdayNotFound):
            await repository.update_workday(DRIVER_ID, workday_request())

    @pytest.mark.asyncio
    async def test_restore_without_garbage(self):
        repository = SqlWorkdayRepository(SessionDatabase(session_returning(result_with(rowcount=0))))
        with pytest.raises(WorkdayGarbageNotFound):
            await repository.delete_workday_garbage(DRIVER_ID, date(2025, 3, 3))

    @pytest.mark.asyncio
    async def test_unknown_update_version(self):
        repository = SqlUpdateRepository(SessionDatabase(session_returning(result_with(scalar=None))))
        with pytest.raises(UpdateNotFound):
            await repository.get_updates_by_version("9.9.9", 1, 20)

    @pytest.mark.asyncio
    async def test_updates_after_version(self):
        newer = {
            "id": 2,
            "version": "1.1.0",
            "description": "Monthly reports",
            "entity_type": EntityType.DRIVER,
            "created_at": NOW,
            "mandatory_completion_date": None,
            "created_by": None,
        }
        session = session_returning(
            result_with(scalar=NOW - timedelta(days=30)),
            result_with(rows=[newer]),
            result_with(scalar=1),
        )
        repository = SqlUpdateRepository(SessionDatabase(session))

        rows, total = await repository.get_updates_by_version("1.0.0", 1, 20)

        assert total == 1
        assert [row.version for row in rows] == ["1.1.0"]
