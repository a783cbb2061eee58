"""SQL repository for workdays and their soft-delete markers."""
from datetime import date, datetime
from typing import Any, List, Mapping, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, delete, exists, extract, func, insert, select, update
from sqlalchemy.exc import IntegrityError

from driver_compliance.domain.entities.workday import WorkdayGarbage, WorkdayRequest, WorkdayRow
from driver_compliance.domain.exceptions import (
    WorkdayAlreadyExists,
    WorkdayGarbageAlreadyExists,
    WorkdayGarbageNotFound,
    WorkdayNotFound,
)
from driver_compliance.domain.interfaces.workday_repository import IWorkdayRepository
from driver_compliance.infrastructure.repositories.base import (
    FOREIGN_KEY_VIOLATION,
    UNIQUE_VIOLATION,
    SqlRepository,
    sqlstate,
)
from driver_compliance.infrastructure.repositories.models import workday_garbage, workdays


def _to_row(row: Mapping[str, Any]) -> WorkdayRow:
    return WorkdayRow(**dict(row))


def _to_garbage(row: Mapping[str, Any]) -> WorkdayGarbage:
    return WorkdayGarbage(**dict(row))


def _month_bounds(month: int, year: int) -> Tuple[date, date]:
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end


def _active(driver_id: UUID):
    """Workdays of the driver that carry no soft-delete marker."""
    garbage_exists = exists().where(
        and_(
            workday_garbage.c.driver_id == workdays.c.driver_id,
            workday_garbage.c.workday_date == workdays.c.date,
        )
    )
    return and_(workdays.c.driver_id == driver_id, ~garbage_exists)


class SqlWorkdayRepository(SqlRepository, IWorkdayRepository):
    """Workday repository backed by the relational store."""

    async def get_workdays_by_month(self, driver_id: UUID, month: int, year: int) -> List[WorkdayRow]:
        start, end = _month_bounds(month, year)
        statement = (
            select(workdays)
            .where(_active(driver_id))
            .where(workdays.c.date >= start, workdays.c.date < end)
            .order_by(workdays.c.date)
        )
        async with self._session() as session:
            result = await session.execute(statement)
            return [_to_row(row) for row in result.mappings().all()]

    async def get_workdays_by_period(
        self,
        driver_id: UUID,
        start_date: date,
        end_date: date,
        page: int,
        limit: int
    ) -> Tuple[List[WorkdayRow], int]:
        condition = and_(_active(driver_id), workdays.c.date.between(start_date, end_date))
        statement = (
            select(workdays)
            .where(condition)
            .order_by(workdays.c.date)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        count_statement = select(func.count()).select_from(workdays).where(condition)

        async with self._session() as session:
            rows = (await session.execute(statement)).mappings().all()
            total = (await session.execute(count_statement)).scalar_one()
            return [_to_row(row) for row in rows], int(total)

    async def create_workday(self, driver_id: UUID, request: WorkdayRequest) -> WorkdayRow:
        statement = insert(workdays).values(
            driver_id=driver_id,
            date=request.date,
            start_time=request.start_time,
            end_time=request.end_time,
            rest_time=request.rest_time,
            overnight_rest=request.overnight_rest,
        ).returning(*workdays.c)

        async with self._session() as session:
            try:
                row = (await session.execute(statement)).mappings().one()
                await session.commit()
            except IntegrityError as e:
                if sqlstate(e) == UNIQUE_VIOLATION:
                    raise WorkdayAlreadyExists()
                raise
            return _to_row(row)

    async def update_workday(self, driver_id: UUID, request: WorkdayRequest) -> WorkdayRow:
        statement = (
            update(workdays)
            .where(workdays.c.driver_id == driver_id, workdays.c.date == request.date)
            .values(
                start_time=request.start_time,
                end_time=request.end_time,
                rest_time=request.rest_time,
                overnight_rest=request.overnight_rest,
            )
            .returning(*workdays.c)
        )
        async with self._session() as session:
            row = (await session.execute(statement)).mappings().first()
            await session.commit()
            if row is None:
                raise WorkdayNotFound()
            return _to_row(row)

    async def delete_workday(self, driver_id: UUID, workday_date: date) -> None:
        async with self._session() as session:
            result = await session.execute(
                delete(workdays).where(workdays.c.driver_id == driver_id, workdays.c.date == workday_date)
            )
            await session.commit()
            if result.rowcount == 0:
                raise WorkdayNotFound()

    async def get_workday_garbage(self, driver_id: UUID) -> List[WorkdayGarbage]:
        statement = (
            select(workday_garbage)
            .where(workday_garbage.c.driver_id == driver_id)
            .order_by(workday_garbage.c.workday_date)
        )
        async with self._session() as session:
            result = await session.execute(statement)
            return [_to_garbage(row) for row in result.mappings().all()]

    async def create_workday_garbage(
        self,
        driver_id: UUID,
        workday_date: date,
        scheduled_deletion_date: date,
        created_at: Optional[datetime] = None
    ) -> WorkdayGarbage:
        values = {
            "driver_id": driver_id,
            "workday_date": workday_date,
            "scheduled_deletion_date": scheduled_deletion_date,
        }
        if created_at is not None:
            values["created_at"] = created_at
        statement = insert(workday_garbage).values(**values).returning(*workday_garbage.c)

        async with self._session() as session:
            try:
                row = (await session.execute(statement)).mappings().one()
                await session.commit()
            except IntegrityError as e:
                code = sqlstate(e)
                if code == UNIQUE_VIOLATION:
                    raise WorkdayGarbageAlreadyExists()
                if code == FOREIGN_KEY_VIOLATION:
                    raise WorkdayNotFound()
                raise
            return _to_garbage(row)

    async def delete_workday_garbage(self, driver_id: UUID, workday_date: date) -> None:
        async with self._session() as session:
            result = await session.execute(
                delete(workday_garbage).where(
                    workday_garbage.c.driver_id == driver_id,
                    workday_garbage.c.workday_date == workday_date,
                )
            )
            await session.commit()
            if result.rowcount == 0:
                raise WorkdayGarbageNotFound()

    async def get_document_years(self, driver_id: UUID) -> List[int]:
        year = extract("year", workdays.c.date)
        statement = select(year).where(_active(driver_id)).group_by(year).order_by(year)
        async with self._session() as session:
            result = await session.execute(statement)
            return [int(value) for value in result.scalars().all()]

    async def get_document_months(self, driver_id: UUID, year: int) -> List[int]:
        month = extract("month", workdays.c.date)
        statement = (
            select(month)
            .where(_active(driver_id))
            .where(extract("year", workdays.c.date) == year)
            .group_by(month)
            .order_by(month)
        )
        async with self._session() as session:
            result = await session.execute(statement)
            return [int(value) for value in result.scalars().all()]
