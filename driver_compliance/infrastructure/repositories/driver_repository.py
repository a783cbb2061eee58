"""SQL repository for drivers, suspensions and entity limits."""
from datetime import datetime
from typing import Any, Mapping, Optional
from uuid import UUID

from sqlalchemy import delete, func, insert, or_, select, update
from sqlalchemy.exc import IntegrityError

from driver_compliance.domain.entities.driver import (
    CreateDriverRequest,
    Driver,
    EntityLimit,
    EntityType,
    Suspension,
)
from driver_compliance.domain.exceptions import (
    DriverAlreadyExists,
    DriverLimitationNotFound,
    DriverNotFound,
    DriverSuspensionNotFound,
)
from driver_compliance.domain.interfaces.driver_repository import IDriverRepository
from driver_compliance.infrastructure.repositories.base import (
    FOREIGN_KEY_VIOLATION,
    UNIQUE_VIOLATION,
    SqlRepository,
    sqlstate,
)
from driver_compliance.infrastructure.repositories.models import (
    driver_suspensions,
    drivers,
    maximum_entity_limits,
)

# Columns an update may touch
_MUTABLE_DRIVER_COLUMNS = (
    "firstname",
    "lastname",
    "email",
    "password_hash",
    "language",
    "gender",
    "phone_number",
    "is_searchable",
    "allow_request_professional_agreement",
    "rest_json",
    "mail_preferences",
    "verified_at",
    "last_login_at",
    "deactivated_at",
    "refresh_token_hash",
)


def _to_driver(row: Mapping[str, Any]) -> Driver:
    return Driver(**dict(row))


def _to_limit(row: Mapping[str, Any]) -> EntityLimit:
    return EntityLimit(**dict(row))


def _to_suspension(row: Mapping[str, Any]) -> Suspension:
    return Suspension(**dict(row))


def _first_verification(at: Optional[datetime]):
    """``verified_at`` is set once and never cleared."""
    return func.coalesce(drivers.c.verified_at, at)


def _active_window(table, at: datetime):
    return (table.c.start_at <= at) & or_(table.c.end_at.is_(None), table.c.end_at > at)


class SqlDriverRepository(SqlRepository, IDriverRepository):
    """
    Driver repository backed by the relational store.

    Email uniqueness and row existence are enforced by the database; the
    repository maps the resulting integrity errors and empty results to the
    driver error taxonomy.
    """

    async def count_drivers(self) -> int:
        async with self._session() as session:
            result = await session.execute(select(func.count()).select_from(drivers))
            return int(result.scalar_one())

    async def get_driver_by_id(self, driver_id: UUID) -> Optional[Driver]:
        async with self._session() as session:
            result = await session.execute(select(drivers).where(drivers.c.id == driver_id))
            row = result.mappings().first()
            return _to_driver(row) if row else None

    async def get_driver_by_email(self, email: str) -> Optional[Driver]:
        async with self._session() as session:
            result = await session.execute(select(drivers).where(drivers.c.email == email))
            row = result.mappings().first()
            return _to_driver(row) if row else None

    async def create_driver(self, create_request: CreateDriverRequest) -> Driver:
        """
        Insert a new driver.

        Args:
            create_request: Normalized payload, ``password`` holding the hash

        Returns:
            The stored driver
        """
        statement = insert(drivers).values(
            firstname=create_request.firstname,
            lastname=create_request.lastname,
            email=create_request.email,
            password_hash=create_request.password,
            language=create_request.language,
            gender=create_request.gender,
        ).returning(*drivers.c)

        async with self._session() as session:
            try:
                result = await session.execute(statement)
                row = result.mappings().one()
                await session.commit()
            except IntegrityError as e:
                if sqlstate(e) == UNIQUE_VIOLATION:
                    raise DriverAlreadyExists()
                raise
            self._logger.info(f"Inserted driver {row['id']}")
            return _to_driver(row)

    async def _update_returning(self, driver_id: UUID, **values: Any) -> Driver:
        statement = update(drivers).where(drivers.c.id == driver_id).values(**values).returning(*drivers.c)

        async with self._session() as session:
            try:
                result = await session.execute(statement)
                row = result.mappings().first()
                await session.commit()
            except IntegrityError as e:
                if sqlstate(e) == UNIQUE_VIOLATION:
                    raise DriverAlreadyExists()
                raise
            if row is None:
                raise DriverNotFound()
            return _to_driver(row)

    async def update_driver(self, driver: Driver) -> Driver:
        values = {column: getattr(driver, column) for column in _MUTABLE_DRIVER_COLUMNS}
        values["verified_at"] = _first_verification(driver.verified_at)
        return await self._update_returning(driver.id, **values)

    async def touch_last_login(self, driver_id: UUID, at: datetime) -> Driver:
        return await self._update_returning(driver_id, last_login_at=at)

    async def set_refresh_token_hash(self, driver_id: UUID, refresh_token_hash: Optional[str]) -> None:
        await self._update_returning(driver_id, refresh_token_hash=refresh_token_hash)

    async def mark_verified(self, driver_id: UUID, at: datetime) -> Driver:
        return await self._update_returning(driver_id, verified_at=_first_verification(at))

    async def update_password(self, driver_id: UUID, password_hash: str) -> Driver:
        return await self._update_returning(driver_id, password_hash=password_hash, refresh_token_hash=None)

    async def delete_driver(self, driver_id: UUID) -> None:
        async with self._session() as session:
            result = await session.execute(delete(drivers).where(drivers.c.id == driver_id))
            await session.commit()
            if result.rowcount == 0:
                raise DriverNotFound()

    async def set_rest_periods(self, driver_id: UUID, rest_json: Optional[str]) -> None:
        async with self._session() as session:
            result = await session.execute(
                update(drivers).where(drivers.c.id == driver_id).values(rest_json=rest_json)
            )
            await session.commit()
            if result.rowcount == 0:
                raise DriverNotFound()

    async def get_active_limit(self, entity_type: EntityType, at: datetime) -> Optional[EntityLimit]:
        statement = (
            select(maximum_entity_limits)
            .where(maximum_entity_limits.c.entity_type == entity_type)
            .where(_active_window(maximum_entity_limits, at))
            .order_by(maximum_entity_limits.c.start_at.desc())
            .limit(1)
        )
        async with self._session() as session:
            row = (await session.execute(statement)).mappings().first()
            return _to_limit(row) if row else None

    async def create_limit(self, limit: EntityLimit) -> EntityLimit:
        statement = insert(maximum_entity_limits).values(
            entity_type=limit.entity_type,
            maximum_limit=limit.maximum_limit,
            start_at=limit.start_at,
            end_at=limit.end_at,
            created_by=limit.created_by,
        ).returning(*maximum_entity_limits.c)

        async with self._session() as session:
            row = (await session.execute(statement)).mappings().one()
            await session.commit()
            return _to_limit(row)

    async def delete_limit(self, limit_id: int) -> None:
        async with self._session() as session:
            result = await session.execute(
                delete(maximum_entity_limits).where(maximum_entity_limits.c.id == limit_id)
            )
            await session.commit()
            if result.rowcount == 0:
                raise DriverLimitationNotFound()

    async def get_active_suspension(self, driver_id: UUID, at: datetime) -> Optional[Suspension]:
        statement = (
            select(driver_suspensions)
            .where(driver_suspensions.c.driver_id == driver_id)
            .where(_active_window(driver_suspensions, at))
            .order_by(driver_suspensions.c.start_at.desc())
            .limit(1)
        )
        async with self._session() as session:
            row = (await session.execute(statement)).mappings().first()
            return _to_suspension(row) if row else None

    async def create_suspension(self, suspension: Suspension) -> Suspension:
        statement = insert(driver_suspensions).values(
            driver_id=suspension.driver_id,
            can_access_restricted_space=suspension.can_access_restricted_space,
            start_at=suspension.start_at,
            end_at=suspension.end_at,
            driver_message=suspension.driver_message,
            title=suspension.title,
            description=suspension.description,
            created_by=suspension.created_by,
        ).returning(*driver_suspensions.c)

        async with self._session() as session:
            try:
                row = (await session.execute(statement)).mappings().one()
                await session.commit()
            except IntegrityError as e:
                if sqlstate(e) == FOREIGN_KEY_VIOLATION:
                    raise DriverNotFound()
                raise
            return _to_suspension(row)

    async def delete_suspension(self, suspension_id: int) -> None:
        async with self._session() as session:
            result = await session.execute(
                delete(driver_suspensions).where(driver_suspensions.c.id == suspension_id)
            )
            await session.commit()
            if result.rowcount == 0:
                raise DriverSuspensionNotFound()
