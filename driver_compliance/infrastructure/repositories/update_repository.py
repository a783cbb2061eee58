"""SQL repository for application updates."""
from typing import List, Tuple

from sqlalchemy import func, select

from driver_compliance.domain.entities.driver import EntityType
from driver_compliance.domain.entities.update import UpdateRow
from driver_compliance.domain.exceptions import UpdateNotFound
from driver_compliance.domain.interfaces.update_repository import IUpdateRepository
from driver_compliance.infrastructure.repositories.base import SqlRepository
from driver_compliance.infrastructure.repositories.models import updates


class SqlUpdateRepository(SqlRepository, IUpdateRepository):
    """Reads the driver updates published after a given version."""

    async def get_updates_by_version(self, version: str, page: int, limit: int) -> Tuple[List[UpdateRow], int]:
        async with self._session() as session:
            reference = await session.execute(
                select(updates.c.created_at)
                .where(updates.c.version == version, updates.c.entity_type == EntityType.DRIVER)
                .limit(1)
            )
            created_at = reference.scalar_one_or_none()
            if created_at is None:
                raise UpdateNotFound()

            condition = (updates.c.created_at > created_at) & (updates.c.entity_type == EntityType.DRIVER)
            rows = (
                await session.execute(
                    select(updates)
                    .where(condition)
                    .order_by(updates.c.created_at.asc())
                    .offset((page - 1) * limit)
                    .limit(limit)
                )
            ).mappings().all()
            total = (await session.execute(select(func.count()).select_from(updates).where(condition))).scalar_one()

            return [UpdateRow(**dict(row)) for row in rows], int(total)
