"""SQL health probe."""
from sqlalchemy import text

from driver_compliance.domain.interfaces.health_repository import IHealthRepository
from driver_compliance.infrastructure.repositories.base import SqlRepository


class SqlHealthRepository(SqlRepository, IHealthRepository):

    async def ping(self) -> bool:
        async with self._session() as session:
            result = await session.execute(text("SELECT 1"))
            return result.scalar_one() == 1
