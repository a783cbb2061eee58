"""Shared plumbing of the SQL repositories."""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from driver_compliance.domain.exceptions import DatabaseError
from driver_compliance.infrastructure.database import Database

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def sqlstate(error: IntegrityError) -> Optional[str]:
    """Extract the SQLSTATE code of a driver-level integrity error."""
    original = error.orig
    return getattr(original, "sqlstate", None) or getattr(original, "pgcode", None)


class SqlRepository:
    """Base class opening one session per operation."""

    def __init__(self, database: Database):
        """
        Initialize the repository.

        Args:
            database: Database handle (Dependency Injection)
        """
        self.database = database
        self._logger = logging.getLogger(self.__class__.__module__)

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """
        Open a session, collapsing driver failures into ``DatabaseError``.

        ``IntegrityError`` is left to the caller, which maps it to a domain
        conflict inside the ``async with`` block.
        """
        try:
            async with self.database.session() as session:
                yield session
        except IntegrityError as e:
            self._logger.error(f"Unhandled integrity error: {e}", exc_info=True)
            raise DatabaseError() from e
        except SQLAlchemyError as e:
            self._logger.error(f"Database error: {e}", exc_info=True)
            raise DatabaseError() from e
