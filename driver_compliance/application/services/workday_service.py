"""Workday lifecycle service."""
import logging
from datetime import date, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple
from uuid import UUID

from driver_compliance.application.services.cache_coordinator import CacheAsideCoordinator, CacheKeys
from driver_compliance.domain.entities.workday import Workday, WorkdayGarbage, WorkdayRequest
from driver_compliance.domain.interfaces.workday_repository import IWorkdayRepository
from driver_compliance.infrastructure.monitoring import track_workday_mutation
from driver_compliance.utils.clock import utctoday

MAX_PAGE_SIZE = 100


def _serialize_workdays(workdays: List[Workday]) -> List[Dict[str, Any]]:
    return [workday.to_dict() for workday in workdays]


def _deserialize_workdays(data: List[Dict[str, Any]]) -> List[Workday]:
    return [Workday.from_dict(item) for item in data]


def _serialize_page(page: Tuple[List[Workday], int]) -> Dict[str, Any]:
    workdays, total = page
    return {"items": _serialize_workdays(workdays), "total": total}


def _deserialize_page(data: Dict[str, Any]) -> Tuple[List[Workday], int]:
    return _deserialize_workdays(data["items"]), int(data["total"])


class WorkdayService:
    """
    Reads and mutates the workdays of a driver.

    Reads go through the cache-aside coordinator. Every mutation invalidates
    the month entry of the touched date and all period entries of the driver
    before returning.
    """

    def __init__(
        self,
        workday_repository: IWorkdayRepository,
        cache: CacheAsideCoordinator,
        workday_cache_ttl: int = 6 * 3600,
        garbage_retention_days: int = 30,
        today: Optional[Callable[[], date]] = None
    ):
        """
        Initialize workday service.

        Args:
            workday_repository: Durable workday store (Dependency Injection)
            cache: Cache-aside coordinator
            workday_cache_ttl: Lifetime of cached workday queries, in seconds
            garbage_retention_days: Days between soft and permanent deletion
            today: Returns the current date
        """
        self.workday_repository = workday_repository
        self.cache = cache
        self.workday_cache_ttl = workday_cache_ttl
        self.garbage_retention_days = garbage_retention_days
        self._today = today or utctoday
        self._logger = logging.getLogger(__name__)

    async def get_workdays_by_month(self, driver_id: UUID, month: int, year: int) -> List[Workday]:
        """
        Active workdays of a calendar month, ordered by date.

        Args:
            driver_id: Driver identifier
            month: Month number (1-12)
            year: Four-digit year

        Returns:
            List of workdays
        """
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month: {month}")

        async def load() -> List[Workday]:
            rows = await self.workday_repository.get_workdays_by_month(driver_id, month, year)
            return [row.to_workday() for row in rows]

        return await self.cache.get_or_load(
            CacheKeys.workday_month(driver_id, month, year),
            self.workday_cache_ttl,
            load,
            _serialize_workdays,
            _deserialize_workdays,
            cache_name="workday_month",
        )

    async def get_workdays_by_period(
        self,
        driver_id: UUID,
        start_date: date,
        end_date: date,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[Workday], int]:
        """
        One page of active workdays between two dates (inclusive).

        Returns:
            Tuple of (workdays, total matching workdays)
        """
        if start_date > end_date:
            raise ValueError(f"Period start {start_date} is after its end {end_date}")
        if page < 1:
            raise ValueError(f"Page must be at least 1, got {page}")
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValueError(f"Limit must be between 1 and {MAX_PAGE_SIZE}, got {limit}")

        async def load() -> Tuple[List[Workday], int]:
            rows, total = await self.workday_repository.get_workdays_by_period(
                driver_id, start_date, end_date, page, limit
            )
            return [row.to_workday() for row in rows], total

        return await self.cache.get_or_load(
            CacheKeys.workday_period(driver_id, start_date, end_date, page, limit),
            self.workday_cache_ttl,
            load,
            _serialize_page,
            _deserialize_page,
            cache_name="workday_period",
        )

    async def create_workday(self, driver_id: UUID, request: WorkdayRequest) -> Workday:
        """
        Create the workday of ``request.date``.

        Raises:
            WorkdayAlreadyExists: If the date already has a workday, soft-deleted or not
        """
        row = await self.workday_repository.create_workday(driver_id, request)
        await self.cache.invalidate_workdays(driver_id, request.date)
        track_workday_mutation("create")
        self._logger.info(f"Created workday {request.date} for driver {driver_id}")
        return row.to_workday()

    async def update_workday(self, driver_id: UUID, request: WorkdayRequest) -> Workday:
        """
        Overwrite the workday of ``request.date``.

        Raises:
            WorkdayNotFound: If the date has no workday
        """
        row = await self.workday_repository.update_workday(driver_id, request)
        await self.cache.invalidate_workdays(driver_id, request.date)
        track_workday_mutation("update")
        self._logger.info(f"Updated workday {request.date} for driver {driver_id}")
        return row.to_workday()

    async def delete_workday(self, driver_id: UUID, workday_date: date) -> None:
        """Permanently delete a workday (and its soft-delete marker)."""
        await self.workday_repository.delete_workday(driver_id, workday_date)
        await self.cache.invalidate_workdays(driver_id, workday_date)
        track_workday_mutation("delete")
        self._logger.info(f"Deleted workday {workday_date} for driver {driver_id}")

    async def get_workday_garbage(self, driver_id: UUID) -> List[WorkdayGarbage]:
        return await self.workday_repository.get_workday_garbage(driver_id)

    async def create_workday_garbage(self, driver_id: UUID, workday_date: date) -> WorkdayGarbage:
        """
        Soft-delete a workday. It is purged after the retention period.

        Raises:
            WorkdayNotFound: If the date has no workday
            WorkdayGarbageAlreadyExists: If the workday is already soft-deleted
        """
        scheduled_deletion_date = self._today() + timedelta(days=self.garbage_retention_days)
        garbage = await self.workday_repository.create_workday_garbage(
            driver_id, workday_date, scheduled_deletion_date
        )
        await self.cache.invalidate_workdays(driver_id, workday_date)
        track_workday_mutation("soft_delete")
        self._logger.info(
            f"Workday {workday_date} of driver {driver_id} scheduled for deletion on {scheduled_deletion_date}"
        )
        return garbage

    async def delete_workday_garbage(self, driver_id: UUID, workday_date: date) -> None:
        """
        Restore a soft-deleted workday.

        Raises:
            WorkdayGarbageNotFound: If the workday is not soft-deleted
        """
        await self.workday_repository.delete_workday_garbage(driver_id, workday_date)
        await self.cache.invalidate_workdays(driver_id, workday_date)
        track_workday_mutation("restore")
        self._logger.info(f"Restored workday {workday_date} for driver {driver_id}")
