"""Interface for the workday repository (Repository Pattern)."""
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import List, Optional, Tuple
from uuid import UUID

from driver_compliance.domain.entities.workday import WorkdayGarbage, WorkdayRequest, WorkdayRow


class IWorkdayRepository(ABC):
    """
    Durable storage of workdays and their soft-delete markers.

    Every query is scoped by driver id. "Active" queries exclude the dates
    that have a garbage marker.
    """

    @abstractmethod
    async def get_workdays_by_month(self, driver_id: UUID, month: int, year: int) -> List[WorkdayRow]:
        """
        Retrieve the active workdays of a calendar month, ordered by date.

        Args:
            driver_id: Driver identifier
            month: Month number (1-12)
            year: Four-digit year

        Returns:
            List of workday rows
        """
        pass

    @abstractmethod
    async def get_workdays_by_period(
        self,
        driver_id: UUID,
        start_date: date,
        end_date: date,
        page: int,
        limit: int
    ) -> Tuple[List[WorkdayRow], int]:
        """
        Retrieve one page of active workdays between two dates (inclusive).

        Returns:
            Tuple of (page rows, total matching rows)
        """
        pass

    @abstractmethod
    async def create_workday(self, driver_id: UUID, request: WorkdayRequest) -> WorkdayRow:
        """
        Insert a workday.

        Raises:
            WorkdayAlreadyExists: If (driver, date) is taken
        """
        pass

    @abstractmethod
    async def update_workday(self, driver_id: UUID, request: WorkdayRequest) -> WorkdayRow:
        """
        Overwrite the workday matching ``request.date``.

        Raises:
            WorkdayNotFound: If no row matches
        """
        pass

    @abstractmethod
    async def delete_workday(self, driver_id: UUID, workday_date: date) -> None:
        """
        Permanently delete a workday.

        Raises:
            WorkdayNotFound: If no row matches
        """
        pass

    @abstractmethod
    async def get_workday_garbage(self, driver_id: UUID) -> List[WorkdayGarbage]:
        """List the soft-deleted workdays of a driver, ordered by date."""
        pass

    @abstractmethod
    async def create_workday_garbage(
        self,
        driver_id: UUID,
        workday_date: date,
        scheduled_deletion_date: date,
        created_at: Optional[datetime] = None
    ) -> WorkdayGarbage:
        """
        Mark a workday as soft-deleted.

        Raises:
            WorkdayNotFound: If the workday does not exist
            WorkdayGarbageAlreadyExists: If the date is already marked
        """
        pass

    @abstractmethod
    async def delete_workday_garbage(self, driver_id: UUID, workday_date: date) -> None:
        """
        Remove a soft-delete marker, restoring the workday.

        Raises:
            WorkdayGarbageNotFound: If no marker matches
        """
        pass

    @abstractmethod
    async def get_document_years(self, driver_id: UUID) -> List[int]:
        """Years that contain at least one active workday."""
        pass

    @abstractmethod
    async def get_document_months(self, driver_id: UUID, year: int) -> List[int]:
        """Months of ``year`` that contain at least one active workday."""
        pass
