"""Service for driver documents (monthly reports)."""
import logging
from typing import List, Optional
from uuid import UUID

from driver_compliance.application.services.workday_service import WorkdayService
from driver_compliance.domain.exceptions import DriverNotFound
from driver_compliance.domain.interfaces.document_generator import IDocumentGenerator
from driver_compliance.domain.interfaces.driver_repository import IDriverRepository
from driver_compliance.domain.interfaces.workday_repository import IWorkdayRepository


class DocumentService:
    """Lists the months with reportable workdays and renders monthly reports."""

    def __init__(
        self,
        driver_repository: IDriverRepository,
        workday_repository: IWorkdayRepository,
        workday_service: WorkdayService,
        document_generator: IDocumentGenerator
    ):
        self.driver_repository = driver_repository
        self.workday_repository = workday_repository
        self.workday_service = workday_service
        self.document_generator = document_generator
        self._logger = logging.getLogger(__name__)

    async def get_document_years(self, driver_id: UUID) -> List[int]:
        return await self.workday_repository.get_document_years(driver_id)

    async def get_document_months(self, driver_id: UUID, year: int) -> List[int]:
        return await self.workday_repository.get_document_months(driver_id, year)

    async def get_monthly_report(self, driver_id: UUID, month: int, year: int) -> Optional[bytes]:
        """
        Render the PDF report of one month.

        Args:
            driver_id: Driver identifier
            month: Month number (1-12)
            year: Four-digit year

        Returns:
            PDF bytes, or None when the generator produced nothing

        Raises:
            DriverNotFound: If the driver does not exist
            DocumentGenerationFailed: If the generator could not be reached
        """
        driver = await self.driver_repository.get_driver_by_id(driver_id)
        if driver is None:
            raise DriverNotFound()

        workdays = await self.workday_service.get_workdays_by_month(driver_id, month, year)
        document = await self.document_generator.generate_monthly_report(
            firstname=driver.firstname,
            lastname=driver.lastname,
            language=driver.language,
            month=month,
            year=year,
            workdays=workdays,
        )
        if document is None:
            self._logger.warning(f"No report produced for driver {driver_id} ({year}-{month:02d})")
        return document
