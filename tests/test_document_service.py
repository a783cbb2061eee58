"""Tests for the document service."""
import uuid
from datetime import date, time

import pytest

from driver_compliance.application.services import DocumentService
from driver_compliance.domain.entities.driver import CreateDriverRequest
from driver_compliance.domain.entities.workday import WorkdayRequest
from driver_compliance.domain.exceptions import DriverNotFound
from tests.fakes import StubDocumentGenerator


@pytest.fixture
def document_generator():
    return StubDocumentGenerator()


@pytest.fixture
def document_service(driver_repository, workday_repository, workday_service, document_generator):
    return DocumentService(driver_repository, workday_repository, workday_service, document_generator)


async def add_workdays(workday_service, driver_id, *days):
    for day in days:
        await workday_service.create_workday(
            driver_id, WorkdayRequest(date=day, start_time=time(8, 0), end_time=time(16, 0), rest_time=time(1, 0))
        )


class TestDocumentService:

    @pytest.mark.asyncio
    async def test_years_and_months(self, document_service, workday_service):
        driver_id = uuid.uuid4()
        await add_workdays(workday_service, driver_id, date(2024, 12, 2), date(2025, 2, 3), date(2025, 2, 4), date(2025, 5, 1))

        assert await document_service.get_document_years(driver_id) == [2024, 2025]
        assert await document_service.get_document_months(driver_id, 2025) == [2, 5]

    @pytest.mark.asyncio
    async def test_soft_deleted_months_are_not_listed(self, document_service, workday_service):
        driver_id = uuid.uuid4()
        await add_workdays(workday_service, driver_id, date(2025, 2, 3))
        await workday_service.create_workday_garbage(driver_id, date(2025, 2, 3))

        assert await document_service.get_document_years(driver_id) == []

    @pytest.mark.asyncio
    async def test_monthly_report(self, document_service, workday_service, document_generator, driver_repository):
        driver = await driver_repository.create_driver(
            CreateDriverRequest(firstname="John", lastname="Doe", email="john.doe@example.com", password="hash", language="fr")
        )
        await add_workdays(workday_service, driver.id, date(2025, 2, 3), date(2025, 3, 1))

        document = await document_service.get_monthly_report(driver.id, 2, 2025)

        assert document == b"%PDF-1.7"
        call = document_generator.calls[0]
        assert (call["firstname"], call["lastname"], call["language"]) == ("John", "Doe", "fr")
        assert [w.date for w in call["workdays"]] == [date(2025, 2, 3)]

    @pytest.mark.asyncio
    async def test_empty_report(self, document_service, document_generator, driver_repository):
        driver = await driver_repository.create_driver(CreateDriverRequest(
            firstname="John", lastname="Doe", email="john.doe@example.com", password="hash", language="en"
        ))
        document_generator.document = None
        assert await document_service.get_monthly_report(driver.id, 2, 2025) is None

    @pytest.mark.asyncio
    async def test_unknown_driver(self, document_service):
        with pytest.raises(DriverNotFound):
            await document_service.get_monthly_report(uuid.uuid4(), 2, 2025)
