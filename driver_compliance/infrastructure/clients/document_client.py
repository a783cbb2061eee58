"""HTTP client for the document rendering service."""
import logging
from typing import Any, Dict, List, Optional

import httpx

from driver_compliance.domain.entities.workday import Workday
from driver_compliance.domain.exceptions import DocumentGenerationFailed
from driver_compliance.domain.interfaces.document_generator import IDocumentGenerator

FRENCH_ALIASES = {"fr", "french", "français"}


def _language(language: str) -> str:
    return "FRENCH" if language.strip().lower() in FRENCH_ALIASES else "ENGLISH"


def _workday_payload(workday: Workday) -> Dict[str, Any]:
    return {
        "date": workday.date.isoformat(),
        "start_time": workday.start_time.strftime("%H:%M:%S"),
        "end_time": workday.end_time.strftime("%H:%M:%S") if workday.end_time else None,
        "rest_time": workday.rest_time.strftime("%H:%M:%S"),
        "overnight": workday.overnight_rest,
    }


class HttpDocumentGenerator(IDocumentGenerator):
    """
    Asks the document service to render monthly workday reports.

    The service answers with the PDF body; an empty body means no document.
    """

    REPORT_PATH = "/v1/reports/monthly-workdays"

    def __init__(self, base_url: str, timeout: float = 30, client: Optional[httpx.AsyncClient] = None):
        """
        Initialize the client.

        Args:
            base_url: Document service base URL
            timeout: Request timeout in seconds
            client: Preconfigured HTTP client (Dependency Injection)
        """
        self.client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._logger = logging.getLogger(__name__)

    async def generate_monthly_report(
        self,
        firstname: str,
        lastname: str,
        language: str,
        month: int,
        year: int,
        workdays: List[Workday]
    ) -> Optional[bytes]:
        payload = {
            "driver_firstname": firstname,
            "driver_lastname": lastname,
            "language": _language(language),
            "month": month,
            "year": year,
            "workdays": [_workday_payload(workday) for workday in workdays],
        }
        try:
            response = await self.client.post(self.REPORT_PATH, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            self._logger.error(f"Document service call failed: {e}", exc_info=True)
            raise DocumentGenerationFailed() from e

        return response.content or None

    async def close(self) -> None:
        await self.client.aclose()
