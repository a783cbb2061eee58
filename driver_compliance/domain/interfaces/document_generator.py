"""Interface for the remote PDF generator."""
from abc import ABC, abstractmethod
from typing import List, Optional

from driver_compliance.domain.entities.workday import Workday


class IDocumentGenerator(ABC):
    """Renders monthly workday reports."""

    @abstractmethod
    async def generate_monthly_report(
        self,
        firstname: str,
        lastname: str,
        language: str,
        month: int,
        year: int,
        workdays: List[Workday]
    ) -> Optional[bytes]:
        """
        Render the report of one month.

        Returns:
            PDF bytes, or None when the generator produced nothing

        Raises:
            DocumentGenerationFailed: If the generator could not be reached
        """
        pass
