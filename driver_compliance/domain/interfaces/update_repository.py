"""Interface for the application update repository."""
from abc import ABC, abstractmethod
from typing import List, Tuple

from driver_compliance.domain.entities.update import UpdateRow


class IUpdateRepository(ABC):
    """Read access to the published application updates."""

    @abstractmethod
    async def get_updates_by_version(
        self,
        version: str,
        page: int,
        limit: int
    ) -> Tuple[List[UpdateRow], int]:
        """
        Retrieve the driver updates published after ``version``.

        Args:
            version: Version the caller currently runs
            page: Page number, starting at 1
            limit: Page size

        Returns:
            Tuple of (page rows, total matching rows)

        Raises:
            UpdateNotFound: If ``version`` is unknown
        """
        pass
