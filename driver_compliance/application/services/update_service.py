"""Service for application update notes."""
import logging
from typing import Any, Dict, List, Tuple

from driver_compliance.application.services.cache_coordinator import CacheAsideCoordinator, CacheKeys
from driver_compliance.domain.entities.update import Update
from driver_compliance.domain.interfaces.update_repository import IUpdateRepository


class UpdateService:
    """Serves the updates published after a given version, through the cache."""

    def __init__(
        self,
        update_repository: IUpdateRepository,
        cache: CacheAsideCoordinator,
        update_cache_ttl: int = 6 * 3600
    ):
        self.update_repository = update_repository
        self.cache = cache
        self.update_cache_ttl = update_cache_ttl
        self._logger = logging.getLogger(__name__)

    async def get_updates_by_version(self, version: str, page: int = 1, limit: int = 20) -> Tuple[List[Update], int]:
        """
        Retrieve the updates published after ``version``.

        Args:
            version: Version the caller currently runs
            page: Page number, starting at 1
            limit: Page size

        Returns:
            Tuple of (updates, total matching updates)

        Raises:
            UpdateNotFound: If ``version`` is unknown
        """
        if page < 1 or limit < 1:
            raise ValueError("Page and limit must be positive")

        async def load() -> Tuple[List[Update], int]:
            rows, total = await self.update_repository.get_updates_by_version(version, page, limit)
            return [row.to_update() for row in rows], total

        def serialize(result: Tuple[List[Update], int]) -> Dict[str, Any]:
            updates, total = result
            return {"items": [update.to_dict() for update in updates], "total": total}

        def deserialize(data: Dict[str, Any]) -> Tuple[List[Update], int]:
            return [Update.from_dict(item) for item in data["items"]], int(data["total"])

        return await self.cache.get_or_load(
            CacheKeys.updates(version, page, limit),
            self.update_cache_ttl,
            load,
            serialize,
            deserialize,
            cache_name="updates",
        )
