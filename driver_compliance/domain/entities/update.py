"""Application update (release note) entities."""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from driver_compliance.domain.entities.driver import EntityType


@dataclass
class UpdateRow:
    """Durable update record."""

    id: int
    version: str
    description: str
    entity_type: EntityType
    created_at: datetime
    mandatory_completion_date: Optional[datetime] = None
    created_by: Optional[UUID] = None

    def to_update(self) -> "Update":
        return Update(
            version=self.version,
            description=self.description,
            mandatory_completion_date=self.mandatory_completion_date,
            created_at=self.created_at,
        )


@dataclass
class Update:
    """Cached projection of an update."""

    version: str
    description: str
    created_at: datetime
    mandatory_completion_date: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "description": self.description,
            "mandatory_completion_date": (
                self.mandatory_completion_date.isoformat() if self.mandatory_completion_date else None
            ),
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Update":
        completion = data.get("mandatory_completion_date")
        return cls(
            version=data["version"],
            description=data["description"],
            mandatory_completion_date=datetime.fromisoformat(completion) if completion else None,
            created_at=datetime.fromisoformat(data["created_at"]),
        )
