"""Driver domain entities."""
import json
from dataclasses import dataclass, field
from datetime import datetime, time
from enum import Enum
from typing import List, Optional
from uuid import UUID


class EntityType(str, Enum):
    """Kinds of entity an ``EntityLimit`` can cap."""

    DRIVER = "DRIVER"
    EMPLOYEE = "EMPLOYEE"


@dataclass
class RestPeriod:
    """A time-of-day interval with the rest time mandated inside it."""

    start: time
    end: time
    rest: time

    def to_dict(self) -> dict:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "rest": self.rest.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RestPeriod":
        return cls(
            start=time.fromisoformat(data["start"]),
            end=time.fromisoformat(data["end"]),
            rest=time.fromisoformat(data["rest"]),
        )


def dump_rest_periods(rest_periods: List[RestPeriod]) -> str:
    """Encode a rest-period set for storage on the driver row."""
    return json.dumps([period.to_dict() for period in rest_periods])


def load_rest_periods(rest_json: Optional[str]) -> List[RestPeriod]:
    """Decode the stored rest-period set (empty when never set)."""
    if not rest_json:
        return []
    return [RestPeriod.from_dict(item) for item in json.loads(rest_json)]


@dataclass
class Driver:
    """Domain entity representing a driver account."""

    id: UUID
    firstname: str
    lastname: str
    email: str
    password_hash: str
    language: str
    created_at: datetime
    gender: Optional[str] = None
    phone_number: Optional[str] = None
    is_searchable: bool = False
    allow_request_professional_agreement: bool = False
    rest_json: Optional[str] = None
    mail_preferences: int = 0
    verified_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None
    deactivated_at: Optional[datetime] = None
    refresh_token_hash: Optional[str] = None

    @property
    def is_verified(self) -> bool:
        return self.verified_at is not None

    @property
    def rest_periods(self) -> List[RestPeriod]:
        return load_rest_periods(self.rest_json)


@dataclass
class CreateDriverRequest:
    """Signup payload. ``password`` holds the hash once the service has processed it."""

    firstname: str
    lastname: str
    email: str
    password: str
    language: str
    gender: Optional[str] = None


@dataclass
class LoginDriverRequest:
    """Login payload."""

    email: str
    password: str


@dataclass
class EntityLimit:
    """A time-bounded cap on the number of existing entities of one kind."""

    id: Optional[int]
    entity_type: EntityType
    maximum_limit: int
    start_at: datetime
    end_at: Optional[datetime] = None
    created_by: Optional[UUID] = None
    created_at: Optional[datetime] = None

    def is_active(self, at: datetime) -> bool:
        return self.start_at <= at and (self.end_at is None or self.end_at > at)


@dataclass
class Suspension:
    """A time-bounded restriction on a driver."""

    id: Optional[int]
    driver_id: UUID
    can_access_restricted_space: bool
    start_at: datetime
    end_at: Optional[datetime] = None
    driver_message: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    created_by: Optional[UUID] = None
    created_at: Optional[datetime] = None

    def is_active(self, at: datetime) -> bool:
        return self.start_at <= at and (self.end_at is None or self.end_at > at)


@dataclass
class UserIdentity:
    """Identity extracted from a validated token."""

    user_id: UUID
    claims: dict = field(default_factory=dict)
