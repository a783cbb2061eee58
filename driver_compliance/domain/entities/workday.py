"""Workday domain entities."""
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Dict, Optional
from uuid import UUID


@dataclass
class Workday:
    """Projection of a workday as exposed to drivers and cached."""

    date: date
    start_time: time
    rest_time: time
    end_time: Optional[time] = None
    overnight_rest: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "rest_time": self.rest_time.isoformat(),
            "overnight_rest": self.overnight_rest,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Workday":
        return cls(
            date=date.fromisoformat(data["date"]),
            start_time=time.fromisoformat(data["start_time"]),
            end_time=time.fromisoformat(data["end_time"]) if data.get("end_time") else None,
            rest_time=time.fromisoformat(data["rest_time"]),
            overnight_rest=bool(data.get("overnight_rest", False)),
        )


@dataclass
class WorkdayRow:
    """Durable workday record, one per (driver, date)."""

    driver_id: UUID
    date: date
    start_time: time
    rest_time: time
    end_time: Optional[time] = None
    overnight_rest: bool = False

    def to_workday(self) -> Workday:
        return Workday(
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
            rest_time=self.rest_time,
            overnight_rest=self.overnight_rest,
        )


@dataclass
class WorkdayRequest:
    """Payload for creating or updating the workday of ``date``."""

    date: date
    start_time: time
    rest_time: time
    end_time: Optional[time] = None
    overnight_rest: bool = False


@dataclass
class WorkdayGarbage:
    """Soft-delete marker for a workday."""

    driver_id: UUID
    workday_date: date
    scheduled_deletion_date: date
    created_at: Optional[datetime] = None
