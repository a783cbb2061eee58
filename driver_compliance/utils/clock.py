"""Time helpers."""
from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def utctoday() -> date:
    return utcnow().date()
