"""Datetime utilities for record timestamps."""

from datetime import datetime, timezone


def now() -> datetime:
    """Get current datetime in UTC."""
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    """
    Format a datetime the way records store it.

    Naive datetimes are assumed to be UTC. The UTC offset is written as `Z`
    so stored timestamps match what browsers produce.

    Args:
        dt: Datetime to format

    Returns:
        ISO 8601 string with millisecond precision
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"
