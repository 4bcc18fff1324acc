from __future__ import annotations

from datetime import datetime, timezone


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def to_utc_naive(value: datetime) -> datetime:
    """Normalize a datetime to UTC and strip tzinfo for DATETIME columns."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def isoformat_utc(value: datetime) -> str:
    """Render a stored (naive UTC) or aware datetime as ISO-8601 with a Z suffix."""
    if value.tzinfo is not None:
        value = to_utc_naive(value)
    return value.isoformat(timespec="milliseconds") + "Z"
