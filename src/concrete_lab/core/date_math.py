"""Day-granularity date helpers."""

import math
from datetime import date, datetime, timedelta
from typing import Optional, Union

from .constants import DATE_FORMAT

DateLike = Union[date, datetime, str]

SECONDS_PER_DAY = 24 * 60 * 60


def to_day(value: Optional[DateLike]) -> Optional[date]:
    """
    Truncate a date-like value to a calendar day.
    Accepts ``date``, ``datetime`` and ISO strings ("2025-03-01",
    "2025-03-01T00:00:00.000Z"). Returns None when nothing usable is given.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return datetime.strptime(text[:10], DATE_FORMAT).date()
        except ValueError:
            return None
    return None


def add_days(day: DateLike, n: int) -> date:
    """Calendar-day addition; time of day is discarded."""
    base = to_day(day)
    if base is None:
        raise ValueError(f"Invalid date: {day!r}")
    return base + timedelta(days=int(n))


def days_between(a: DateLike, b: DateLike) -> int:
    """
    Signed whole days from ``a`` to ``b``.
    Partial days round up (toward the later date).
    """
    start = _as_datetime(a)
    end = _as_datetime(b)
    delta = (end - start).total_seconds() / SECONDS_PER_DAY
    return math.ceil(delta)


def _as_datetime(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value
    day = to_day(value)
    if day is None:
        raise ValueError(f"Invalid date: {value!r}")
    return datetime(day.year, day.month, day.day)
