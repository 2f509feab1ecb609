"""UTC datetime utilities."""

import calendar
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-aware datetime.

    This function should be used instead of datetime.now() or datetime.utcnow()
    to ensure all timestamps are timezone-aware and stored in UTC.

    Returns:
        Timezone-aware datetime in UTC

    Example:
        >>> now = utc_now()
        >>> now.tzinfo
        datetime.timezone.utc
    """
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to timezone-aware UTC.

    Naive datetimes are interpreted as already being in UTC.

    Args:
        value: Naive or aware datetime

    Returns:
        Timezone-aware datetime in UTC
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Return the half-open UTC window [00:00, next 00:00) covering a calendar day."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def month_days(year: int, month: int) -> list[date]:
    """
    List every date of a month.

    Raises:
        ValueError: If month is outside 1..12
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    _, last_day = calendar.monthrange(year, month)
    return [date(year, month, d) for d in range(1, last_day + 1)]


def covered_dates(start: datetime, end: datetime) -> Iterator[date]:
    """Yield each UTC calendar date touched by the half-open window [start, end)."""
    current = ensure_utc(start).date()
    last = (ensure_utc(end) - timedelta(microseconds=1)).date()
    while current <= last:
        yield current
        current += timedelta(days=1)
