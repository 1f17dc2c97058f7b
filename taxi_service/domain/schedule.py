"""
Schedule and deadline helpers.

All timestamps the core writes are timezone-aware UTC.  Values read back
from databases that drop the offset (SQLite) are treated as UTC.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from .enums import StatisticsPeriod
from .errors import InvalidScheduleDate

SCHEDULED_DATE_FORMAT = "%d.%m.%Y"  # DD.MM.YYYY


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_scheduled_date(raw: str) -> date:
    """Parse a ``DD.MM.YYYY`` string, raising ``InvalidScheduleDate``."""
    try:
        return datetime.strptime(raw.strip(), SCHEDULED_DATE_FORMAT).date()
    except (AttributeError, ValueError):
        raise InvalidScheduleDate(value=raw) from None


def accept_deadline(now: datetime, window_minutes: int) -> datetime:
    return as_utc(now) + timedelta(minutes=window_minutes)


def period_start(now: datetime, period: StatisticsPeriod) -> datetime:
    """Start (UTC midnight) of the day, month or year containing *now*."""
    start = as_utc(now).replace(hour=0, minute=0, second=0, microsecond=0)
    if period is StatisticsPeriod.DAILY:
        return start
    if period is StatisticsPeriod.MONTHLY:
        return start.replace(day=1)
    return start.replace(month=1, day=1)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)
