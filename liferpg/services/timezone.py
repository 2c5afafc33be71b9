"""
Day-boundary helpers.

Every "which day is it" question is answered from an explicit instant and
an IANA timezone name, never from the process clock or local timezone.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from liferpg.core.config import settings
from liferpg.core.errors import InvalidInputError


def resolve_timezone(name: Optional[str]) -> ZoneInfo:
    try:
        return ZoneInfo(name or settings.DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidInputError(f"Unknown timezone {name!r}.", field="timezone")


def local_date(instant: datetime, tz_name: Optional[str]) -> date:
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(resolve_timezone(tz_name)).date()


def local_date_key(instant: datetime, tz_name: Optional[str]) -> str:
    return local_date(instant, tz_name).isoformat()


def week_start(day: date) -> date:
    """Monday of the week containing `day`."""
    return day - timedelta(days=day.weekday())


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)
