from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, tzinfo
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE, DISPLAY_DATETIME_FORMAT

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@lru_cache(maxsize=None)
def reference_zone(name: str = DEFAULT_TIMEZONE) -> ZoneInfo:
    return ZoneInfo(name)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local(tz: Optional[tzinfo] = None) -> datetime:
    """Current time in the reference zone.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(tz or reference_zone())


def today_local(tz: Optional[tzinfo] = None) -> date:
    return now_local(tz).date()


def as_zone(value: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Attach (naive) or convert (aware) a datetime to the reference zone."""
    tz = tz or reference_zone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def to_wall_clock(value: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Naive reference-zone wall clock, the form stored in DATETIME columns."""
    return as_zone(value, tz).replace(tzinfo=None)


def day_bounds(day: date, tz: Optional[tzinfo] = None) -> tuple[datetime, datetime]:
    """[start, end) of a calendar day in the reference zone."""
    tz = tz or reference_zone()
    start = datetime.combine(day, time.min, tzinfo=tz)
    return start, start + timedelta(days=1)


def to_display(value: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
    if value is None:
        return "N/A"
    return as_zone(value, tz).strftime(DISPLAY_DATETIME_FORMAT)
