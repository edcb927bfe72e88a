"""
Calendar date helpers for the workshop timezone.

Every date that crosses the API boundary is a plain ``YYYY-MM-DD`` string
without an offset. It is always read as a calendar day in the business
timezone, anchored at 12:00 local time so that DST transitions around
midnight can never move it to the neighbouring day.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone as dt_timezone, tzinfo
from functools import lru_cache
from typing import Iterator, Optional, Union
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta

DEFAULT_TIME_ZONE = "Europe/London"
MAX_BOOKING_MONTHS = 6
ANCHOR_TIME = time(12, 0)

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")
_UTC_OFFSET = re.compile(r"(Z|[+-]\d{2}:\d{2})$")

DateLike = Union[str, date]
ZoneLike = Union[str, tzinfo, None]


@lru_cache(maxsize=16)
def _zone_by_name(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def get_zone(tz: ZoneLike = None) -> tzinfo:
    if tz is None:
        return _zone_by_name(DEFAULT_TIME_ZONE)
    if isinstance(tz, str):
        return _zone_by_name(tz)
    return tz


def parse_iso_date(value, tz: ZoneLike = None) -> Optional[date]:
    """
    Parse a wire date into a calendar day.

    Accepts ``date`` objects and ``YYYY-MM-DD`` strings. A trailing local
    timestamp part (``2026-01-29T00:00:00``) is dropped. A timestamp with
    an offset (``2026-01-29T23:30:00Z``) is an instant and is converted to
    the business timezone before the day is taken. Returns None for
    anything that is not a real calendar date.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(get_zone(tz)).date()
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    day_text, _, time_text = text.partition("T")
    if not _ISO_DATE.fullmatch(day_text):
        return None
    try:
        day = date.fromisoformat(day_text)
    except ValueError:
        return None
    if not _UTC_OFFSET.search(time_text):
        return day
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        instant = datetime.fromisoformat(text)
    except ValueError:
        return None
    return instant.astimezone(get_zone(tz)).date()


def anchor_local(value: DateLike, tz: ZoneLike = None) -> Optional[datetime]:
    """Return the aware instant at local noon on the given calendar day."""
    day = parse_iso_date(value, tz)
    if day is None:
        return None
    return datetime.combine(day, ANCHOR_TIME, tzinfo=get_zone(tz))


def local_today(tz: ZoneLike = None, now: Optional[datetime] = None) -> date:
    """
    Today's calendar date in the business timezone.

    ``now`` defaults to the current instant. Naive datetimes are taken to
    be UTC, matching what the server clock reports.
    """
    if now is None:
        now = datetime.now(dt_timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=dt_timezone.utc)
    return now.astimezone(get_zone(tz)).date()


def add_months(day: date, months: int) -> date:
    """Calendar-month addition; clamps to the last day of shorter months."""
    return day + relativedelta(months=months)


def booking_window_end(
    tz: ZoneLike = None,
    now: Optional[datetime] = None,
    months: int = MAX_BOOKING_MONTHS,
) -> date:
    return add_months(local_today(tz, now), months)


def day_of_week(day: date) -> int:
    """0 = Sunday .. 6 = Saturday."""
    return day.isoweekday() % 7


def iter_dates(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
