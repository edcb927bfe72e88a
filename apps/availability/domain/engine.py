"""
Availability Engine

Decides whether a calendar day can take a new booking. The rules are
evaluated in a fixed order and the first failing rule wins:

1. Not in the past (today is bookable)
2. Within the booking window (today + 6 calendar months, inclusive)
3. Not inside an excluded date range (both endpoints inclusive)
4. Not a closed day of the week (weekends or Sundays only)
5. Below the daily service capacity, when a count and a cap are known

Nothing in this module touches the database. Callers fetch the settings,
the exclusion rows and the active booking counts and pass them in, so the
same rules serve the public date picker, the calendar view and the
authoritative check made when a booking is created.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Iterable, List, Optional

from shared.domain.base import ValueObject
from shared.domain.value_objects import DateSpan

from .dates import (
    MAX_BOOKING_MONTHS,
    ZoneLike,
    add_months,
    anchor_local,
    day_of_week,
    iter_dates,
    local_today,
    parse_iso_date,
)

SUNDAY = 0
SATURDAY = 6


class UnavailableReason(str, Enum):
    INVALID_DATE = "invalid_date"
    PAST = "past"
    OUTSIDE_WINDOW = "outside_window"
    EXCLUDED = "excluded"
    CLOSED_DAY = "closed_day"
    AT_CAPACITY = "at_capacity"


class DayExclusionRule(str, Enum):
    """
    Which days of the week the workshop is closed.

    Stored as two booleans for existing rows; this enum is the only
    combination space the code works with, so "weekends and Sundays" can
    not be expressed.
    """
    NONE = "none"
    SUNDAYS = "sundays"
    WEEKENDS = "weekends"

    @classmethod
    def from_flags(cls, exclude_weekends: bool, exclude_sundays: bool) -> "DayExclusionRule":
        if exclude_weekends:
            return cls.WEEKENDS
        if exclude_sundays:
            return cls.SUNDAYS
        return cls.NONE

    @property
    def closed_days(self) -> frozenset:
        if self is DayExclusionRule.WEEKENDS:
            return frozenset({SATURDAY, SUNDAY})
        if self is DayExclusionRule.SUNDAYS:
            return frozenset({SUNDAY})
        return frozenset()

    def as_flags(self) -> dict:
        return {
            "exclude_weekends": self is DayExclusionRule.WEEKENDS,
            "exclude_sundays": self is DayExclusionRule.SUNDAYS,
        }


@dataclass(frozen=True)
class AvailabilityRules(ValueObject):
    """The settings singleton reduced to what the engine needs."""
    day_rule: DayExclusionRule = DayExclusionRule.NONE
    max_services_per_day: Optional[int] = None

    @classmethod
    def from_flags(
        cls,
        exclude_weekends: bool = False,
        exclude_sundays: bool = False,
        max_services_per_day: Optional[int] = None,
    ) -> "AvailabilityRules":
        return cls(
            day_rule=DayExclusionRule.from_flags(bool(exclude_weekends), bool(exclude_sundays)),
            max_services_per_day=max_services_per_day,
        )


@dataclass(frozen=True)
class CalendarDay(ValueObject):
    date: date
    available: bool
    reason: Optional[UnavailableReason]
    booking_count: int
    at_capacity: bool


def _field(row, name: str):
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


def coerce_rules(settings) -> Optional[AvailabilityRules]:
    """
    Accept a settings model, a wire mapping or ready-made rules.

    Returns None when no settings are available.
    """
    if settings is None or isinstance(settings, AvailabilityRules):
        return settings
    return AvailabilityRules.from_flags(
        exclude_weekends=_field(settings, "exclude_weekends") or False,
        exclude_sundays=_field(settings, "exclude_sundays") or False,
        max_services_per_day=_field(settings, "max_services_per_day"),
    )


def exclusion_span(row) -> Optional[DateSpan]:
    """
    The inclusive span covered by an exclusion row.

    A row without an end date covers its start date only. Rows that do not
    parse, or whose end precedes the start, yield None.
    """
    if isinstance(row, DateSpan):
        return row
    start = parse_iso_date(_field(row, "start_date"))
    if start is None:
        return None
    raw_end = _field(row, "end_date")
    end = parse_iso_date(raw_end) if raw_end else start
    if end is None or end < start:
        return None
    return DateSpan(start, end)


def _spans(excluded_dates) -> List[DateSpan]:
    spans = []
    for row in excluded_dates or ():
        span = exclusion_span(row)
        if span is not None:
            spans.append(span)
    return spans


def is_excluded(day, excluded_dates) -> bool:
    check = parse_iso_date(day)
    if check is None:
        return False
    return any(span.contains(check) for span in _spans(excluded_dates))


def check_date(
    day,
    settings,
    excluded_dates: Iterable = (),
    timezone: ZoneLike = None,
    active_booking_count: Optional[int] = None,
    *,
    now: Optional[datetime] = None,
    window_months: int = MAX_BOOKING_MONTHS,
) -> Optional[UnavailableReason]:
    """
    Return the first rule the day fails, or None when it can be booked.

    ``settings`` may be None, in which case only the date, window and
    exclusion rules apply.
    """
    anchored = anchor_local(day, timezone)
    if anchored is None:
        return UnavailableReason.INVALID_DATE
    check = anchored.date()

    today = local_today(timezone, now)
    if check < today:
        return UnavailableReason.PAST
    if check > add_months(today, window_months):
        return UnavailableReason.OUTSIDE_WINDOW

    for span in _spans(excluded_dates):
        if span.contains(check):
            return UnavailableReason.EXCLUDED

    rules = coerce_rules(settings)
    if rules is None:
        return None

    if day_of_week(check) in rules.day_rule.closed_days:
        return UnavailableReason.CLOSED_DAY

    if (
        active_booking_count is not None
        and rules.max_services_per_day is not None
        and active_booking_count >= rules.max_services_per_day
    ):
        return UnavailableReason.AT_CAPACITY

    return None


def is_date_available(
    day,
    settings,
    excluded_dates: Iterable = (),
    timezone: ZoneLike = None,
    active_booking_count: Optional[int] = None,
    *,
    now: Optional[datetime] = None,
    window_months: int = MAX_BOOKING_MONTHS,
) -> bool:
    return check_date(
        day,
        settings,
        excluded_dates,
        timezone,
        active_booking_count,
        now=now,
        window_months=window_months,
    ) is None


def filter_future_excluded_dates(excluded_dates, timezone: ZoneLike = None, *, now: Optional[datetime] = None) -> list:
    """Keep the exclusion rows whose last day is today or later."""
    today = local_today(timezone, now)
    future = []
    for row in excluded_dates or ():
        span = exclusion_span(row)
        if span is not None and span.end_date >= today:
            future.append(row)
    return future


def count_bookings_by_date(bookings) -> dict:
    """
    Group active bookings into a ``YYYY-MM-DD -> count`` mapping.

    Items may be rows with a ``date`` field or bare dates/strings. Dates
    carrying a timestamp part are truncated to the calendar day.
    """
    counts: dict = {}
    for item in bookings or ():
        raw = item if isinstance(item, (str, date)) else _field(item, "date")
        day = parse_iso_date(raw)
        if day is None:
            continue
        key = day.isoformat()
        counts[key] = counts.get(key, 0) + 1
    return dict(sorted(counts.items()))


def dates_at_capacity(booking_counts: Mapping, max_services_per_day: Optional[int]) -> List[str]:
    if max_services_per_day is None:
        return []
    return sorted(day for day, count in booking_counts.items() if count >= max_services_per_day)


def dates_over_limit(booking_counts: Mapping, limit: Optional[int]) -> List[dict]:
    """Dates that already hold more active bookings than ``limit``."""
    if limit is None:
        return []
    return [
        {"date": day, "count": count}
        for day, count in sorted(booking_counts.items())
        if count > limit
    ]


def build_calendar(
    settings,
    excluded_dates: Iterable = (),
    booking_counts: Optional[Mapping] = None,
    timezone: ZoneLike = None,
    *,
    now: Optional[datetime] = None,
    window_months: int = MAX_BOOKING_MONTHS,
) -> List[CalendarDay]:
    """One entry per day from today to the end of the booking window."""
    rules = coerce_rules(settings)
    spans = _spans(excluded_dates)
    booking_counts = booking_counts or {}
    cap = rules.max_services_per_day if rules else None

    today = local_today(timezone, now)
    days = []
    for day in iter_dates(today, add_months(today, window_months)):
        count = booking_counts.get(day.isoformat(), 0)
        reason = check_date(
            day,
            rules,
            spans,
            timezone,
            count,
            now=now,
            window_months=window_months,
        )
        days.append(
            CalendarDay(
                date=day,
                available=reason is None,
                reason=reason,
                booking_count=count,
                at_capacity=cap is not None and count >= cap,
            )
        )
    return days
