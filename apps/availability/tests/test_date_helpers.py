"""Tests for the business-timezone date helpers."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from apps.availability.domain.dates import (
    add_months,
    anchor_local,
    booking_window_end,
    day_of_week,
    iter_dates,
    local_today,
    parse_iso_date,
)
from shared.domain.value_objects import DateSpan


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2026-01-29", date(2026, 1, 29)),
        (" 2026-01-29 ", date(2026, 1, 29)),
        ("2026-01-29T00:00:00", date(2026, 1, 29)),
        (date(2026, 1, 29), date(2026, 1, 29)),
        (datetime(2026, 1, 29, 18, 45), date(2026, 1, 29)),
        ("2026-1-29", None),
        ("2026-02-29", None),
        ("tomorrow", None),
        (None, None),
    ],
)
def test_parse_iso_date(value, expected) -> None:
    assert parse_iso_date(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2026-01-29T23:30:00Z", date(2026, 1, 29)),
        ("2026-06-22T23:30:00Z", date(2026, 6, 23)),
        ("2026-06-22T23:30:00.000+00:00", date(2026, 6, 23)),
        ("2026-01-29T20:00:00-05:00", date(2026, 1, 30)),
        (datetime(2026, 6, 22, 23, 30, tzinfo=timezone.utc), date(2026, 6, 23)),
        ("2026-01-29T99:00:00Z", None),
    ],
)
def test_instants_are_read_in_the_business_timezone(value, expected) -> None:
    assert parse_iso_date(value) == expected


def test_instant_follows_the_given_timezone() -> None:
    assert parse_iso_date("2026-01-29T23:30:00Z", "Asia/Tokyo") == date(2026, 1, 30)
    assert parse_iso_date("2026-01-29T23:30:00", "Asia/Tokyo") == date(2026, 1, 29)


def test_anchor_is_local_noon() -> None:
    winter = anchor_local("2026-01-29")
    summer = anchor_local("2026-06-22")
    assert (winter.hour, winter.minute) == (12, 0)
    assert winter.utcoffset().total_seconds() == 0
    assert summer.utcoffset().total_seconds() == 3600
    assert summer.astimezone(timezone.utc).date() == date(2026, 6, 22)
    assert anchor_local("nope") is None


def test_anchor_survives_clock_change_days() -> None:
    # Clocks go forward on 29 March 2026 and back on 25 October 2026.
    assert anchor_local("2026-03-29").date() == date(2026, 3, 29)
    assert anchor_local("2026-10-25").date() == date(2026, 10, 25)


def test_local_today_uses_the_business_timezone() -> None:
    late_evening_utc = datetime(2026, 6, 21, 23, 30, tzinfo=timezone.utc)
    assert local_today("Europe/London", late_evening_utc) == date(2026, 6, 22)
    assert local_today("UTC", late_evening_utc) == date(2026, 6, 21)


@pytest.mark.parametrize(
    ("start", "months", "expected"),
    [
        (date(2026, 1, 29), 6, date(2026, 7, 29)),
        (date(2026, 1, 31), 6, date(2026, 7, 31)),
        (date(2026, 8, 31), 6, date(2027, 2, 28)),
        (date(2027, 8, 31), 6, date(2028, 2, 29)),
    ],
)
def test_add_months_clamps_to_month_end(start, months, expected) -> None:
    assert add_months(start, months) == expected


def test_booking_window_end() -> None:
    now = datetime(2026, 1, 29, 10, 0, tzinfo=timezone.utc)
    assert booking_window_end("Europe/London", now) == date(2026, 7, 29)
    assert booking_window_end("Europe/London", now, months=1) == date(2026, 2, 28)


def test_day_of_week_counts_from_sunday() -> None:
    assert day_of_week(date(2026, 2, 1)) == 0
    assert day_of_week(date(2026, 2, 2)) == 1
    assert day_of_week(date(2026, 1, 31)) == 6


def test_iter_dates_is_inclusive() -> None:
    days = list(iter_dates(date(2026, 1, 30), date(2026, 2, 2)))
    assert days == [date(2026, 1, 30), date(2026, 1, 31), date(2026, 2, 1), date(2026, 2, 2)]
    assert list(iter_dates(date(2026, 2, 2), date(2026, 2, 1))) == []


def test_date_span() -> None:
    span = DateSpan.from_bounds(date(2026, 2, 2), None)
    assert span.contains(date(2026, 2, 2))
    assert not span.contains(date(2026, 2, 3))
    assert str(span) == "2026-02-02"

    week = DateSpan.from_bounds(date(2026, 2, 2), date(2026, 2, 8))
    assert week.contains(date(2026, 2, 2))
    assert week.contains(date(2026, 2, 8))
    assert not week.contains(date(2026, 2, 9))
    assert str(week) == "2026-02-02 - 2026-02-08"
    with pytest.raises(ValueError):
        DateSpan(date(2026, 2, 8), date(2026, 2, 2))
