"""Domain services for the workshop calendar.

These functions are the storage side of the availability engine: they load
the settings row, exclusion rows and active booking counts from the
database and hand them to the pure rules in ``domain.engine``.

The public read path fails open (a broken query falls back to defaults and
is logged), because the date picker is advisory and booking creation runs
its own check. Admin writes fail closed and let database errors propagate.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from django.conf import settings as django_settings  # type: ignore
from django.db import DatabaseError, transaction  # type: ignore
from django.db.models import Q  # type: ignore

from shared.domain.value_objects import DateSpan

from .domain.dates import add_months, local_today, parse_iso_date
from .domain.engine import (
    CalendarDay,
    DayExclusionRule,
    UnavailableReason,
    build_calendar,
    check_date,
    count_bookings_by_date,
    dates_over_limit,
    filter_future_excluded_dates,
)
from .models import AvailabilitySettings, ExcludedDate

logger = logging.getLogger(__name__)


class AvailabilityError(Exception):
    """Base error for rejected availability changes."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class SettingsUpdateError(AvailabilityError):
    """Raised when a settings update payload is not acceptable."""


class ExcludedDateValidationError(AvailabilityError):
    """Raised when a new excluded date range is not acceptable."""


def business_timezone() -> str:
    return django_settings.BUSINESS_TIME_ZONE


def window_months() -> int:
    return django_settings.BOOKING_WINDOW_MONTHS


def reason_message(reason: UnavailableReason) -> str:
    messages = {
        UnavailableReason.INVALID_DATE: "Invalid date format. Use YYYY-MM-DD.",
        UnavailableReason.PAST: "Bookings cannot be made for past dates.",
        UnavailableReason.OUTSIDE_WINDOW: (
            f"Bookings can only be made up to {window_months()} months in advance."
        ),
        UnavailableReason.EXCLUDED: "The workshop is closed on the selected date.",
        UnavailableReason.CLOSED_DAY: "Bookings are not available on this day of the week.",
        UnavailableReason.AT_CAPACITY: "This date is fully booked. Please choose another date.",
    }
    return messages[reason]


def booking_window(now: Optional[datetime] = None) -> DateSpan:
    today = local_today(business_timezone(), now)
    return DateSpan(today, add_months(today, window_months()))


def load_settings() -> AvailabilitySettings:
    return AvailabilitySettings.load()


# ---------------------------------------------------------------------------
# Active booking counts
# ---------------------------------------------------------------------------


def _active_bookings():
    from apps.bookings.models import Booking  # Local import to prevent circular dependency

    return Booking.objects.filter(status__in=Booking.ACTIVE_STATUSES)


def active_booking_counts(start: date, end: date) -> dict[str, int]:
    """``YYYY-MM-DD -> count`` of pending and ready bookings in [start, end]."""
    dates = _active_bookings().filter(date__gte=start, date__lte=end).values_list("date", flat=True)
    return count_bookings_by_date(dates)


def window_booking_counts(now: Optional[datetime] = None) -> dict[str, int]:
    window = booking_window(now)
    return active_booking_counts(window.start_date, window.end_date)


def active_booking_count_for(day: date) -> int:
    return _active_bookings().filter(date=day).count()


def active_booking_count_between(start: date, end: date) -> int:
    return _active_bookings().filter(date__gte=start, date__lte=end).count()


# ---------------------------------------------------------------------------
# Excluded dates
# ---------------------------------------------------------------------------


def future_excluded_dates_queryset(now: Optional[datetime] = None):
    today = local_today(business_timezone(), now)
    return ExcludedDate.objects.filter(
        Q(end_date__gte=today) | Q(end_date__isnull=True, start_date__gte=today)
    ).order_by("start_date")


def excluded_dates_with_warnings(*, future_only: bool = False, now: Optional[datetime] = None) -> list:
    """Exclusion rows paired with the number of active bookings inside each."""
    rows = list(ExcludedDate.objects.order_by("start_date"))
    if future_only:
        rows = filter_future_excluded_dates(rows, business_timezone(), now=now)
    return [
        (row, active_booking_count_between(row.start_date, row.effective_end_date))
        for row in rows
    ]


def create_excluded_date(
    start_date,
    end_date=None,
    reason: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> tuple[ExcludedDate, int]:
    """
    Close a single day or an inclusive range.

    Returns the new row and the number of active bookings that already sit
    inside it. Existing bookings do not block the exclusion; the count is
    surfaced to the admin as a warning.
    """
    zone = business_timezone()
    start = parse_iso_date(start_date, zone)
    if start is None:
        raise ExcludedDateValidationError("Invalid date format. Use YYYY-MM-DD.", field="start_date")

    end = None
    if end_date:
        end = parse_iso_date(end_date, zone)
        if end is None:
            raise ExcludedDateValidationError("Invalid end_date format. Use YYYY-MM-DD.", field="end_date")

    today = local_today(zone, now)
    if start < today:
        raise ExcludedDateValidationError("start_date must not be in the past.", field="start_date")
    if end is not None and end < start:
        raise ExcludedDateValidationError("end_date must be on or after start_date.", field="end_date")

    booking_count = active_booking_count_between(start, end or start)
    row = ExcludedDate.objects.create(
        start_date=start,
        end_date=end,
        reason=reason or None,
    )
    if booking_count:
        logger.warning(
            "Excluded date %s created over %s active booking(s)",
            row.span,
            booking_count,
        )
    else:
        logger.info("Excluded date %s created", row.span)
    return row, booking_count


def delete_excluded_date(row: ExcludedDate) -> None:
    span = row.span
    row.delete()
    logger.info("Excluded date %s deleted", span)


# ---------------------------------------------------------------------------
# Settings updates (admin write path)
# ---------------------------------------------------------------------------


@transaction.atomic
def update_day_rules(
    *,
    exclude_weekends: Optional[bool] = None,
    exclude_sundays: Optional[bool] = None,
    rule: Optional[DayExclusionRule] = None,
) -> AvailabilitySettings:
    """
    Change which days of the week are closed.

    Turning weekends on always clears the Sunday-only flag, since weekends
    already cover Sunday.
    """
    if rule is None and exclude_weekends is None and exclude_sundays is None:
        raise SettingsUpdateError("At least one field must be provided.")

    settings = load_settings()
    if rule is None:
        weekends = settings.exclude_weekends if exclude_weekends is None else bool(exclude_weekends)
        sundays = settings.exclude_sundays if exclude_sundays is None else bool(exclude_sundays)
        rule = DayExclusionRule.from_flags(weekends, sundays)

    settings.set_day_exclusion_rule(rule)
    settings.save(update_fields=["exclude_weekends", "exclude_sundays", "updated_at"])
    logger.info("Day exclusion rule set to %s", rule.value)
    return settings


@transaction.atomic
def update_service_limit(
    max_services_per_day: Optional[int],
    *,
    now: Optional[datetime] = None,
) -> tuple[AvailabilitySettings, list[dict]]:
    """
    Set or clear the daily service cap.

    Returns the settings and a list of ``{date, count}`` entries for days in
    the booking window that already exceed the new cap. Those bookings are
    kept; the list is only a warning.
    """
    if max_services_per_day is not None:
        if (
            isinstance(max_services_per_day, bool)
            or not isinstance(max_services_per_day, int)
            or max_services_per_day < 1
        ):
            raise SettingsUpdateError(
                "max_services_per_day must be a positive integer or null.",
                field="max_services_per_day",
            )

    warnings = dates_over_limit(window_booking_counts(now), max_services_per_day)

    settings = load_settings()
    settings.max_services_per_day = max_services_per_day
    settings.save(update_fields=["max_services_per_day", "updated_at"])

    if warnings:
        logger.warning(
            "Service limit lowered to %s with %s day(s) already over it",
            max_services_per_day,
            len(warnings),
        )
    else:
        logger.info("Service limit set to %s", max_services_per_day)
    return settings, warnings


# ---------------------------------------------------------------------------
# Read paths
# ---------------------------------------------------------------------------


def public_availability_snapshot(now: Optional[datetime] = None) -> dict:
    """
    Settings, future exclusions and booking counts for the booking form.

    Each part falls back independently when its query fails: default
    settings, no exclusions, no counts.
    """
    try:
        settings = load_settings()
    except DatabaseError:
        logger.exception("Failed to load availability settings; serving defaults")
        settings = AvailabilitySettings(pk=AvailabilitySettings.SINGLETON_PK)

    try:
        excluded = list(future_excluded_dates_queryset(now))
    except DatabaseError:
        logger.exception("Failed to load excluded dates; serving none")
        excluded = []

    try:
        counts = window_booking_counts(now)
    except DatabaseError:
        logger.exception("Failed to load booking counts; serving none")
        counts = {}

    return {
        "settings": settings,
        "excluded_dates": excluded,
        "booking_counts": counts,
    }


def availability_calendar(now: Optional[datetime] = None) -> list[CalendarDay]:
    snapshot = public_availability_snapshot(now)
    return build_calendar(
        snapshot["settings"].as_rules(),
        snapshot["excluded_dates"],
        snapshot["booking_counts"],
        business_timezone(),
        now=now,
        window_months=window_months(),
    )


def check_booking_date(day, *, now: Optional[datetime] = None) -> Optional[UnavailableReason]:
    """
    Authoritative check made before a booking is stored.

    Reads straight from the database without fallbacks. The count and the
    insert that follows are not serialized, so two requests racing for the
    last slot of a day can both pass.
    """
    parsed = parse_iso_date(day, business_timezone())
    if parsed is None:
        return UnavailableReason.INVALID_DATE

    settings = load_settings()
    excluded = list(future_excluded_dates_queryset(now))
    count = active_booking_count_for(parsed)
    return check_date(
        parsed,
        settings.as_rules(),
        excluded,
        business_timezone(),
        count,
        now=now,
        window_months=window_months(),
    )
