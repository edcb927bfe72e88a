"""Domain services for booking workflows."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from django.conf import settings as django_settings  # type: ignore
from django.db import DatabaseError, transaction  # type: ignore

from apps.availability.domain.dates import local_today, parse_iso_date
from apps.availability.services import business_timezone, check_booking_date, reason_message
from apps.customers.services import upsert_customer

from .domain.lifecycle import (
    BookingAction,
    BookingError,
    DateUnavailableError,
    InvalidStatusTransition,
)
from .domain.reference import (
    format_reference_number,
    is_valid_reference_number,
    next_sequence,
    parse_sequence,
    year_prefix,
)
from .models import Booking

logger = logging.getLogger(__name__)


def ensure_date_is_available(day, *, now: Optional[datetime] = None) -> None:
    """Raise ``DateUnavailableError`` unless the day can take a new booking."""
    reason = check_booking_date(day, now=now)
    if reason is not None:
        raise DateUnavailableError(reason_message(reason), reason=reason)


def generate_reference_number(year: Optional[int] = None) -> Optional[str]:
    """
    Next free reference number for ``year`` (default: the current local year).

    Returns None when no number can be produced. A booking without a
    reference is still a valid booking.
    """
    prefix = django_settings.BOOKING_REFERENCE_PREFIX
    if year is None:
        year = local_today(business_timezone()).year

    try:
        # Savepoint, so a failed lookup leaves the caller's transaction usable.
        with transaction.atomic():
            latest_ref = (
                Booking.objects.filter(reference_number__startswith=year_prefix(year, prefix))
                .order_by("-reference_number")
                .values_list("reference_number", flat=True)
                .first()
            )
            sequence, wrapped = next_sequence(parse_sequence(latest_ref, year, prefix))
            reference = format_reference_number(year, sequence, prefix)
            if wrapped:
                logger.warning("Reference sequence for %s exceeded 9999, wrapping to 0001", year)
                if Booking.objects.filter(reference_number=reference).exists():
                    logger.error("Wrapped reference %s is already taken", reference)
                    return None
    except DatabaseError:
        logger.exception("Failed to generate a reference number for %s", year)
        return None

    if not is_valid_reference_number(reference, prefix):
        logger.error("Generated invalid reference number %s", reference)
        return None
    return reference


@transaction.atomic
def create_booking(
    *,
    name: str,
    phone: str,
    service_type: str,
    date,
    bike_details: str,
    email: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Booking:
    """
    Store a new pending booking after the authoritative availability check.

    The capacity count and the insert are not locked against each other:
    two requests competing for the last slot of a day can both succeed and
    leave the day one over its cap.
    """
    ensure_date_is_available(date, now=now)
    day = parse_iso_date(date, business_timezone())

    customer = upsert_customer(name=name, phone=phone, email=email)
    booking = Booking.objects.create(
        reference_number=generate_reference_number(),
        customer=customer,
        service_type=service_type,
        date=day,
        bike_details=bike_details,
        status=Booking.Status.PENDING,
    )
    logger.info(
        "Booking %s created for %s (%s)",
        booking.reference_number or booking.pk,
        booking.date,
        booking.service_type,
    )
    return booking


def transition_booking(booking: Booking, action, **kwargs) -> Booking:
    action = BookingAction(action)
    previous = booking.status
    if action is BookingAction.MARK_READY:
        booking.mark_ready()
    elif action is BookingAction.MARK_COMPLETE:
        booking.mark_complete(skip_stage=kwargs.get("skip_stage", False))
    elif action is BookingAction.SKIP_TO_COMPLETE:
        if booking.status != Booking.Status.PENDING:
            raise InvalidStatusTransition("Can only skip to complete from pending status.")
        booking.mark_complete(skip_stage=True)
    elif action is BookingAction.CANCEL:
        booking.mark_cancelled()
    elif action is BookingAction.RESTORE:
        booking.restore()
    logger.info("Booking %s moved %s -> %s", booking.pk, previous, booking.status)
    return booking


BULK_ACTIONS = (
    BookingAction.MARK_READY.value,
    BookingAction.MARK_COMPLETE.value,
    BookingAction.SKIP_TO_COMPLETE.value,
)


def apply_bulk_action(booking_ids: Iterable[int], action: str) -> dict:
    """
    Apply one status action to several bookings.

    Each booking succeeds or fails on its own; a failure never rolls back
    the others.
    """
    ids = list(dict.fromkeys(booking_ids))
    bookings = Booking.objects.in_bulk(ids)
    succeeded: list = []
    failed: list = []

    for booking_id in ids:
        booking = bookings.get(booking_id)
        if booking is None:
            failed.append({"id": booking_id, "error": "Booking not found."})
            continue
        try:
            with transaction.atomic():
                transition_booking(booking, action)
        except BookingError as exc:
            failed.append({"id": booking_id, "error": exc.message})
        else:
            succeeded.append(booking_id)

    if failed:
        logger.warning("Bulk %s: %s succeeded, %s failed", action, len(succeeded), len(failed))
    return {
        "succeeded": len(succeeded),
        "failed": len(failed),
        "details": {"success": succeeded, "failed": failed},
    }


def update_notes(booking: Booking, notes: Optional[str]) -> Booking:
    booking.notes = notes or None
    booking.save(update_fields=["notes", "updated_at"])
    return booking


def update_bike_details(booking: Booking, bike_details: str) -> Booking:
    booking.bike_details = bike_details
    booking.save(update_fields=["bike_details", "updated_at"])
    return booking
