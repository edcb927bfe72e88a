"""
Booking lifecycle

State transitions:
- PENDING -> READY (bike serviced, waiting for collection)
- READY -> COMPLETE (bike collected)
- PENDING -> COMPLETE (only when the ready stage is skipped)
- PENDING -> CANCELLED
- CANCELLED -> PENDING (restore)

Only PENDING and READY bookings are active and take up a slot of the
daily service capacity.
"""

from __future__ import annotations

from enum import Enum


class BookingError(Exception):
    """Base error for rejected booking operations."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidStatusTransition(BookingError):
    """Raised when a booking is not in a status the action can start from."""


class DateUnavailableError(BookingError):
    """Raised when the requested service date cannot take a booking."""

    def __init__(self, message: str, reason=None) -> None:
        super().__init__(message)
        self.reason = reason


class BookingStatus(str, Enum):
    PENDING = "pending"
    READY = "ready"
    COMPLETE = "complete"
    CANCELLED = "cancelled"


ACTIVE_STATUSES = (BookingStatus.PENDING.value, BookingStatus.READY.value)


class BookingAction(str, Enum):
    MARK_READY = "mark_ready"
    MARK_COMPLETE = "mark_complete"
    SKIP_TO_COMPLETE = "skip_to_complete"
    CANCEL = "cancel"
    RESTORE = "restore"


_TRANSITIONS = {
    BookingAction.MARK_READY: (
        {BookingStatus.PENDING},
        BookingStatus.READY,
        "Only pending bookings can be marked as ready.",
    ),
    BookingAction.MARK_COMPLETE: (
        {BookingStatus.READY},
        BookingStatus.COMPLETE,
        "Booking must be ready before marking as complete.",
    ),
    BookingAction.SKIP_TO_COMPLETE: (
        {BookingStatus.PENDING},
        BookingStatus.COMPLETE,
        "Can only skip to complete from pending status.",
    ),
    BookingAction.CANCEL: (
        {BookingStatus.PENDING},
        BookingStatus.CANCELLED,
        "Only pending bookings can be cancelled.",
    ),
    BookingAction.RESTORE: (
        {BookingStatus.CANCELLED},
        BookingStatus.PENDING,
        "Only cancelled bookings can be restored.",
    ),
}


def next_status(current, action) -> BookingStatus:
    """Status reached by applying ``action``; raises when it is not allowed."""
    allowed, target, message = _TRANSITIONS[BookingAction(action)]
    if BookingStatus(current) not in allowed:
        raise InvalidStatusTransition(message)
    return target
