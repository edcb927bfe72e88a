"""Booking domain models."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from .domain.lifecycle import ACTIVE_STATUSES, BookingAction, BookingStatus, next_status


class Booking(models.Model):
    """A bike booked in for a service on a given day."""

    class Status(models.TextChoices):
        PENDING = BookingStatus.PENDING.value, _("Pending")
        READY = BookingStatus.READY.value, _("Ready for collection")
        COMPLETE = BookingStatus.COMPLETE.value, _("Complete")
        CANCELLED = BookingStatus.CANCELLED.value, _("Cancelled")

    class ServiceType(models.TextChoices):
        BASIC_SERVICE = "basic_service", _("Basic service")
        FULL_SERVICE = "full_service", _("Full service")
        STRIP_AND_REBUILD = "strip_and_rebuild", _("Strip and rebuild")
        BOSCH_DIAGNOSTICS = "bosch_diagnostics", _("Bosch diagnostics")

    ACTIVE_STATUSES = ACTIVE_STATUSES

    reference_number = models.CharField(
        max_length=20,
        unique=True,
        null=True,
        blank=True,
        editable=False,
    )
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    service_type = models.CharField(max_length=32, choices=ServiceType.choices)
    date = models.DateField(help_text=_("Calendar day the bike is booked in."))
    bike_details = models.TextField()
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
    )
    notes = models.TextField(null=True, blank=True)
    ready_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["date", "created_at"]
        indexes = [
            models.Index(fields=["date", "status"], name="booking_date_status_idx"),
            models.Index(fields=["status"], name="booking_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.reference_number or self.pk} on {self.date}"

    def _transition(self, action: BookingAction, **timestamps) -> None:
        self.status = next_status(self.status, action).value
        for field, value in timestamps.items():
            setattr(self, field, value)
        self.save(update_fields=["status", *timestamps.keys(), "updated_at"])

    def mark_ready(self) -> None:
        self._transition(BookingAction.MARK_READY, ready_at=timezone.now())

    def mark_complete(self, skip_stage: bool = False) -> None:
        action = BookingAction.MARK_COMPLETE
        if skip_stage and self.status == self.Status.PENDING:
            action = BookingAction.SKIP_TO_COMPLETE
        self._transition(action, completed_at=timezone.now())

    def mark_cancelled(self) -> None:
        self._transition(BookingAction.CANCEL, cancelled_at=timezone.now())

    def restore(self) -> None:
        self._transition(
            BookingAction.RESTORE,
            ready_at=None,
            completed_at=None,
            cancelled_at=None,
        )
