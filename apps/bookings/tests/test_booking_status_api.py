"""API tests for staff booking status changes and bulk actions."""

from __future__ import annotations

from datetime import date, timedelta

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.availability.domain.dates import local_today
from apps.availability.services import active_booking_count_for
from apps.bookings.models import Booking
from apps.customers.models import Customer

User = get_user_model()


class BookingStatusAPITests(APITestCase):
    def setUp(self) -> None:
        self.staff = User.objects.create_user(username="mechanic", password="StaffPass123", is_staff=True)
        self.client.force_authenticate(self.staff)
        today = local_today("Europe/London")
        self.day = today + timedelta(days=7 - today.weekday())
        self.customer = Customer.objects.create(name="Chris", phone="07700900300")

    def _book(self, status_value: str = Booking.Status.PENDING, day: date | None = None) -> Booking:
        return Booking.objects.create(
            customer=self.customer,
            service_type=Booking.ServiceType.BASIC_SERVICE,
            date=day or self.day,
            bike_details="Trek Domane",
            status=status_value,
        )

    def _post(self, name: str, booking: Booking, data=None):
        return self.client.post(reverse(name, args=[booking.id]), data or {}, format="json")

    def test_mark_ready(self) -> None:
        booking = self._book()

        response = self._post("booking-ready", booking)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.READY)
        self.assertIsNotNone(booking.ready_at)

        response = self._post("booking-ready", booking)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_complete_requires_ready_unless_stage_is_skipped(self) -> None:
        booking = self._book()

        response = self._post("booking-complete", booking)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["detail"], "Booking must be ready before marking as complete.")

        response = self._post("booking-complete", booking, {"skip_stage": True})
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.COMPLETE)
        self.assertIsNotNone(booking.completed_at)

    def test_complete_from_ready(self) -> None:
        booking = self._book(Booking.Status.READY)

        response = self._post("booking-complete", booking)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "complete")

    def test_only_pending_bookings_can_be_cancelled(self) -> None:
        ready = self._book(Booking.Status.READY)
        response = self._post("booking-cancel", ready)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["detail"], "Only pending bookings can be cancelled.")

        pending = self._book()
        response = self._post("booking-cancel", pending)
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        pending.refresh_from_db()
        self.assertEqual(pending.status, Booking.Status.CANCELLED)
        self.assertIsNotNone(pending.cancelled_at)

    def test_restore_returns_a_cancelled_booking_to_pending(self) -> None:
        booking = self._book()
        self._post("booking-cancel", booking)
        self.assertEqual(active_booking_count_for(self.day), 0)

        response = self._post("booking-restore", booking)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.PENDING)
        self.assertIsNone(booking.cancelled_at)
        self.assertIsNone(booking.completed_at)
        self.assertIsNone(booking.ready_at)
        self.assertEqual(active_booking_count_for(self.day), 1)

    def test_only_cancelled_bookings_can_be_restored(self) -> None:
        for status_value in (Booking.Status.PENDING, Booking.Status.READY, Booking.Status.COMPLETE):
            with self.subTest(status=status_value):
                response = self._post("booking-restore", self._book(status_value))
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_notes_and_bike_details(self) -> None:
        booking = self._book()

        response = self.client.patch(
            reverse("booking-notes", args=[booking.id]),
            {"notes": "Customer will collect after 5pm"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

        response = self.client.patch(
            reverse("booking-bike-details", args=[booking.id]),
            {"bike_details": "Trek Domane SL5, 56cm"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

        booking.refresh_from_db()
        self.assertEqual(booking.notes, "Customer will collect after 5pm")
        self.assertEqual(booking.bike_details, "Trek Domane SL5, 56cm")

        response = self.client.patch(reverse("booking-notes", args=[booking.id]), {"notes": ""}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        booking.refresh_from_db()
        self.assertIsNone(booking.notes)

    def test_unknown_booking_is_not_found(self) -> None:
        response = self.client.post(reverse("booking-ready", args=[999999]), {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_status_changes_require_staff(self) -> None:
        booking = self._book()
        self.client.force_authenticate(User.objects.create_user(username="rider", password="RiderPass123"))

        response = self._post("booking-ready", booking)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.PENDING)


class BookingBulkAPITests(APITestCase):
    def setUp(self) -> None:
        self.staff = User.objects.create_user(username="mechanic", password="StaffPass123", is_staff=True)
        self.client.force_authenticate(self.staff)
        self.customer = Customer.objects.create(name="Chris", phone="07700900300")
        self.day = local_today("Europe/London") + timedelta(days=1)
        self.url = reverse("booking-bulk")

    def _book(self, status_value: str) -> Booking:
        return Booking.objects.create(
            customer=self.customer,
            service_type=Booking.ServiceType.FULL_SERVICE,
            date=self.day,
            bike_details="Giant TCR",
            status=status_value,
        )

    def test_mark_complete_reports_each_booking(self) -> None:
        ready = self._book(Booking.Status.READY)
        pending = self._book(Booking.Status.PENDING)

        response = self.client.post(
            self.url,
            {"booking_ids": [ready.id, pending.id, 999999], "action": "mark_complete"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        results = response.data["results"]
        self.assertEqual(results["succeeded"], 1)
        self.assertEqual(results["failed"], 2)
        self.assertEqual(results["details"]["success"], [ready.id])
        failed = {item["id"]: item["error"] for item in results["details"]["failed"]}
        self.assertEqual(failed[pending.id], "Booking must be ready before marking as complete.")
        self.assertEqual(failed[999999], "Booking not found.")
        ready.refresh_from_db()
        pending.refresh_from_db()
        self.assertEqual(ready.status, Booking.Status.COMPLETE)
        self.assertEqual(pending.status, Booking.Status.PENDING)

    def test_mark_ready(self) -> None:
        bookings = [self._book(Booking.Status.PENDING) for _ in range(3)]

        response = self.client.post(
            self.url,
            {"booking_ids": [booking.id for booking in bookings], "action": "mark_ready"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["results"]["succeeded"], 3)
        self.assertEqual(Booking.objects.filter(status=Booking.Status.READY).count(), 3)

    def test_skip_to_complete_only_from_pending(self) -> None:
        pending = self._book(Booking.Status.PENDING)
        ready = self._book(Booking.Status.READY)

        response = self.client.post(
            self.url,
            {"booking_ids": [pending.id, ready.id], "action": "skip_to_complete"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["results"]["details"]["success"], [pending.id])
        ready.refresh_from_db()
        self.assertEqual(ready.status, Booking.Status.READY)

    def test_invalid_payloads(self) -> None:
        booking = self._book(Booking.Status.PENDING)
        cases = [
            {"booking_ids": [], "action": "mark_ready"},
            {"booking_ids": [booking.id], "action": "cancel"},
            {"action": "mark_ready"},
        ]
        for payload in cases:
            with self.subTest(payload=payload):
                response = self.client.post(self.url, payload, format="json")
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_bookings_are_not_found(self) -> None:
        response = self.client.post(self.url, {"booking_ids": [999998, 999999], "action": "mark_ready"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
