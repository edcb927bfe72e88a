"""API tests for the public availability endpoints."""

from __future__ import annotations

from datetime import date, timedelta
from unittest import mock

from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.availability.domain.dates import local_today
from apps.availability.models import AvailabilitySettings, ExcludedDate
from apps.bookings.models import Booking
from apps.customers.models import Customer


def next_monday(today: date) -> date:
    return today + timedelta(days=7 - today.weekday())


class PublicAvailabilityAPITests(APITestCase):
    def setUp(self) -> None:
        self.today = local_today("Europe/London")
        self.monday = next_monday(self.today)
        self.customer = Customer.objects.create(name="Sam Rider", phone="07700900001")
        self.url = reverse("availability-public")

    def _book(self, day: date, status_value: str = Booking.Status.PENDING) -> Booking:
        return Booking.objects.create(
            customer=self.customer,
            service_type=Booking.ServiceType.BASIC_SERVICE,
            date=day,
            bike_details="Road bike",
            status=status_value,
        )

    def test_snapshot_is_public_and_cacheable(self) -> None:
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("max-age=300", response["Cache-Control"])
        self.assertEqual(
            response.data["settings"]["day_exclusion_rule"],
            AvailabilitySettings.load().day_exclusion_rule.value,
        )
        self.assertEqual(response.data["booking_window"]["start"], self.today.isoformat())

    def test_snapshot_creates_default_settings(self) -> None:
        self.assertFalse(AvailabilitySettings.objects.exists())

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        settings = response.data["settings"]
        self.assertTrue(settings["exclude_weekends"])
        self.assertFalse(settings["exclude_sundays"])
        self.assertIsNone(settings["max_services_per_day"])
        self.assertEqual(AvailabilitySettings.objects.count(), 1)

    def test_snapshot_lists_only_future_exclusions(self) -> None:
        ExcludedDate.objects.create(start_date=self.today - timedelta(days=10), end_date=self.today - timedelta(days=5))
        spanning = ExcludedDate.objects.create(
            start_date=self.today - timedelta(days=2),
            end_date=self.today + timedelta(days=2),
        )
        upcoming = ExcludedDate.objects.create(start_date=self.monday, reason="Bank holiday")

        response = self.client.get(self.url)

        ids = [row["id"] for row in response.data["excluded_dates"]]
        self.assertEqual(ids, [spanning.id, upcoming.id])

    def test_snapshot_counts_only_active_bookings(self) -> None:
        settings = AvailabilitySettings.load()
        settings.max_services_per_day = 2
        settings.save()
        self._book(self.monday)
        self._book(self.monday, Booking.Status.READY)
        self._book(self.monday, Booking.Status.COMPLETE)
        self._book(self.monday + timedelta(days=1), Booking.Status.CANCELLED)

        response = self.client.get(self.url)

        self.assertEqual(response.data["booking_counts"], {self.monday.isoformat(): 2})
        self.assertEqual(response.data["dates_at_capacity"], [self.monday.isoformat()])

    def test_snapshot_fails_open_when_settings_cannot_be_read(self) -> None:
        with mock.patch(
            "apps.availability.services.load_settings",
            side_effect=DatabaseError("connection lost"),
        ), self.assertLogs("apps.availability.services", level="ERROR"):
            response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(response.data["settings"]["exclude_weekends"])
        self.assertIsNone(response.data["settings"]["max_services_per_day"])

    def test_snapshot_fails_open_when_exclusions_and_counts_cannot_be_read(self) -> None:
        ExcludedDate.objects.create(start_date=self.monday)
        self._book(self.monday)

        with mock.patch(
            "apps.availability.services.future_excluded_dates_queryset",
            side_effect=DatabaseError("timeout"),
        ), mock.patch(
            "apps.availability.services.window_booking_counts",
            side_effect=DatabaseError("timeout"),
        ), self.assertLogs("apps.availability.services", level="ERROR") as logs:
            response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["excluded_dates"], [])
        self.assertEqual(response.data["booking_counts"], {})
        self.assertEqual(len(logs.records), 2)

    def test_calendar_covers_the_booking_window(self) -> None:
        ExcludedDate.objects.create(start_date=self.monday)

        response = self.client.get(reverse("availability-calendar"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        dates = response.data["dates"]
        self.assertEqual(dates[0]["date"], self.today.isoformat())
        self.assertEqual(dates[-1]["date"], response.data["booking_window"]["end"])
        monday = next(day for day in dates if day["date"] == self.monday.isoformat())
        self.assertFalse(monday["available"])
        self.assertEqual(monday["reason"], "excluded")


class AvailabilityCheckAPITests(APITestCase):
    def setUp(self) -> None:
        self.today = local_today("Europe/London")
        self.monday = next_monday(self.today)
        self.url = reverse("availability-check")

    def test_date_parameter_is_required(self) -> None:
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_open_weekday_is_available(self) -> None:
        response = self.client.get(self.url, {"date": self.monday.isoformat()})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(response.data["available"])
        self.assertIsNone(response.data["reason"])

    def test_unavailable_dates_report_a_reason(self) -> None:
        saturday = self.monday + timedelta(days=5)
        cases = {
            (self.today - timedelta(days=1)).isoformat(): "past",
            (self.today + timedelta(days=400)).isoformat(): "outside_window",
            saturday.isoformat(): "closed_day",
            "31-12-2026": "invalid_date",
        }
        for value, reason in cases.items():
            with self.subTest(value=value):
                response = self.client.get(self.url, {"date": value})
                self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
                self.assertFalse(response.data["available"])
                self.assertEqual(response.data["reason"], reason)
                self.assertTrue(response.data["message"])

    def test_full_day_is_at_capacity(self) -> None:
        settings = AvailabilitySettings.load()
        settings.max_services_per_day = 1
        settings.save()
        customer = Customer.objects.create(name="Alex", phone="07700900002")
        Booking.objects.create(
            customer=customer,
            service_type=Booking.ServiceType.FULL_SERVICE,
            date=self.monday,
            bike_details="Gravel bike",
        )

        response = self.client.get(self.url, {"date": self.monday.isoformat()})

        self.assertFalse(response.data["available"])
        self.assertEqual(response.data["reason"], "at_capacity")
