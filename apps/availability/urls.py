"""Public URL routing for the availability domain."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import AvailabilityCheckView, PublicAvailabilityCalendarView, PublicAvailabilityView

urlpatterns = [
    path("", PublicAvailabilityView.as_view(), name="availability-public"),
    path("calendar/", PublicAvailabilityCalendarView.as_view(), name="availability-calendar"),
    path("check/", AvailabilityCheckView.as_view(), name="availability-check"),
]
