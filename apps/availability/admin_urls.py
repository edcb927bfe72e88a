"""Staff URL routing for availability settings, exclusions and service limits."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import AdminAvailabilityView, ExcludedDateDetailView, ExcludedDateListView, ServiceLimitView

urlpatterns = [
    path("availability/", AdminAvailabilityView.as_view(), name="admin-availability"),
    path(
        "availability/excluded-dates/",
        ExcludedDateListView.as_view(),
        name="admin-excluded-date-list",
    ),
    path(
        "availability/excluded-dates/<int:pk>/",
        ExcludedDateDetailView.as_view(),
        name="admin-excluded-date-detail",
    ),
    path("service-limits/", ServiceLimitView.as_view(), name="admin-service-limits"),
]
