"""Availability API views.

Public views back the booking form's date picker. Admin views manage the
settings singleton, excluded dates and the daily service cap.
"""

from __future__ import annotations

from django.conf import settings as django_settings  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from django.utils.cache import patch_cache_control  # type: ignore
from rest_framework import permissions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from .domain.engine import dates_at_capacity
from .models import ExcludedDate
from .serializers import (
    AvailabilitySettingsSerializer,
    CalendarDaySerializer,
    DayRulesUpdateSerializer,
    ExcludedDateCreateSerializer,
    ExcludedDateSerializer,
    ServiceLimitSerializer,
    excluded_date_with_warning,
)
from .services import (
    SettingsUpdateError,
    availability_calendar,
    booking_window,
    check_booking_date,
    delete_excluded_date,
    excluded_dates_with_warnings,
    load_settings,
    public_availability_snapshot,
    reason_message,
    update_day_rules,
    update_service_limit,
    window_booking_counts,
)


def _cacheable(response: Response) -> Response:
    patch_cache_control(response, public=True, max_age=django_settings.PUBLIC_AVAILABILITY_CACHE_SECONDS)
    return response


def _window_payload() -> dict:
    window = booking_window()
    return {"start": window.start_date.isoformat(), "end": window.end_date.isoformat()}


class PublicAvailabilityView(APIView):
    """Settings, upcoming closures and booking counts for the date picker."""

    permission_classes = [permissions.AllowAny]

    def get(self, request):  # type: ignore
        snapshot = public_availability_snapshot()
        settings = snapshot["settings"]
        counts = snapshot["booking_counts"]
        return _cacheable(
            Response(
                {
                    "settings": AvailabilitySettingsSerializer(settings).data,
                    "excluded_dates": ExcludedDateSerializer(snapshot["excluded_dates"], many=True).data,
                    "booking_counts": counts,
                    "dates_at_capacity": dates_at_capacity(counts, settings.max_services_per_day),
                    "booking_window": _window_payload(),
                }
            )
        )


class PublicAvailabilityCalendarView(APIView):
    """Every day of the booking window with its availability."""

    permission_classes = [permissions.AllowAny]

    def get(self, request):  # type: ignore
        days = availability_calendar()
        return _cacheable(
            Response(
                {
                    "booking_window": _window_payload(),
                    "dates": CalendarDaySerializer(days, many=True).data,
                }
            )
        )


class AvailabilityCheckView(APIView):
    """Re-validates a single date against live data before submission."""

    permission_classes = [permissions.AllowAny]

    def get(self, request):  # type: ignore
        value = request.query_params.get("date")
        if not value:
            return Response(
                {"detail": "The date query parameter is required."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        reason = check_booking_date(value)
        return Response(
            {
                "date": value,
                "available": reason is None,
                "reason": reason.value if reason else None,
                "message": reason_message(reason) if reason else None,
            }
        )


class AdminAvailabilityView(APIView):
    """Read and update the weekend and Sunday rules."""

    permission_classes = [permissions.IsAdminUser]

    def get(self, request):  # type: ignore
        future_only = request.query_params.get("future_only", "").lower() in {"1", "true", "yes"}
        rows = excluded_dates_with_warnings(future_only=future_only)
        return Response(
            {
                "settings": AvailabilitySettingsSerializer(load_settings()).data,
                "excluded_dates": [excluded_date_with_warning(row, count) for row, count in rows],
            }
        )

    def put(self, request):  # type: ignore
        return self._update(request)

    def patch(self, request):  # type: ignore
        return self._update(request)

    def _update(self, request):  # type: ignore
        serializer = DayRulesUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            settings = update_day_rules(
                exclude_weekends=data.get("exclude_weekends"),
                exclude_sundays=data.get("exclude_sundays"),
                rule=data.get("day_exclusion_rule"),
            )
        except SettingsUpdateError as exc:
            return Response({"detail": exc.message}, status=status.HTTP_400_BAD_REQUEST)
        return Response(AvailabilitySettingsSerializer(settings).data)


class ExcludedDateListView(APIView):
    permission_classes = [permissions.IsAdminUser]

    def get(self, request):  # type: ignore
        future_only = request.query_params.get("future_only", "").lower() in {"1", "true", "yes"}
        rows = excluded_dates_with_warnings(future_only=future_only)
        return Response([excluded_date_with_warning(row, count) for row, count in rows])

    def post(self, request):  # type: ignore
        serializer = ExcludedDateCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        row = serializer.save()
        return Response(
            excluded_date_with_warning(row, serializer.booking_count),
            status=status.HTTP_201_CREATED,
        )


class ExcludedDateDetailView(APIView):
    permission_classes = [permissions.IsAdminUser]

    def delete(self, request, pk):  # type: ignore
        row = get_object_or_404(ExcludedDate, pk=pk)
        delete_excluded_date(row)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ServiceLimitView(APIView):
    """Daily service cap with the booking counts it applies to."""

    permission_classes = [permissions.IsAdminUser]

    def get(self, request):  # type: ignore
        settings = load_settings()
        counts = window_booking_counts()
        return Response(
            {
                "max_services_per_day": settings.max_services_per_day,
                "booking_counts": counts,
                "dates_at_capacity": dates_at_capacity(counts, settings.max_services_per_day),
                "booking_window": _window_payload(),
            }
        )

    def put(self, request):  # type: ignore
        serializer = ServiceLimitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            settings, warnings = update_service_limit(serializer.validated_data["max_services_per_day"])
        except SettingsUpdateError as exc:
            return Response({"detail": exc.message}, status=status.HTTP_400_BAD_REQUEST)
        return Response(
            {
                "max_services_per_day": settings.max_services_per_day,
                "warnings": warnings,
            }
        )
