"""FilterSet definitions for the staff booking list."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Booking.Status.choices)
    service_type = django_filters.ChoiceFilter(choices=Booking.ServiceType.choices)
    date_from = django_filters.DateFilter(field_name="date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="date", lookup_expr="lte")
    customer = django_filters.NumberFilter(field_name="customer_id", lookup_expr="exact")

    class Meta:
        model = Booking
        fields = ["status", "service_type", "customer"]
