"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "reference_number",
        "customer",
        "service_type",
        "date",
        "status",
        "created_at",
    )
    list_filter = ("status", "service_type", "date")
    search_fields = ("reference_number", "customer__name", "customer__phone")
    list_select_related = ("customer",)
    readonly_fields = (
        "reference_number",
        "ready_at",
        "completed_at",
        "cancelled_at",
        "created_at",
        "updated_at",
    )
