"""Admin registration for availability settings and excluded dates."""

from __future__ import annotations

from django.contrib import admin

from .models import AvailabilitySettings, ExcludedDate


@admin.register(AvailabilitySettings)
class AvailabilitySettingsAdmin(admin.ModelAdmin):
    list_display = ("id", "exclude_weekends", "exclude_sundays", "max_services_per_day", "updated_at")
    readonly_fields = ("created_at", "updated_at")

    def has_add_permission(self, request):  # type: ignore
        return not AvailabilitySettings.objects.exists()

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False


@admin.register(ExcludedDate)
class ExcludedDateAdmin(admin.ModelAdmin):
    list_display = ("start_date", "end_date", "reason", "created_at")
    list_filter = ("start_date",)
    search_fields = ("reason",)
    readonly_fields = ("created_at",)
