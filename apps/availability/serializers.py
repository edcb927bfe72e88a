"""Serializers for the availability domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .domain.engine import DayExclusionRule
from .models import AvailabilitySettings, ExcludedDate
from .services import ExcludedDateValidationError, create_excluded_date


class AvailabilitySettingsSerializer(serializers.ModelSerializer):
    day_exclusion_rule = serializers.SerializerMethodField()

    class Meta:
        model = AvailabilitySettings
        fields = [
            "exclude_weekends",
            "exclude_sundays",
            "max_services_per_day",
            "day_exclusion_rule",
            "updated_at",
        ]
        read_only_fields = fields

    def get_day_exclusion_rule(self, obj: AvailabilitySettings) -> str:
        return obj.day_exclusion_rule.value


class DayRulesUpdateSerializer(serializers.Serializer):
    """Input for changing the closed days of the week."""

    exclude_weekends = serializers.BooleanField(required=False)
    exclude_sundays = serializers.BooleanField(required=False)
    day_exclusion_rule = serializers.ChoiceField(
        choices=[rule.value for rule in DayExclusionRule],
        required=False,
    )

    def validate(self, attrs):  # type: ignore
        if not attrs:
            raise serializers.ValidationError("At least one field must be provided.")
        if "day_exclusion_rule" in attrs:
            attrs["day_exclusion_rule"] = DayExclusionRule(attrs["day_exclusion_rule"])
        return attrs


class ExcludedDateSerializer(serializers.ModelSerializer):
    class Meta:
        model = ExcludedDate
        fields = ["id", "start_date", "end_date", "reason", "created_at"]
        read_only_fields = fields


class ExcludedDateCreateSerializer(serializers.Serializer):
    """
    Creates an exclusion through the domain service.

    Dates are taken as raw strings so that values carrying a timestamp part
    are reduced to their calendar day rather than rejected.
    """

    start_date = serializers.CharField()
    end_date = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    reason = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=255)

    def create(self, validated_data):  # type: ignore
        try:
            row, booking_count = create_excluded_date(
                validated_data["start_date"],
                validated_data.get("end_date"),
                validated_data.get("reason"),
            )
        except ExcludedDateValidationError as exc:
            raise serializers.ValidationError({exc.field or "non_field_errors": [exc.message]})
        self.booking_count = booking_count
        return row


class ServiceLimitSerializer(serializers.Serializer):
    max_services_per_day = serializers.IntegerField(min_value=1, allow_null=True)


class CalendarDaySerializer(serializers.Serializer):
    date = serializers.DateField()
    available = serializers.BooleanField()
    reason = serializers.SerializerMethodField()
    booking_count = serializers.IntegerField()
    at_capacity = serializers.BooleanField()

    def get_reason(self, obj) -> str | None:
        return obj.reason.value if obj.reason else None


def exclusion_warning(booking_count: int) -> str | None:
    if not booking_count:
        return None
    if booking_count == 1:
        return "1 active booking already falls within this range."
    return f"{booking_count} active bookings already fall within this range."


def excluded_date_with_warning(row: ExcludedDate, booking_count: int) -> dict:
    data = dict(ExcludedDateSerializer(row).data)
    data["active_booking_count"] = booking_count
    data["warning"] = exclusion_warning(booking_count)
    return data
