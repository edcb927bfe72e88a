"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.customers.serializers import CustomerSerializer
from apps.customers.services import normalize_phone

from .models import Booking
from .services import BULK_ACTIONS, DateUnavailableError, create_booking


class BookingCreateSerializer(serializers.Serializer):
    """Public booking form submission."""

    name = serializers.CharField(max_length=255)
    phone = serializers.CharField(max_length=32)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    service_type = serializers.ChoiceField(choices=Booking.ServiceType.choices)
    # Kept as text; the availability rules parse it and reject bad dates.
    date = serializers.CharField()
    bike_details = serializers.CharField()

    def validate_phone(self, value: str) -> str:
        if not normalize_phone(value):
            raise serializers.ValidationError("Enter a phone number.")
        return value

    def create(self, validated_data):  # type: ignore
        try:
            return create_booking(
                name=validated_data["name"],
                phone=validated_data["phone"],
                email=validated_data.get("email") or None,
                service_type=validated_data["service_type"],
                date=validated_data["date"],
                bike_details=validated_data["bike_details"],
            )
        except DateUnavailableError as exc:
            raise serializers.ValidationError(
                {
                    "date": [exc.message],
                    "reason": exc.reason.value if exc.reason else None,
                }
            )


class BookingSerializer(serializers.ModelSerializer):
    customer = CustomerSerializer(read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "reference_number",
            "customer",
            "service_type",
            "date",
            "bike_details",
            "status",
            "notes",
            "ready_at",
            "completed_at",
            "cancelled_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BookingCompleteSerializer(serializers.Serializer):
    skip_stage = serializers.BooleanField(default=False)


class BookingNotesSerializer(serializers.Serializer):
    notes = serializers.CharField(allow_blank=True, allow_null=True)


class BookingBikeDetailsSerializer(serializers.Serializer):
    bike_details = serializers.CharField()


class BookingBulkActionSerializer(serializers.Serializer):
    booking_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)
    action = serializers.ChoiceField(choices=BULK_ACTIONS)
