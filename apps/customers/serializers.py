"""Serializers for customers."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ["id", "name", "phone", "email", "created_at", "updated_at"]
        read_only_fields = fields
