"""Serializers for staff authentication."""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

User = get_user_model()

logger = logging.getLogger(__name__)


class LoginSerializer(serializers.Serializer):
    login = serializers.CharField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        login = attrs.get("login", "").strip()
        password = attrs.get("password", "")

        # Find user by email or username
        lookup = {"email__iexact": login} if "@" in login else {"username": login}
        user = User.objects.filter(**lookup).order_by("pk").first()

        if user is None or not user.check_password(password):
            logger.warning("Failed staff login for %s", login)
            raise serializers.ValidationError({"login": "Invalid login or password."})

        if not user.is_active or not user.is_staff:
            logger.warning("Login refused for non-staff account %s", user.pk)
            raise serializers.ValidationError({"login": "This account cannot access the admin dashboard."})

        attrs["user"] = user
        return attrs
