"""Views for staff authentication (login, current user)."""

from __future__ import annotations

import logging

from django.contrib.auth.models import update_last_login  # type: ignore
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken  # type: ignore

from .auth_serializers import LoginSerializer
from .serializers import StaffUserSerializer

logger = logging.getLogger(__name__)


def _tokens_for_user(user) -> dict[str, str]:
    refresh = RefreshToken.for_user(user)
    return {"refresh": str(refresh), "access": str(refresh.access_token)}


class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request):  # type: ignore
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        update_last_login(None, user)
        logger.info("Staff user %s logged in", user.pk)
        data = {
            "user": StaffUserSerializer(user).data,
            "tokens": _tokens_for_user(user),
        }
        return Response(data, status=status.HTTP_200_OK)


class MeView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):  # type: ignore
        return Response(StaffUserSerializer(request.user).data)
