"""API views for the booking domain."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from .domain.lifecycle import BookingAction
from .filters import BookingFilterSet
from .models import Booking
from .serializers import (
    BookingBikeDetailsSerializer,
    BookingBulkActionSerializer,
    BookingCompleteSerializer,
    BookingCreateSerializer,
    BookingNotesSerializer,
    BookingSerializer,
)
from .services import (
    BookingError,
    apply_bulk_action,
    transition_booking,
    update_bike_details,
    update_notes,
)


class BookingViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Public booking creation; everything else is for staff."""

    queryset = Booking.objects.select_related("customer").all()
    permission_classes = [permissions.IsAdminUser]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = BookingFilterSet
    ordering_fields = ["date", "created_at", "status"]
    ordering = ["date", "created_at"]

    def get_permissions(self):  # type: ignore
        if self.action == "create":
            return [permissions.AllowAny()]
        return super().get_permissions()

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        return BookingSerializer

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = serializer.save()
        read_serializer = BookingSerializer(booking, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    def _transition(self, request, booking_action, **kwargs):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        try:
            transition_booking(booking, booking_action, **kwargs)
        except BookingError as exc:
            return Response({"detail": exc.message}, status=status.HTTP_400_BAD_REQUEST)
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)

    @action(detail=True, methods=["post"])
    def ready(self, request, pk=None):  # type: ignore
        return self._transition(request, BookingAction.MARK_READY)

    @action(detail=True, methods=["post"])
    def complete(self, request, pk=None):  # type: ignore
        serializer = BookingCompleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return self._transition(
            request,
            BookingAction.MARK_COMPLETE,
            skip_stage=serializer.validated_data["skip_stage"],
        )

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        return self._transition(request, BookingAction.CANCEL)

    @action(detail=True, methods=["post"])
    def restore(self, request, pk=None):  # type: ignore
        return self._transition(request, BookingAction.RESTORE)

    @action(detail=True, methods=["patch"])
    def notes(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        serializer = BookingNotesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        update_notes(booking, serializer.validated_data["notes"])
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)

    @action(detail=True, methods=["patch"], url_path="bike-details")
    def bike_details(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        serializer = BookingBikeDetailsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        update_bike_details(booking, serializer.validated_data["bike_details"])
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)

    @action(detail=False, methods=["post"])
    def bulk(self, request):  # type: ignore
        serializer = BookingBulkActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking_ids = serializer.validated_data["booking_ids"]
        if not Booking.objects.filter(pk__in=booking_ids).exists():
            return Response({"detail": "Bookings not found."}, status=status.HTTP_404_NOT_FOUND)
        results = apply_bulk_action(booking_ids, serializer.validated_data["action"])
        return Response({"results": results})
