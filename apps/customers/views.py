"""Staff API views for customers."""

from __future__ import annotations

from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.pagination import PageNumberPagination  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.serializers import BookingSerializer

from .models import Customer
from .serializers import CustomerSerializer
from .services import search_customers


class CustomerBookingsPagination(PageNumberPagination):
    page_size = 5
    page_size_query_param = "limit"
    max_page_size = 50


class CustomerViewSet(viewsets.ReadOnlyModelViewSet):
    """Customer search and per-customer booking history."""

    queryset = Customer.objects.all()
    serializer_class = CustomerSerializer
    permission_classes = [permissions.IsAdminUser]

    def list(self, request, *args, **kwargs):  # type: ignore
        customers = search_customers(request.query_params.get("q"))
        serializer = self.get_serializer(customers, many=True)
        return Response({"customers": serializer.data})

    @action(detail=True, methods=["get"])
    def bookings(self, request, pk=None):  # type: ignore
        customer = self.get_object()
        qs = customer.bookings.select_related("customer").order_by("-date", "-created_at", "-id")
        paginator = CustomerBookingsPagination()
        page = paginator.paginate_queryset(qs, request, view=self)
        serializer = BookingSerializer(page, many=True, context=self.get_serializer_context())
        return paginator.get_paginated_response(serializer.data)
