"""Customer lookup and upsert."""

from __future__ import annotations

import logging
import re
from typing import Optional

from django.db.models import Q  # type: ignore

from .models import Customer

logger = logging.getLogger(__name__)

_PHONE_SEPARATORS = re.compile(r"[\s-]")

SEARCH_LIMIT = 20


def normalize_phone(phone: str) -> str:
    return _PHONE_SEPARATORS.sub("", phone or "")


def upsert_customer(name: str, phone: str, email: Optional[str] = None) -> Customer:
    """
    Find the customer by normalized phone or create one.

    An existing customer's name and email are overwritten with the latest
    values given on the booking form.
    """
    normalized = normalize_phone(phone)
    customer, created = Customer.objects.get_or_create(
        phone=normalized,
        defaults={"name": name, "email": email or None},
    )
    if created:
        logger.info("Customer %s created", customer.pk)
        return customer

    customer.name = name
    customer.email = email or None
    customer.save(update_fields=["name", "email", "updated_at"])
    return customer


def search_customers(query: Optional[str] = None):
    qs = Customer.objects.order_by("-created_at", "-id")
    query = (query or "").strip()
    if query:
        qs = qs.filter(Q(phone__icontains=query) | Q(name__icontains=query))
    return qs[:SEARCH_LIMIT]
