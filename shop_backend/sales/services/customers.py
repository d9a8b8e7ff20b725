# sales/services/customers.py

"""
CUSTOMER MASTER SERVICE (per shop)
"""

from __future__ import annotations

from django.db.models import Q

from inventory.services.exceptions import LedgerValidationError
from sales.models import Customer


def list_customers(*, shop, search: str | None = None):
    qs = Customer.objects.filter(shop=shop, is_active=True)
    term = (search or "").strip()
    if term:
        qs = qs.filter(Q(name__icontains=term) | Q(phone__icontains=term))
    return qs.order_by("-created_at")


def create_customer(*, shop, data: dict) -> Customer:
    name = str(data.get("name") or "").strip()
    if len(name) < 2:
        raise LedgerValidationError("name must be at least 2 characters")

    return Customer.objects.create(
        shop=shop,
        name=name,
        phone=str(data.get("phone") or "").strip(),
        email=str(data.get("email") or "").strip(),
    )
