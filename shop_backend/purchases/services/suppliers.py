# purchases/services/suppliers.py

"""
SUPPLIER MASTER SERVICE (per shop)
"""

from __future__ import annotations

from inventory.services.exceptions import LedgerValidationError
from purchases.models import Supplier


def list_suppliers(*, shop):
    return Supplier.objects.filter(shop=shop, is_active=True).order_by("-created_at")


def create_supplier(*, shop, data: dict) -> Supplier:
    name = str(data.get("name") or "").strip()
    if len(name) < 2:
        raise LedgerValidationError("name must be at least 2 characters")

    return Supplier.objects.create(
        shop=shop,
        name=name,
        phone=str(data.get("phone") or "").strip(),
        email=str(data.get("email") or "").strip(),
        address=str(data.get("address") or "").strip(),
    )
