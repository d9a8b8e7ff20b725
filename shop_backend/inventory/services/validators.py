# inventory/services/validators.py

"""
INPUT NORMALIZATION HELPERS

Shared by the ledger entry points (adjust / receive / sell / item management).
Everything here raises LedgerValidationError and never touches the database,
so preconditions fail before a transaction is opened.

Rules:
- Quantities are whole integer units (bool is rejected even though it is an int).
- Money is Decimal quantized to 2 places, ROUND_HALF_UP.
- Bounds match the storage columns: integer quantities, numeric(12,2) unit
  prices, numeric(14,2) totals.
"""

from __future__ import annotations

import uuid
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from inventory.services.exceptions import LedgerValidationError

TWOPLACES = Decimal("0.01")

MAX_QUANTITY = 2_147_483_647
MAX_UNIT_PRICE = Decimal("9999999999.99")
MAX_TOTAL = Decimal("999999999999.99")


def to_int(value, *, field_name="value") -> int:
    if value is None or value == "":
        raise LedgerValidationError(f"{field_name} is required")
    if isinstance(value, bool):
        raise LedgerValidationError(f"{field_name} must be an integer")
    if isinstance(value, float) and not value.is_integer():
        raise LedgerValidationError(f"{field_name} must be a whole number")
    if isinstance(value, Decimal) and value.is_finite() and value != value.to_integral_value():
        raise LedgerValidationError(f"{field_name} must be a whole number")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise LedgerValidationError(f"{field_name} must be an integer")


def require_max_quantity(value: int, *, field_name="quantity") -> int:
    if value > MAX_QUANTITY:
        raise LedgerValidationError(f"{field_name} cannot exceed {MAX_QUANTITY}")
    return value


def require_positive_int(value, *, field_name="quantity") -> int:
    v = to_int(value, field_name=field_name)
    if v <= 0:
        raise LedgerValidationError(f"{field_name} must be greater than zero")
    return require_max_quantity(v, field_name=field_name)


def require_non_negative_int(value, *, field_name="quantity") -> int:
    v = to_int(value, field_name=field_name)
    if v < 0:
        raise LedgerValidationError(f"{field_name} cannot be negative")
    return require_max_quantity(v, field_name=field_name)


def to_money(value, *, field_name="amount") -> Decimal:
    if value is None or value == "" or isinstance(value, bool):
        raise LedgerValidationError(f"{field_name} is required")
    try:
        amount = Decimal(str(value))
        if not amount.is_finite():
            raise LedgerValidationError(f"{field_name} must be a valid decimal")
        return amount.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError) as exc:
        # quantize overflows the context precision for huge exponents (1e30)
        raise LedgerValidationError(f"{field_name} must be a valid decimal") from exc


def require_non_negative_money(value, *, field_name="amount") -> Decimal:
    amount = to_money(value, field_name=field_name)
    if amount < Decimal("0.00"):
        raise LedgerValidationError(f"{field_name} cannot be negative")
    if amount > MAX_UNIT_PRICE:
        raise LedgerValidationError(f"{field_name} cannot exceed {MAX_UNIT_PRICE}")
    return amount


def order_total(lines, *, price_key: str, field_name="total") -> Decimal:
    """sum(quantity * price) over normalized lines, bounded to a numeric(14,2) column."""
    total = sum(
        (Decimal(line["quantity"]) * line[price_key] for line in lines),
        Decimal("0.00"),
    ).quantize(TWOPLACES)
    if total > MAX_TOTAL:
        raise LedgerValidationError(f"{field_name} cannot exceed {MAX_TOTAL}")
    return total


def require_uuid(value, *, field_name="id") -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        raise LedgerValidationError(f"{field_name} must be a valid UUID")


def optional_uuid(value, *, field_name="id") -> uuid.UUID | None:
    if value is None or value == "":
        return None
    return require_uuid(value, field_name=field_name)


def require_items(items, *, max_items=None) -> list:
    if not items:
        raise LedgerValidationError("At least one item is required")
    items = list(items)
    if max_items is not None and len(items) > max_items:
        raise LedgerValidationError(f"At most {max_items} items are allowed")
    return items
