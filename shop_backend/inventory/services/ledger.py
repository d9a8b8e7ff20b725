# inventory/services/ledger.py

"""
======================================================
PATH: inventory/services/ledger.py
======================================================
INVENTORY LEDGER ENGINE

Purpose:
- One place that mutates stock: snapshot write + movement append, atomically.
- adjust_stock(): manual IN / OUT / ADJUSTMENT for a single product.
- apply_movement(): the shared primitive used by purchase receiving and sales.
- ledger_transaction(): the transaction wrapper every ledger call runs in.

Rules:
- Preconditions (shapes, signs, enums) are validated BEFORE a transaction opens.
- Inside the transaction: resolve products (active + same shop), lock snapshots,
  compute, write, append movement. Any error rolls back everything.
- IN adds, OUT subtracts, ADJUSTMENT sets the absolute quantity.
- No external calls (email, HTTP) inside a ledger transaction.

Errors (inventory.services.exceptions):
- LedgerValidationError / NotFoundError / InsufficientStockError: business, 4xx
- RaceConditionDetected: versioned write lost, 409
- LedgerTimeoutError / InfrastructureError: database trouble, 503 retryable
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import DatabaseError, OperationalError, connection, transaction
from psycopg_pool import PoolTimeout

from inventory.models import StockMovement, StockSnapshot
from inventory.services.exceptions import (
    InfrastructureError,
    LedgerError,
    LedgerTimeoutError,
    LedgerValidationError,
    NotFoundError,
)
from inventory.services.movements import record_movement
from inventory.services.snapshots import (
    compute_next_quantity,
    lock_or_create_snapshot,
    write_snapshot_quantity,
)
from inventory.services.validators import optional_uuid, require_positive_int, require_uuid
from products.models import Product

logger = logging.getLogger(__name__)

# PostgreSQL: lock_not_available (lock_timeout), query_canceled (statement_timeout)
TIMEOUT_SQLSTATES = {"55P03", "57014"}


@dataclass(frozen=True)
class StockChange:
    product_id: object
    previous_qty: int
    current_qty: int
    movement: StockMovement

    def as_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "previous_qty": self.previous_qty,
            "current_qty": self.current_qty,
        }


# =====================================================
# TRANSACTION WRAPPER
# =====================================================


def _is_timeout(exc: BaseException) -> bool:
    cause = exc.__cause__ or exc.__context__
    for err in (exc, cause):
        if err is None:
            continue
        sqlstate = getattr(err, "sqlstate", None) or getattr(err, "pgcode", None)
        if sqlstate in TIMEOUT_SQLSTATES:
            return True
        if isinstance(err, PoolTimeout):
            return True
    return False


def _apply_lock_timeout() -> None:
    timeout_ms = int(getattr(settings, "LEDGER_LOCK_TIMEOUT_MS", 0) or 0)
    if timeout_ms <= 0 or connection.vendor != "postgresql":
        return
    with connection.cursor() as cursor:
        cursor.execute(f"SET LOCAL lock_timeout = {timeout_ms}")


@contextmanager
def ledger_transaction(*, operation: str, shop=None):
    """
    Run a ledger call in ONE database transaction with bounded lock waits.

    Every exception rolls the transaction back before it propagates.
    Database errors and model validation errors are translated into the
    ledger taxonomy.
    """
    log_extra = {"operation": operation, "shop_id": str(getattr(shop, "pk", "") or "")}
    try:
        with transaction.atomic():
            _apply_lock_timeout()
            yield
    except LedgerError:
        raise
    except ValidationError as exc:
        # model-level full_clean() inside the transaction
        raise LedgerValidationError("; ".join(exc.messages)) from exc
    except OperationalError as exc:
        if _is_timeout(exc):
            logger.warning("Ledger transaction timed out", extra=log_extra)
            raise LedgerTimeoutError(f"{operation} timed out: {exc}") from exc
        logger.exception("Ledger transaction failed", extra=log_extra)
        raise InfrastructureError(f"{operation} failed: {exc}") from exc
    except DatabaseError as exc:
        logger.exception("Ledger transaction failed", extra=log_extra)
        raise InfrastructureError(f"{operation} failed: {exc}") from exc


# =====================================================
# SHARED PRIMITIVES
# =====================================================


def resolve_active_products(*, shop, product_ids) -> dict:
    """
    Map product_id -> Product for active products of `shop`.
    Any id that is absent, inactive or in another shop -> NotFoundError.
    """
    wanted = set(product_ids)
    products = {
        p.id: p
        for p in Product.objects.filter(shop=shop, id__in=wanted, is_active=True)
    }
    missing = sorted((str(pid) for pid in wanted - set(products)))
    if missing:
        raise NotFoundError(f"Product not found: {', '.join(missing)}")
    return products


def apply_movement(
    *,
    shop,
    product,
    snapshot: StockSnapshot,
    movement_type: str,
    quantity: int,
    source: str,
    actor=None,
    reference_id=None,
) -> StockChange:
    """
    Write one movement against a LOCKED snapshot: compute next quantity,
    versioned write (InsufficientStockError if it would go negative),
    append the audit row.
    """
    previous = int(snapshot.quantity_available)
    next_qty = compute_next_quantity(previous, movement_type, quantity)

    write_snapshot_quantity(snapshot, next_qty)

    movement = record_movement(
        shop=shop,
        product=product,
        movement_type=movement_type,
        quantity=quantity,
        source=source,
        actor=actor,
        reference_id=reference_id,
    )

    return StockChange(
        product_id=product.id,
        previous_qty=previous,
        current_qty=next_qty,
        movement=movement,
    )


# =====================================================
# ADJUST STOCK
# =====================================================


def _require_choice(value, choices, *, field_name: str) -> str:
    v = (str(value or "")).strip().upper()
    if v not in choices:
        raise LedgerValidationError(
            f"{field_name} must be one of: {', '.join(choices)}"
        )
    return v


def adjust_stock(
    *,
    shop,
    actor,
    product_id,
    quantity,
    movement_type,
    source,
    reference_id=None,
) -> dict:
    """
    Manual stock change for one product.

    quantity:
      IN          -> +quantity
      OUT         -> -quantity (InsufficientStockError below zero)
      ADJUSTMENT  -> quantity becomes the new absolute on-hand value

    A product that was never stocked reads as 0 and gets its snapshot now.
    """
    pid = require_uuid(product_id, field_name="product_id")
    qty = require_positive_int(quantity, field_name="quantity")
    mtype = _require_choice(
        movement_type, StockMovement.MovementType.values, field_name="type"
    )
    src = _require_choice(source, StockMovement.Source.values, field_name="source")
    ref = optional_uuid(reference_id, field_name="reference_id")

    with ledger_transaction(operation="adjust_stock", shop=shop):
        product = resolve_active_products(shop=shop, product_ids=[pid])[pid]
        snapshot = lock_or_create_snapshot(shop=shop, product=product)

        change = apply_movement(
            shop=shop,
            product=product,
            snapshot=snapshot,
            movement_type=mtype,
            quantity=qty,
            source=src,
            actor=actor,
            reference_id=ref,
        )

    logger.info(
        "Stock adjusted",
        extra={
            "shop_id": str(shop.pk),
            "product_id": str(pid),
            "movement_type": mtype,
            "source": src,
            "quantity": qty,
            "previous_qty": change.previous_qty,
            "current_qty": change.current_qty,
        },
    )
    return change.as_dict()
