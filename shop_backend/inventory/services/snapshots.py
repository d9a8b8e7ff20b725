# inventory/services/snapshots.py

"""
STOCK SNAPSHOT STORE

Low-level snapshot access used by every ledger write. Must be called inside
ledger_transaction() (select_for_update requires an open transaction).

Rules:
- Rows are locked with SELECT ... FOR UPDATE, always in product-id order when
  several rows are touched, so two multi-item calls cannot deadlock each other.
- A missing row reads as quantity 0. Lazy creation runs in a savepoint; if a
  concurrent writer created the row first (unique violation) we lock theirs.
- Writes are conditional on `version` and bump it. A write that matches no
  row means someone changed the snapshot under us: RaceConditionDetected.
"""

from __future__ import annotations

import logging

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from inventory.models import StockMovement, StockSnapshot
from inventory.services.exceptions import (
    InsufficientStockError,
    LedgerValidationError,
    RaceConditionDetected,
)
from inventory.services.validators import MAX_QUANTITY

logger = logging.getLogger(__name__)


def compute_next_quantity(current: int, movement_type: str, quantity: int) -> int:
    """
    IN adds, OUT subtracts, ADJUSTMENT sets the absolute quantity.
    The result may be negative; callers decide how to fail.
    """
    if movement_type == StockMovement.MovementType.IN:
        return current + quantity
    if movement_type == StockMovement.MovementType.OUT:
        return current - quantity
    if movement_type == StockMovement.MovementType.ADJUSTMENT:
        return quantity
    raise ValueError(f"Unknown movement_type: {movement_type}")


def lock_snapshots(*, shop, product_ids) -> dict:
    """
    Lock the existing snapshots for `product_ids` in deterministic order.
    Returns {product_id: StockSnapshot}; products never stocked are absent.
    """
    ordered_ids = sorted(set(product_ids), key=str)
    if not ordered_ids:
        return {}

    rows = (
        StockSnapshot.objects.select_for_update()
        .filter(shop=shop, product_id__in=ordered_ids)
        .order_by("product_id")
    )
    return {row.product_id: row for row in rows}


def lock_or_create_snapshot(*, shop, product, reorder_level: int = 0) -> StockSnapshot:
    snapshot = (
        StockSnapshot.objects.select_for_update()
        .filter(shop=shop, product=product)
        .first()
    )
    if snapshot is not None:
        return snapshot

    try:
        with transaction.atomic():
            snapshot = StockSnapshot.objects.create(
                shop=shop,
                product=product,
                quantity_available=0,
                reorder_level=reorder_level,
            )
    except IntegrityError:
        logger.info(
            "Snapshot created concurrently; locking existing row",
            extra={"shop_id": str(shop.pk), "product_id": str(product.pk)},
        )
        snapshot = StockSnapshot.objects.select_for_update().get(shop=shop, product=product)

    return snapshot


def write_snapshot_quantity(snapshot: StockSnapshot, next_qty: int) -> StockSnapshot:
    """
    Versioned write of a new quantity onto a locked snapshot.
    Updates the in-memory instance so repeated writes in one call stay consistent.
    """
    if next_qty < 0:
        raise InsufficientStockError(
            "Insufficient stock",
            product_id=snapshot.product_id,
            available=int(snapshot.quantity_available),
            requested=int(snapshot.quantity_available) - next_qty,
        )
    if next_qty > MAX_QUANTITY:
        raise LedgerValidationError(
            f"Stock for product {snapshot.product_id} cannot exceed {MAX_QUANTITY}"
        )

    now = timezone.now()
    updated = StockSnapshot.objects.filter(
        pk=snapshot.pk,
        version=snapshot.version,
    ).update(
        quantity_available=next_qty,
        version=F("version") + 1,
        last_updated=now,
    )

    if updated != 1:
        logger.critical(
            "Snapshot version conflict: concurrent write bypassed the row lock",
            extra={
                "shop_id": str(snapshot.shop_id),
                "product_id": str(snapshot.product_id),
                "expected_version": snapshot.version,
            },
        )
        raise RaceConditionDetected(
            f"Race condition detected for product {snapshot.product_id}"
        )

    snapshot.quantity_available = next_qty
    snapshot.version += 1
    snapshot.last_updated = now
    return snapshot
