# inventory/services/movements.py

"""
MOVEMENT LOG

Append-only writer for StockMovement. Every snapshot write in the ledger is
paired with exactly one call to record_movement() in the same transaction.
"""

from __future__ import annotations

from inventory.models import StockMovement


def record_movement(
    *,
    shop,
    product,
    movement_type: str,
    quantity: int,
    source: str,
    actor=None,
    reference_id=None,
) -> StockMovement:
    return StockMovement.objects.create(
        shop=shop,
        product=product,
        movement_type=movement_type,
        quantity=quantity,
        source=source,
        reference_id=reference_id,
        created_by=actor,
    )
