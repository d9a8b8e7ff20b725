# purchases/services/receiving_service.py

"""
======================================================
PATH: purchases/services/receiving_service.py
======================================================
PURCHASE RECEIVING SERVICE

receive_purchase(): record a purchase and bring its stock in, atomically.

Canonical flow:
1) Validate lines (before any transaction): non-empty, positive integer
   quantities, non-negative cost prices
2) Open ONE ledger transaction
3) Resolve supplier (optional) + every product: active, same shop
4) Create the Purchase header (total_cost = sum(quantity * cost_price))
5) Lock (or lazily create) every touched snapshot, product-id order
6) Per line: PurchaseItem, snapshot += quantity, IN / PURCHASE movement
   referencing the purchase id

Any failure (unknown product on line 2, DB error, ...) rolls back the header,
every line and every snapshot change: there is no partial receipt.
"""

from __future__ import annotations

import logging

from inventory.models import StockMovement
from inventory.services.exceptions import NotFoundError
from inventory.services.ledger import (
    apply_movement,
    ledger_transaction,
    resolve_active_products,
)
from inventory.services.snapshots import lock_or_create_snapshot
from inventory.services.validators import (
    optional_uuid,
    order_total,
    require_items,
    require_non_negative_money,
    require_positive_int,
    require_uuid,
)
from purchases.models import Purchase, PurchaseItem, Supplier

logger = logging.getLogger(__name__)


def _normalize_lines(items) -> list[dict]:
    lines = []
    for index, raw in enumerate(require_items(items)):
        lines.append(
            {
                "product_id": require_uuid(
                    raw.get("product_id"), field_name=f"items[{index}].product_id"
                ),
                "quantity": require_positive_int(
                    raw.get("quantity"), field_name=f"items[{index}].quantity"
                ),
                "cost_price": require_non_negative_money(
                    raw.get("cost_price"), field_name=f"items[{index}].cost_price"
                ),
            }
        )
    return lines


def _resolve_supplier(*, shop, supplier_id):
    if supplier_id is None:
        return None
    supplier = Supplier.objects.filter(shop=shop, id=supplier_id, is_active=True).first()
    if supplier is None:
        raise NotFoundError("Supplier not found")
    return supplier


def receive_purchase(*, shop, actor, items, supplier_id=None) -> dict:
    lines = _normalize_lines(items)
    sid = optional_uuid(supplier_id, field_name="supplier_id")

    total_cost = order_total(lines, price_key="cost_price", field_name="total_cost")

    with ledger_transaction(operation="receive_purchase", shop=shop):
        supplier = _resolve_supplier(shop=shop, supplier_id=sid)
        products = resolve_active_products(
            shop=shop, product_ids=[line["product_id"] for line in lines]
        )

        purchase = Purchase.objects.create(
            shop=shop,
            supplier=supplier,
            total_cost=total_cost,
            created_by=actor,
        )

        snapshots = {
            pid: lock_or_create_snapshot(shop=shop, product=products[pid])
            for pid in sorted(products, key=str)
        }

        for line in lines:
            product = products[line["product_id"]]

            PurchaseItem.objects.create(
                purchase=purchase,
                product=product,
                quantity=line["quantity"],
                cost_price=line["cost_price"],
            )

            apply_movement(
                shop=shop,
                product=product,
                snapshot=snapshots[product.id],
                movement_type=StockMovement.MovementType.IN,
                quantity=line["quantity"],
                source=StockMovement.Source.PURCHASE,
                actor=actor,
                reference_id=purchase.id,
            )

    logger.info(
        "Purchase received",
        extra={
            "shop_id": str(shop.pk),
            "purchase_id": str(purchase.id),
            "item_count": len(lines),
            "total_cost": str(total_cost),
        },
    )

    return {
        "purchase_id": purchase.id,
        "total_cost": total_cost,
        "item_count": len(lines),
    }
