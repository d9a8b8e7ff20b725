# sales/services/sale_service.py

"""
======================================================
PATH: sales/services/sale_service.py
======================================================
CORE SALES DOMAIN SERVICE

record_sale(): record a sale and take its stock out, atomically.

Canonical flow:
1) Validate (before any transaction): payment method, non-empty lines,
   positive integer quantities, non-negative selling prices
2) Open ONE ledger transaction
3) Resolve customer (optional) + every product: active, same shop
4) Lock every touched snapshot, product-id order
5) PRE-CHECK: requested quantity aggregated per product vs. on hand, for
   ALL lines, before anything is written -> InsufficientStockError
6) Sale header (total_amount = sum(quantity * selling_price))
7) Per line: SaleItem, RE-CHECK on the locked snapshot, snapshot -= quantity,
   OUT / SALE movement referencing the sale id

GUARANTEES:
- All-or-nothing: a failing line leaves no header, no line, no movement and
  no snapshot change behind
- A re-check failure after a passing pre-check means the locks did not hold:
  logged CRITICAL and raised as RaceConditionDetected
"""

from __future__ import annotations

import logging
from collections import defaultdict

from inventory.models import StockMovement
from inventory.services.exceptions import (
    InsufficientStockError,
    LedgerValidationError,
    NotFoundError,
    RaceConditionDetected,
)
from inventory.services.ledger import (
    apply_movement,
    ledger_transaction,
    resolve_active_products,
)
from inventory.services.snapshots import lock_snapshots
from inventory.services.validators import (
    optional_uuid,
    order_total,
    require_items,
    require_non_negative_money,
    require_positive_int,
    require_uuid,
)
from sales.models import Customer, Sale, SaleItem

logger = logging.getLogger(__name__)


def _require_payment_method(value) -> str:
    method = str(value or "").strip().upper()
    if method not in Sale.PaymentMethod.values:
        raise LedgerValidationError(
            f"payment_method must be one of: {', '.join(Sale.PaymentMethod.values)}"
        )
    return method


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
                "selling_price": require_non_negative_money(
                    raw.get("selling_price"), field_name=f"items[{index}].selling_price"
                ),
            }
        )
    return lines


def _resolve_customer(*, shop, customer_id):
    if customer_id is None:
        return None
    customer = Customer.objects.filter(shop=shop, id=customer_id, is_active=True).first()
    if customer is None:
        raise NotFoundError("Customer not found")
    return customer


def _precheck_availability(*, lines, snapshots, products) -> None:
    requested = defaultdict(int)
    for line in lines:
        requested[line["product_id"]] += line["quantity"]

    for pid in sorted(requested, key=str):
        snapshot = snapshots.get(pid)
        available = int(snapshot.quantity_available) if snapshot else 0
        if available < requested[pid]:
            raise InsufficientStockError(
                f"Insufficient stock for {products[pid].name}: "
                f"available {available}, requested {requested[pid]}",
                product_id=pid,
                available=available,
                requested=requested[pid],
            )


def record_sale(*, shop, actor, payment_method, items, customer_id=None) -> dict:
    method = _require_payment_method(payment_method)
    lines = _normalize_lines(items)
    cid = optional_uuid(customer_id, field_name="customer_id")

    total_amount = order_total(lines, price_key="selling_price", field_name="total_amount")

    with ledger_transaction(operation="record_sale", shop=shop):
        customer = _resolve_customer(shop=shop, customer_id=cid)
        products = resolve_active_products(
            shop=shop, product_ids=[line["product_id"] for line in lines]
        )

        snapshots = lock_snapshots(shop=shop, product_ids=products.keys())
        _precheck_availability(lines=lines, snapshots=snapshots, products=products)

        sale = Sale.objects.create(
            shop=shop,
            customer=customer,
            payment_method=method,
            total_amount=total_amount,
            created_by=actor,
        )

        for line in lines:
            product = products[line["product_id"]]
            snapshot = snapshots[product.id]

            SaleItem.objects.create(
                sale=sale,
                product=product,
                quantity=line["quantity"],
                selling_price=line["selling_price"],
            )

            if int(snapshot.quantity_available) < line["quantity"]:
                logger.critical(
                    "Stock re-check failed after passing pre-check",
                    extra={
                        "shop_id": str(shop.pk),
                        "sale_id": str(sale.id),
                        "product_id": str(product.id),
                        "available": int(snapshot.quantity_available),
                        "requested": line["quantity"],
                    },
                )
                raise RaceConditionDetected("Race condition detected")

            apply_movement(
                shop=shop,
                product=product,
                snapshot=snapshot,
                movement_type=StockMovement.MovementType.OUT,
                quantity=line["quantity"],
                source=StockMovement.Source.SALE,
                actor=actor,
                reference_id=sale.id,
            )

    logger.info(
        "Sale recorded",
        extra={
            "shop_id": str(shop.pk),
            "sale_id": str(sale.id),
            "item_count": len(lines),
            "total_amount": str(total_amount),
            "payment_method": method,
        },
    )

    return {
        "sale_id": sale.id,
        "total_amount": total_amount,
        "item_count": len(lines),
    }
