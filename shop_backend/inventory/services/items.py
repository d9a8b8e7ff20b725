# inventory/services/items.py

"""
======================================================
PATH: inventory/services/items.py
======================================================
INVENTORY ITEM MANAGEMENT

An "item" is a Product together with its StockSnapshot.

- create_item(): product + snapshot; an opening quantity > 0 is recorded as an
  IN / MANUAL movement in the same transaction (the audit trail starts at 0)
- update_item(): master data + reorder_level; NEVER the quantity
- delete_item(): soft delete (is_active=False); snapshot + history remain
- bulk_import(): many create_item() calls, all-or-nothing

Rules:
- SKU is unique per shop (duplicate -> LedgerValidationError)
- Every payload is validated before the transaction opens
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import F

from inventory.models import StockMovement, StockSnapshot
from inventory.services.exceptions import LedgerValidationError
from inventory.services.ledger import apply_movement, ledger_transaction
from inventory.services.projections import get_active_product, project_item
from inventory.services.snapshots import lock_or_create_snapshot
from inventory.services.validators import (
    require_items,
    require_non_negative_int,
    require_non_negative_money,
)
from products.models import Product

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("category", "description", "unit")


def _require_text(data: dict, field_name: str) -> str:
    value = str(data.get(field_name) or "").strip()
    if not value:
        raise LedgerValidationError(f"{field_name} is required")
    return value


def _clean_item(data: dict) -> dict:
    cleaned = {
        "name": _require_text(data, "name"),
        "sku": _require_text(data, "sku"),
        "quantity": require_non_negative_int(data.get("quantity", 0), field_name="quantity"),
        "cost_price": require_non_negative_money(data.get("cost_price"), field_name="cost_price"),
        "selling_price": require_non_negative_money(
            data.get("selling_price"), field_name="selling_price"
        ),
        "reorder_level": require_non_negative_int(
            data.get("reorder_level", 0), field_name="reorder_level"
        ),
    }
    for name in TEXT_FIELDS:
        cleaned[name] = str(data.get(name) or "").strip()
    return cleaned


def _sku_taken(*, shop, sku: str, exclude_id=None) -> bool:
    qs = Product.objects.filter(shop=shop, sku=sku)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    return qs.exists()


def _create_one(*, shop, actor, cleaned: dict) -> dict:
    if _sku_taken(shop=shop, sku=cleaned["sku"]):
        raise LedgerValidationError(f"SKU already exists: {cleaned['sku']}")

    try:
        with transaction.atomic():
            product = Product.objects.create(
                shop=shop,
                sku=cleaned["sku"],
                name=cleaned["name"],
                category=cleaned["category"],
                description=cleaned["description"],
                unit=cleaned["unit"],
                cost_price=cleaned["cost_price"],
                selling_price=cleaned["selling_price"],
            )
    except IntegrityError as exc:
        raise LedgerValidationError(f"SKU already exists: {cleaned['sku']}") from exc

    snapshot = lock_or_create_snapshot(
        shop=shop,
        product=product,
        reorder_level=cleaned["reorder_level"],
    )

    if cleaned["quantity"] > 0:
        apply_movement(
            shop=shop,
            product=product,
            snapshot=snapshot,
            movement_type=StockMovement.MovementType.IN,
            quantity=cleaned["quantity"],
            source=StockMovement.Source.MANUAL,
            actor=actor,
        )

    return project_item(product, snapshot)


def create_item(*, shop, actor, data: dict) -> dict:
    cleaned = _clean_item(data)

    with ledger_transaction(operation="create_item", shop=shop):
        item = _create_one(shop=shop, actor=actor, cleaned=cleaned)

    logger.info(
        "Item created",
        extra={"shop_id": str(shop.pk), "product_id": str(item["id"]), "sku": item["sku"]},
    )
    return item


def bulk_import(*, shop, actor, items) -> dict:
    """
    All-or-nothing import. Every row is validated first (errors name the row),
    duplicate SKUs inside the payload are rejected, then one transaction
    creates everything.
    """
    rows = require_items(items, max_items=int(settings.BULK_IMPORT_MAX_ITEMS))

    cleaned_rows = []
    seen_skus = set()
    for index, row in enumerate(rows):
        try:
            cleaned = _clean_item(row)
        except LedgerValidationError as exc:
            raise LedgerValidationError(f"items[{index}]: {exc}") from exc
        if cleaned["sku"] in seen_skus:
            raise LedgerValidationError(f"items[{index}]: duplicate SKU {cleaned['sku']}")
        seen_skus.add(cleaned["sku"])
        cleaned_rows.append(cleaned)

    with ledger_transaction(operation="bulk_import", shop=shop):
        created = [
            _create_one(shop=shop, actor=actor, cleaned=cleaned)
            for cleaned in cleaned_rows
        ]

    logger.info(
        "Bulk import completed",
        extra={"shop_id": str(shop.pk), "count": len(created)},
    )
    return {"created": len(created), "items": created}


def update_item(*, shop, product_id, data: dict) -> dict:
    """
    Partial update of master data and reorder_level.
    A `quantity` key is ignored: quantities only change through the ledger.
    """
    updates = {}

    for name in ("name", "sku"):
        if name in data:
            updates[name] = _require_text(data, name)
    for name in TEXT_FIELDS:
        if name in data:
            updates[name] = str(data.get(name) or "").strip()
    for name in ("cost_price", "selling_price"):
        if name in data:
            updates[name] = require_non_negative_money(data.get(name), field_name=name)

    reorder_level = None
    if "reorder_level" in data:
        reorder_level = require_non_negative_int(
            data.get("reorder_level"), field_name="reorder_level"
        )

    if "quantity" in data:
        logger.debug("Ignoring quantity on item update", extra={"product_id": str(product_id)})

    with ledger_transaction(operation="update_item", shop=shop):
        product = get_active_product(shop=shop, product_id=product_id)

        if "sku" in updates and _sku_taken(shop=shop, sku=updates["sku"], exclude_id=product.id):
            raise LedgerValidationError(f"SKU already exists: {updates['sku']}")

        for name, value in updates.items():
            setattr(product, name, value)
        if updates:
            try:
                with transaction.atomic():
                    product.save(update_fields=[*updates.keys(), "updated_at"])
            except IntegrityError as exc:
                # concurrent writer took the SKU after the check above
                raise LedgerValidationError(f"SKU already exists: {product.sku}") from exc

        snapshot = lock_or_create_snapshot(shop=shop, product=product)
        if reorder_level is not None and reorder_level != snapshot.reorder_level:
            StockSnapshot.objects.filter(pk=snapshot.pk).update(
                reorder_level=reorder_level,
                version=F("version") + 1,
            )
            snapshot.refresh_from_db()

    return project_item(product, snapshot)


def delete_item(*, shop, product_id) -> dict:
    with ledger_transaction(operation="delete_item", shop=shop):
        product = get_active_product(shop=shop, product_id=product_id)
        product.is_active = False
        product.save(update_fields=["is_active", "updated_at"])

    logger.info(
        "Item deactivated",
        extra={"shop_id": str(shop.pk), "product_id": str(product.id)},
    )
    return {"id": product.id, "deleted": True}
