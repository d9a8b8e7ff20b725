# inventory/services/projections.py

"""
INVENTORY READ PROJECTIONS

Pure reads over committed state: no transaction, no locks, no writes.

- list_items(): active products of a shop joined with their snapshot
- get_item(): one joined row (NotFoundError if absent / inactive / other shop)
- get_stock_history(): latest movements as {reason, created_at, delta}
- low_stock(): stocked items at or below their threshold

Products that were never stocked have no snapshot; they project as quantity 0.
"""

from __future__ import annotations

from django.conf import settings
from django.db.models import Case, F, IntegerField, Q, Value, When

from inventory.models import StockMovement, StockSnapshot
from inventory.services.exceptions import LedgerValidationError, NotFoundError
from inventory.services.validators import require_max_quantity, require_uuid, to_int
from products.models import Product


def _snapshot_of(product):
    try:
        return product.stock_snapshot
    except StockSnapshot.DoesNotExist:
        return None


def project_item(product, snapshot=None) -> dict:
    if snapshot is None:
        snapshot = _snapshot_of(product)
    return {
        "id": product.id,
        "name": product.name,
        "sku": product.sku,
        "category": product.category,
        "description": product.description,
        "unit": product.unit,
        "cost_price": product.cost_price,
        "selling_price": product.selling_price,
        "quantity": int(snapshot.quantity_available) if snapshot else 0,
        "reorder_level": int(snapshot.reorder_level) if snapshot else 0,
        "last_updated": snapshot.last_updated if snapshot else None,
        "created_at": product.created_at,
    }


def _active_products(shop):
    return Product.objects.filter(shop=shop, is_active=True).select_related(
        "stock_snapshot"
    )


def get_active_product(*, shop, product_id) -> Product:
    pid = require_uuid(product_id, field_name="product_id")
    product = _active_products(shop).filter(id=pid).first()
    if product is None:
        raise NotFoundError("Item not found")
    return product


def list_items(*, shop, search: str | None = None) -> list[dict]:
    qs = _active_products(shop)

    term = (search or "").strip()
    if term:
        qs = qs.filter(Q(name__icontains=term) | Q(sku__icontains=term))

    qs = qs.order_by(
        F("stock_snapshot__last_updated").desc(nulls_last=True),
        "-created_at",
    )
    return [project_item(p) for p in qs]


def get_item(*, shop, product_id) -> dict:
    return project_item(get_active_product(shop=shop, product_id=product_id))


def _history_limit(limit) -> int:
    default = int(settings.STOCK_HISTORY_DEFAULT_LIMIT)
    maximum = int(settings.STOCK_HISTORY_MAX_LIMIT)
    if limit is None or limit == "":
        return default
    n = to_int(limit, field_name="limit")
    if n < 1 or n > maximum:
        raise LedgerValidationError(f"limit must be between 1 and {maximum}")
    return n


def get_stock_history(*, shop, product_id, limit=None) -> list[dict]:
    """
    Most recent movements first. delta is signed for display only
    (negative for OUT); the stored movement keeps type + unsigned quantity.
    """
    n = _history_limit(limit)
    product = get_active_product(shop=shop, product_id=product_id)

    movements = StockMovement.objects.filter(shop=shop, product=product).order_by(
        "-created_at", "-id"
    )[:n]

    return [
        {
            "reason": m.source,
            "type": m.movement_type,
            "created_at": m.created_at,
            "delta": m.signed_delta,
        }
        for m in movements
    ]


def low_stock(*, shop, threshold=None) -> list[dict]:
    """
    Snapshots with 0 < quantity_available <= threshold, lowest first.

    threshold given  -> one threshold for every item
    threshold omitted -> each item's reorder_level; items without one
                         (reorder_level == 0) use LOW_STOCK_THRESHOLD
    """
    qs = StockSnapshot.objects.filter(
        shop=shop,
        product__is_active=True,
        quantity_available__gt=0,
    ).select_related("product")

    if threshold is not None and threshold != "":
        limit = to_int(threshold, field_name="threshold")
        if limit < 0:
            raise LedgerValidationError("threshold cannot be negative")
        require_max_quantity(limit, field_name="threshold")
        qs = qs.filter(quantity_available__lte=limit)
    else:
        qs = qs.annotate(
            effective_threshold=Case(
                When(reorder_level__gt=0, then=F("reorder_level")),
                default=Value(int(settings.LOW_STOCK_THRESHOLD)),
                output_field=IntegerField(),
            )
        ).filter(quantity_available__lte=F("effective_threshold"))

    qs = qs.order_by("quantity_available", "product__name")
    return [project_item(s.product, s) for s in qs]
