# inventory/api/serializers.py

"""
INVENTORY API SERIALIZERS

Wire format is camelCase (mobile client); validated_data is snake_case via
`source=` so services receive plain Python names.

Shape validation only. Business rules (active product, same shop, stock
availability) live in inventory.services.
"""

import math
import re

from rest_framework import serializers

from inventory.models import StockMovement
from inventory.services.validators import MAX_QUANTITY, MAX_UNIT_PRICE

# Free-text reason → movement source (alternate adjust payload)
_EXPIRED_RE = re.compile(r"expired", re.IGNORECASE)
_DAMAGE_RE = re.compile(r"damage|loss", re.IGNORECASE)


def source_from_reason(reason: str) -> str:
    if _EXPIRED_RE.search(reason or ""):
        return StockMovement.Source.EXPIRED
    if _DAMAGE_RE.search(reason or ""):
        return StockMovement.Source.DAMAGE
    return StockMovement.Source.MANUAL


# ---------------- OUTPUT ----------------
class InventoryItemSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    sku = serializers.CharField()
    category = serializers.CharField(allow_blank=True)
    description = serializers.CharField(allow_blank=True)
    unit = serializers.CharField(allow_blank=True)
    costPrice = serializers.DecimalField(source="cost_price", max_digits=12, decimal_places=2)
    sellingPrice = serializers.DecimalField(
        source="selling_price", max_digits=12, decimal_places=2
    )
    quantity = serializers.IntegerField()
    reorderLevel = serializers.IntegerField(source="reorder_level")
    lastUpdated = serializers.DateTimeField(source="last_updated", allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at")


class StockHistoryEntrySerializer(serializers.Serializer):
    reason = serializers.CharField()
    type = serializers.CharField()
    createdAt = serializers.DateTimeField(source="created_at")
    delta = serializers.IntegerField()


class StockChangeSerializer(serializers.Serializer):
    productId = serializers.UUIDField(source="product_id")
    previousQty = serializers.IntegerField(source="previous_qty")
    currentQty = serializers.IntegerField(source="current_qty")


# ---------------- INPUT ----------------
class InventoryItemWriteSerializer(serializers.Serializer):
    """
    Create (all required fields) and PATCH (partial=True).
    quantity is the OPENING quantity on create; ignored on update.
    """

    name = serializers.CharField(max_length=255)
    sku = serializers.CharField(max_length=128)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    unit = serializers.CharField(max_length=32, required=False, allow_blank=True)
    quantity = serializers.IntegerField(min_value=0, max_value=MAX_QUANTITY)
    costPrice = serializers.DecimalField(
        source="cost_price",
        max_digits=None,
        decimal_places=None,
        min_value=0,
        max_value=MAX_UNIT_PRICE,
    )
    sellingPrice = serializers.DecimalField(
        source="selling_price",
        max_digits=None,
        decimal_places=None,
        min_value=0,
        max_value=MAX_UNIT_PRICE,
    )
    reorderLevel = serializers.IntegerField(
        source="reorder_level", min_value=0, max_value=MAX_QUANTITY
    )


class BulkImportSerializer(serializers.Serializer):
    items = InventoryItemWriteSerializer(many=True, allow_empty=False)

    def validate_items(self, value):
        max_items = self.context.get("max_items")
        if max_items is not None and len(value) > max_items:
            raise serializers.ValidationError(f"At most {max_items} items are allowed")
        return value


class StockHistoryQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(required=False, min_value=1)

    def validate_limit(self, value):
        max_limit = self.context.get("max_limit")
        if max_limit is not None and value > max_limit:
            raise serializers.ValidationError(f"Ensure this value is less than or equal to {max_limit}.")
        return value


class LowStockQuerySerializer(serializers.Serializer):
    threshold = serializers.IntegerField(required=False, min_value=0, max_value=MAX_QUANTITY)


class AdjustStockSerializer(serializers.Serializer):
    """
    Two accepted payloads:

    1) {productId, quantity, type, source, referenceId?}
    2) {itemId, delta, reason, notes?}
         delta sign -> IN / OUT, |trunc(delta)| -> quantity,
         reason text -> EXPIRED / DAMAGE / MANUAL

    validated_data is always {product_id, quantity, movement_type, source, reference_id}.
    """

    productId = serializers.UUIDField(required=False)
    quantity = serializers.IntegerField(required=False, min_value=1, max_value=MAX_QUANTITY)
    type = serializers.ChoiceField(
        choices=StockMovement.MovementType.values, required=False
    )
    source = serializers.ChoiceField(choices=StockMovement.Source.values, required=False)
    referenceId = serializers.UUIDField(required=False, allow_null=True)

    itemId = serializers.UUIDField(required=False)
    delta = serializers.FloatField(required=False)
    reason = serializers.CharField(required=False, min_length=1)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if attrs.get("productId") is not None:
            missing = [f for f in ("quantity", "type", "source") if attrs.get(f) is None]
            if missing:
                raise serializers.ValidationError(
                    {name: "This field is required." for name in missing}
                )
            return {
                "product_id": attrs["productId"],
                "quantity": attrs["quantity"],
                "movement_type": attrs["type"],
                "source": attrs["source"],
                "reference_id": attrs.get("referenceId"),
            }

        if attrs.get("itemId") is not None:
            missing = [f for f in ("delta", "reason") if attrs.get(f) is None]
            if missing:
                raise serializers.ValidationError(
                    {name: "This field is required." for name in missing}
                )
            delta = attrs["delta"]
            if not math.isfinite(delta) or abs(delta) > MAX_QUANTITY:
                raise serializers.ValidationError(
                    {"delta": f"Ensure this value is between -{MAX_QUANTITY} and {MAX_QUANTITY}."}
                )
            quantity = abs(int(delta))
            if quantity <= 0:
                raise serializers.ValidationError(
                    {"delta": "Quantity must be a non-zero integer"}
                )
            return {
                "product_id": attrs["itemId"],
                "quantity": quantity,
                "movement_type": (
                    StockMovement.MovementType.IN
                    if delta > 0
                    else StockMovement.MovementType.OUT
                ),
                "source": source_from_reason(attrs["reason"]),
                "reference_id": None,
            }

        raise serializers.ValidationError("productId or itemId is required")
