# purchases/api/serializers.py

from rest_framework import serializers

from inventory.services.validators import MAX_QUANTITY, MAX_UNIT_PRICE
from purchases.models import Purchase, Supplier


# ---------------- SUPPLIERS ----------------
class SupplierSerializer(serializers.ModelSerializer):
    isActive = serializers.BooleanField(source="is_active", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Supplier
        fields = ["id", "name", "phone", "email", "address", "isActive", "createdAt"]
        read_only_fields = ("id",)


class SupplierCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, min_length=2)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)


# ---------------- PURCHASES ----------------
class PurchaseLineCreateSerializer(serializers.Serializer):
    productId = serializers.UUIDField(source="product_id")
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_QUANTITY)
    costPrice = serializers.DecimalField(
        source="cost_price",
        max_digits=None,
        decimal_places=None,
        min_value=0,
        max_value=MAX_UNIT_PRICE,
    )


class PurchaseCreateSerializer(serializers.Serializer):
    supplierId = serializers.UUIDField(source="supplier_id", required=False, allow_null=True)
    items = PurchaseLineCreateSerializer(many=True, allow_empty=False)


class PurchaseReceiptSerializer(serializers.Serializer):
    purchaseId = serializers.UUIDField(source="purchase_id")
    totalCost = serializers.DecimalField(source="total_cost", max_digits=14, decimal_places=2)
    itemCount = serializers.IntegerField(source="item_count")


class PurchaseSerializer(serializers.ModelSerializer):
    supplierId = serializers.UUIDField(source="supplier_id", read_only=True, allow_null=True)
    supplierName = serializers.SerializerMethodField()
    totalCost = serializers.DecimalField(
        source="total_cost", max_digits=14, decimal_places=2, read_only=True
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    items = serializers.SerializerMethodField()

    class Meta:
        model = Purchase
        fields = ["id", "supplierId", "supplierName", "totalCost", "createdAt", "items"]

    def get_supplierName(self, obj):
        return getattr(obj.supplier, "name", None)

    def get_items(self, obj):
        return [
            {
                "id": str(it.id),
                "productId": str(it.product_id),
                "productName": getattr(it.product, "name", ""),
                "quantity": it.quantity,
                "costPrice": str(it.cost_price),
                "lineTotal": str(it.line_total),
            }
            for it in obj.items.all()
        ]
