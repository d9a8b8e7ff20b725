# sales/serializers/sale.py

import django_filters
from rest_framework import serializers

from inventory.services.validators import MAX_QUANTITY, MAX_UNIT_PRICE
from sales.models import Sale, SaleItem


# ---------------- INPUT ----------------
class SaleLineCreateSerializer(serializers.Serializer):
    productId = serializers.UUIDField(source="product_id")
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_QUANTITY)
    sellingPrice = serializers.DecimalField(
        source="selling_price",
        max_digits=None,
        decimal_places=None,
        min_value=0,
        max_value=MAX_UNIT_PRICE,
    )


class SaleCreateSerializer(serializers.Serializer):
    customerId = serializers.UUIDField(source="customer_id", required=False, allow_null=True)
    paymentMethod = serializers.ChoiceField(
        source="payment_method", choices=Sale.PaymentMethod.values
    )
    items = SaleLineCreateSerializer(many=True, allow_empty=False)

    def to_internal_value(self, data):
        # accept "cash" as well as "CASH"
        if isinstance(data, dict) and isinstance(data.get("paymentMethod"), str):
            data = {**data, "paymentMethod": data["paymentMethod"].strip().upper()}
        return super().to_internal_value(data)


# ---------------- OUTPUT ----------------
class SaleReceiptSerializer(serializers.Serializer):
    saleId = serializers.UUIDField(source="sale_id")
    totalAmount = serializers.DecimalField(
        source="total_amount", max_digits=14, decimal_places=2
    )
    itemCount = serializers.IntegerField(source="item_count")


class SaleItemSerializer(serializers.ModelSerializer):
    productId = serializers.UUIDField(source="product_id", read_only=True)
    productName = serializers.CharField(source="product.name", read_only=True)
    sku = serializers.CharField(source="product.sku", read_only=True)
    sellingPrice = serializers.DecimalField(
        source="selling_price", max_digits=14, decimal_places=2, read_only=True
    )
    lineTotal = serializers.DecimalField(
        source="line_total", max_digits=14, decimal_places=2, read_only=True
    )

    class Meta:
        model = SaleItem
        fields = ["id", "productId", "productName", "sku", "quantity", "sellingPrice", "lineTotal"]
        read_only_fields = fields


class SaleSerializer(serializers.ModelSerializer):
    customerId = serializers.UUIDField(source="customer_id", read_only=True, allow_null=True)
    customerName = serializers.SerializerMethodField()
    paymentMethod = serializers.CharField(source="payment_method", read_only=True)
    totalAmount = serializers.DecimalField(
        source="total_amount", max_digits=14, decimal_places=2, read_only=True
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    items = SaleItemSerializer(many=True, read_only=True)

    class Meta:
        model = Sale
        fields = [
            "id",
            "customerId",
            "customerName",
            "paymentMethod",
            "totalAmount",
            "createdAt",
            "items",
        ]
        read_only_fields = fields

    def get_customerName(self, obj):
        return getattr(obj.customer, "name", None)


# ---------------- FILTERS ----------------
class SaleFilter(django_filters.FilterSet):
    """
    Sales history filters:
      ?paymentMethod=CASH&customerId=<uuid>&createdFrom=<iso>&createdTo=<iso>
    """

    paymentMethod = django_filters.ChoiceFilter(
        field_name="payment_method", choices=Sale.PaymentMethod.choices
    )
    customerId = django_filters.UUIDFilter(field_name="customer_id")
    createdFrom = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    createdTo = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="lte")

    class Meta:
        model = Sale
        fields = []
