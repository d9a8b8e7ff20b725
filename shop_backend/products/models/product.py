# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from shops.models import Shop


class Product(models.Model):
    """
    Represents a stockable, sellable product of one shop.

    STOCK MODEL (IMPORTANT):
    - Product itself does NOT store stock
    - Stock lives in inventory.StockSnapshot (one row per shop/product)
    - Every quantity change is an inventory.StockMovement

    LIFECYCLE:
    - is_active=False is the soft-delete state; history and snapshot are kept
    - inactive products are hidden from projections and rejected by the ledger
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    shop = models.ForeignKey(
        Shop,
        on_delete=models.CASCADE,
        related_name="products",
    )

    sku = models.CharField(max_length=128, db_index=True)
    name = models.CharField(max_length=255, db_index=True)

    category = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    unit = models.CharField(max_length=32, blank=True)

    cost_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    selling_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["shop", "is_active"], name="products_shop_active_idx"),
            models.Index(fields=["shop", "name"], name="products_shop_name_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["shop", "sku"],
                name="uniq_product_sku_per_shop",
            ),
            models.CheckConstraint(
                condition=Q(cost_price__gte=0),
                name="product_cost_price_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(selling_price__gte=0),
                name="product_selling_price_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.sku})"

    def clean(self):
        if not (self.sku or "").strip():
            raise ValidationError("sku is required")
        if not (self.name or "").strip():
            raise ValidationError("name is required")
        if self.cost_price is not None and Decimal(self.cost_price) < 0:
            raise ValidationError("cost_price cannot be negative")
        if self.selling_price is not None and Decimal(self.selling_price) < 0:
            raise ValidationError("selling_price cannot be negative")
