# sales/models/sale_item.py

"""
SALE ITEM

One sold line: product, quantity and the selling price charged at the time.
"""

from __future__ import annotations

import uuid
from decimal import Decimal, ROUND_HALF_UP

from django.db import models

from products.models import Product

from .sale import Sale


class SaleItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sale = models.ForeignKey(
        Sale,
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="sale_items",
    )

    quantity = models.PositiveIntegerField()

    # price snapshot; product.selling_price may change later
    selling_price = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="sale_item_quantity_gt_zero",
            ),
            models.CheckConstraint(
                condition=models.Q(selling_price__gte=Decimal("0.00")),
                name="sale_item_price_nonnegative",
            ),
        ]

    @property
    def line_total(self) -> Decimal:
        return (Decimal(self.quantity) * Decimal(str(self.selling_price))).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )

    def __str__(self):
        product_name = getattr(self.product, "name", "Product")
        return f"{product_name} x {self.quantity}"
