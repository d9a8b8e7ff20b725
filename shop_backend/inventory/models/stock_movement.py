# inventory/models/stock_movement.py

"""
CANONICAL INVENTORY LEDGER

Immutable inventory ledger entry.

GUARANTEES:
- Append-only (no updates, no deletes)
- quantity is always positive; direction is carried by movement_type
    IN          -> adds `quantity`
    OUT         -> removes `quantity`
    ADJUSTMENT  -> sets the absolute quantity to `quantity`
- Purchase / sale movements reference the originating document
"""

import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from products.models import Product
from shops.models import Shop


class StockMovement(models.Model):
    class MovementType(models.TextChoices):
        IN = "IN", "Stock In"
        OUT = "OUT", "Stock Out"
        ADJUSTMENT = "ADJUSTMENT", "Set Absolute Quantity"

    class Source(models.TextChoices):
        PURCHASE = "PURCHASE", "Purchase"
        SALE = "SALE", "Sale"
        DAMAGE = "DAMAGE", "Damage / Loss"
        EXPIRED = "EXPIRED", "Expired Stock"
        MANUAL = "MANUAL", "Manual"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    shop = models.ForeignKey(
        Shop,
        on_delete=models.PROTECT,
        related_name="stock_movements",
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="stock_movements",
    )

    movement_type = models.CharField(max_length=10, choices=MovementType.choices)
    quantity = models.PositiveIntegerField()
    source = models.CharField(max_length=10, choices=Source.choices)

    # Purchase id / sale id for document-driven movements.
    reference_id = models.UUIDField(null=True, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_movements",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(
                fields=["shop", "product", "created_at"],
                name="inv_move_shop_prod_at_idx",
            ),
            models.Index(fields=["reference_id"], name="inv_move_reference_idx"),
            models.Index(fields=["source"], name="inv_move_source_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="stock_movement_quantity_positive",
            ),
        ]

    def clean(self):
        if self.quantity is None or int(self.quantity) <= 0:
            raise ValidationError("quantity must be greater than zero")

        if self.movement_type not in self.MovementType.values:
            raise ValidationError(f"Invalid movement_type: {self.movement_type}")

        if self.source not in self.Source.values:
            raise ValidationError(f"Invalid source: {self.source}")

        if self.product_id and self.shop_id:
            product_shop = (
                Product.objects.filter(id=self.product_id)
                .values_list("shop_id", flat=True)
                .first()
            )
            if product_shop is not None and product_shop != self.shop_id:
                raise ValidationError("Product does not belong to shop")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("StockMovement records are immutable")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            "StockMovement records are immutable and cannot be deleted"
        )

    @property
    def signed_delta(self) -> int:
        """
        Quantity as seen in history: negative for OUT.
        ADJUSTMENT rows report the target quantity unsigned.
        """
        if self.movement_type == self.MovementType.OUT:
            return -int(self.quantity)
        return int(self.quantity)

    def __str__(self):
        return f"{self.product_id} | {self.movement_type} {self.quantity} | {self.source}"
