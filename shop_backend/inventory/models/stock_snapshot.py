# inventory/models/stock_snapshot.py

"""
STOCK SNAPSHOT (CURRENT QUANTITY PER SHOP/PRODUCT)

GUARANTEES:
- One row per (shop, product), enforced by a unique constraint
- quantity_available never negative (DB check constraint + model clean)
- Never deleted: Uninitialized -> Active, never back
- Written ONLY by the ledger services (inventory.services.snapshots), which
  lock the row and bump `version` on every write
"""

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from products.models import Product
from shops.models import Shop


class StockSnapshot(models.Model):
    shop = models.ForeignKey(
        Shop,
        on_delete=models.PROTECT,
        related_name="stock_snapshots",
    )
    product = models.OneToOneField(
        Product,
        on_delete=models.PROTECT,
        related_name="stock_snapshot",
    )

    quantity_available = models.IntegerField(default=0)
    reorder_level = models.PositiveIntegerField(default=0)

    # Optimistic concurrency counter; incremented by every ledger write.
    version = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    last_updated = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-last_updated"]
        indexes = [
            models.Index(
                fields=["shop", "quantity_available"],
                name="inv_snapshot_shop_qty_idx",
            ),
            models.Index(
                fields=["shop", "last_updated"],
                name="inv_snapshot_shop_upd_idx",
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["shop", "product"],
                name="uniq_stock_snapshot_shop_product",
            ),
            models.CheckConstraint(
                condition=Q(quantity_available__gte=0),
                name="stock_snapshot_quantity_non_negative",
            ),
        ]

    def clean(self):
        if self.quantity_available is None or int(self.quantity_available) < 0:
            raise ValidationError("quantity_available cannot be negative")

    def save(self, *args, **kwargs):
        self.clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("StockSnapshot rows are never deleted")

    def __str__(self):
        return f"{self.product_id} @ {self.shop_id}: {self.quantity_available}"
