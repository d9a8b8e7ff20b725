# purchases/models.py

import uuid
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from products.models import Product
from shops.models import Shop

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


User = settings.AUTH_USER_MODEL


class Supplier(models.Model):
    """
    Supplier master (per shop).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    shop = models.ForeignKey(
        Shop,
        on_delete=models.CASCADE,
        related_name="suppliers",
    )

    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=50, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    address = models.TextField(blank=True, default="")

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["shop", "name"], name="purch_supplier_shop_name_idx"),
            models.Index(fields=["shop", "is_active"], name="purch_supplier_shop_act_idx"),
        ]

    def clean(self):
        if len((self.name or "").strip()) < 2:
            raise ValidationError({"name": "name must be at least 2 characters"})

    def __str__(self):
        return self.name


class Purchase(models.Model):
    """
    Purchase header. Created ONLY by purchases.services.receiving_service,
    in the same transaction as its lines and the IN movements they cause
    (StockMovement.reference_id == Purchase.id).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    shop = models.ForeignKey(
        Shop,
        on_delete=models.PROTECT,
        related_name="purchases",
    )
    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        related_name="purchases",
        null=True,
        blank=True,
    )

    total_cost = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="purchases_created",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_cost__gte=Decimal("0.00")),
                name="purchase_total_cost_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["shop", "created_at"], name="purch_shop_created_idx"),
        ]

    def __str__(self):
        return f"Purchase {self.id} ({self.total_cost})"


class PurchaseItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    purchase = models.ForeignKey(
        Purchase,
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="purchase_items",
    )

    quantity = models.PositiveIntegerField()
    cost_price = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="purchase_item_quantity_gt_zero",
            ),
            models.CheckConstraint(
                condition=models.Q(cost_price__gte=Decimal("0.00")),
                name="purchase_item_cost_nonnegative",
            ),
        ]

    @property
    def line_total(self) -> Decimal:
        return _money(Decimal(str(self.quantity)) * Decimal(str(self.cost_price)))

    def __str__(self):
        product_name = getattr(self.product, "name", "Product")
        return f"{product_name} x {self.quantity}"
