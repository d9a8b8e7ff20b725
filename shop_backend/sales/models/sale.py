# sales/models/sale.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models

from shops.models import Shop

from .customer import Customer

User = settings.AUTH_USER_MODEL


class Sale(models.Model):
    """
    A completed sale.

    GUARANTEES:
    - Created ONLY by sales.services.sale_service.record_sale(), in the same
      transaction as its lines and the OUT movements they cause
      (StockMovement.reference_id == Sale.id)
    - total_amount == sum(line_total) of its items
    """

    class PaymentMethod(models.TextChoices):
        CASH = "CASH", "Cash"
        UPI = "UPI", "UPI"
        CARD = "CARD", "Card"
        BANK = "BANK", "Bank Transfer"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    shop = models.ForeignKey(
        Shop,
        on_delete=models.PROTECT,
        related_name="sales",
    )
    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="sales",
        null=True,
        blank=True,
    )

    payment_method = models.CharField(
        max_length=8,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH,
    )

    total_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales_created",
        help_text="Cashier / staff who recorded the sale",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=Decimal("0.00")),
                name="sale_total_amount_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["shop", "created_at"], name="sales_shop_created_idx"),
            models.Index(fields=["shop", "payment_method"], name="sales_shop_payment_idx"),
        ]

    def __str__(self):
        return f"Sale {self.id} ({self.total_amount})"
