# sales/models/customer.py

import uuid

from django.core.exceptions import ValidationError
from django.db import models

from shops.models import Shop


class Customer(models.Model):
    """
    Customer master (per shop). A sale may reference one; walk-in sales don't.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    shop = models.ForeignKey(
        Shop,
        on_delete=models.CASCADE,
        related_name="customers",
    )

    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=50, blank=True, default="")
    email = models.EmailField(blank=True, default="")

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["shop", "name"], name="sales_customer_shop_name_idx"),
            models.Index(fields=["shop", "phone"], name="sales_customer_shop_phone_idx"),
        ]

    def clean(self):
        if len((self.name or "").strip()) < 2:
            raise ValidationError({"name": "name must be at least 2 characters"})

    def __str__(self):
        return self.name
