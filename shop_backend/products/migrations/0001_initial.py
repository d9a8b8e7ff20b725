"""
======================================================
PATH: products/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Product (shop-scoped master data)
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("shops", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                ("sku", models.CharField(db_index=True, max_length=128)),
                ("name", models.CharField(db_index=True, max_length=255)),
                ("category", models.CharField(blank=True, max_length=100)),
                ("description", models.TextField(blank=True)),
                ("unit", models.CharField(blank=True, max_length=32)),
                (
                    "cost_price",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=12
                    ),
                ),
                (
                    "selling_price",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=12
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "shop",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="products",
                        to="shops.shop",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["shop", "is_active"], name="products_shop_active_idx"),
                    models.Index(fields=["shop", "name"], name="products_shop_name_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("shop", "sku"),
                        name="uniq_product_sku_per_shop",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(cost_price__gte=0),
                        name="product_cost_price_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(selling_price__gte=0),
                        name="product_selling_price_non_negative",
                    ),
                ],
            },
        ),
    ]
