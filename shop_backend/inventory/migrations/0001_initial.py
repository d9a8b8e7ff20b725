"""
======================================================
PATH: inventory/migrations/0001_initial.py
======================================================
MIGRATION: CREATE StockSnapshot + StockMovement (inventory ledger)

- StockSnapshot: unique (shop, product), quantity_available >= 0
- StockMovement: append-only, quantity > 0
"""

from __future__ import annotations

import uuid

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("shops", "0001_initial"),
        ("products", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="StockSnapshot",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("quantity_available", models.IntegerField(default=0)),
                ("reorder_level", models.PositiveIntegerField(default=0)),
                ("version", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("last_updated", models.DateTimeField(auto_now=True)),
                (
                    "product",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_snapshot",
                        to="products.product",
                    ),
                ),
                (
                    "shop",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_snapshots",
                        to="shops.shop",
                    ),
                ),
            ],
            options={
                "ordering": ["-last_updated"],
                "indexes": [
                    models.Index(
                        fields=["shop", "quantity_available"],
                        name="inv_snapshot_shop_qty_idx",
                    ),
                    models.Index(
                        fields=["shop", "last_updated"],
                        name="inv_snapshot_shop_upd_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("shop", "product"),
                        name="uniq_stock_snapshot_shop_product",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(quantity_available__gte=0),
                        name="stock_snapshot_quantity_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="StockMovement",
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
                (
                    "movement_type",
                    models.CharField(
                        choices=[
                            ("IN", "Stock In"),
                            ("OUT", "Stock Out"),
                            ("ADJUSTMENT", "Set Absolute Quantity"),
                        ],
                        max_length=10,
                    ),
                ),
                ("quantity", models.PositiveIntegerField()),
                (
                    "source",
                    models.CharField(
                        choices=[
                            ("PURCHASE", "Purchase"),
                            ("SALE", "Sale"),
                            ("DAMAGE", "Damage / Loss"),
                            ("EXPIRED", "Expired Stock"),
                            ("MANUAL", "Manual"),
                        ],
                        max_length=10,
                    ),
                ),
                ("reference_id", models.UUIDField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="stock_movements",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_movements",
                        to="products.product",
                    ),
                ),
                (
                    "shop",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_movements",
                        to="shops.shop",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(
                        fields=["shop", "product", "created_at"],
                        name="inv_move_shop_prod_at_idx",
                    ),
                    models.Index(fields=["reference_id"], name="inv_move_reference_idx"),
                    models.Index(fields=["source"], name="inv_move_source_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(quantity__gt=0),
                        name="stock_movement_quantity_positive",
                    ),
                ],
            },
        ),
    ]
