# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules:
- Product master data is editable.
- Stock is NOT editable here; quantities only change through the inventory
  ledger (adjust / purchase / sale), so the snapshot is shown read-only.
"""

from __future__ import annotations

from django.contrib import admin

from products.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "sku",
        "shop",
        "selling_price",
        "quantity_available",
        "is_active",
    )
    list_filter = ("is_active", "shop")
    search_fields = ("name", "sku")
    readonly_fields = ("quantity_available", "created_at", "updated_at")

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("shop", "stock_snapshot")

    @admin.display(description="On hand")
    def quantity_available(self, obj):
        snapshot = getattr(obj, "stock_snapshot", None)
        return snapshot.quantity_available if snapshot else 0

    def has_delete_permission(self, request, obj=None):
        # soft delete only (is_active)
        return False
