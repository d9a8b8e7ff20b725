# inventory/admin.py
"""
=====================================================
PATH: inventory/admin.py
=====================================================

Ledger tables are read-only in the admin: no add, change or delete.
Stock only moves through inventory.services.
"""

from __future__ import annotations

from django.contrib import admin

from inventory.models import StockMovement, StockSnapshot


class ReadOnlyLedgerAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(StockSnapshot)
class StockSnapshotAdmin(ReadOnlyLedgerAdmin):
    list_display = (
        "product",
        "shop",
        "quantity_available",
        "reorder_level",
        "version",
        "last_updated",
    )
    list_filter = ("shop",)
    search_fields = ("product__name", "product__sku")
    list_select_related = ("product", "shop")


@admin.register(StockMovement)
class StockMovementAdmin(ReadOnlyLedgerAdmin):
    list_display = (
        "created_at",
        "product",
        "movement_type",
        "quantity",
        "source",
        "reference_id",
        "created_by",
    )
    list_filter = ("movement_type", "source", "shop")
    search_fields = ("product__name", "product__sku", "reference_id")
    list_select_related = ("product", "created_by")
    date_hierarchy = "created_at"
