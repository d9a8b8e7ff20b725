# purchases/admin.py
"""
Purchases are recorded through receive_purchase() only; the admin shows them
read-only. Suppliers are editable master data.
"""

from django.contrib import admin

from purchases.models import Purchase, PurchaseItem, Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ("name", "shop", "phone", "email", "is_active", "created_at")
    list_filter = ("is_active", "shop")
    search_fields = ("name", "phone", "email")


class PurchaseItemInline(admin.TabularInline):
    model = PurchaseItem
    extra = 0
    can_delete = False
    readonly_fields = ("product", "quantity", "cost_price", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display = ("id", "shop", "supplier", "total_cost", "created_by", "created_at")
    list_filter = ("shop",)
    inlines = [PurchaseItemInline]
    readonly_fields = ("shop", "supplier", "total_cost", "created_by", "created_at")

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
