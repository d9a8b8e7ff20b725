# sales/admin.py

from django.contrib import admin

from sales.models import Customer, Sale, SaleItem


# ======================================================
# CUSTOMER ADMIN
# ======================================================


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "shop", "phone", "email", "is_active", "created_at")
    list_filter = ("is_active", "shop")
    search_fields = ("name", "phone", "email")


# ======================================================
# SALE ADMIN (read-only; sales come from record_sale())
# ======================================================


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0
    can_delete = False
    readonly_fields = ("product", "quantity", "selling_price", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "shop",
        "customer",
        "payment_method",
        "total_amount",
        "created_by",
        "created_at",
    )
    list_filter = ("payment_method", "shop")
    readonly_fields = (
        "shop",
        "customer",
        "payment_method",
        "total_amount",
        "created_by",
        "created_at",
    )
    inlines = [SaleItemInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
