# shops/admin.py

from django.contrib import admin

from .models import Shop, ShopMembership


class ShopMembershipInline(admin.TabularInline):
    model = ShopMembership
    extra = 0
    autocomplete_fields = ("user",)


@admin.register(Shop)
class ShopAdmin(admin.ModelAdmin):
    list_display = ("name", "business_type", "is_active", "created_at")
    list_filter = ("is_active", "business_type")
    search_fields = ("name",)
    inlines = [ShopMembershipInline]


@admin.register(ShopMembership)
class ShopMembershipAdmin(admin.ModelAdmin):
    list_display = ("user", "shop", "role", "created_at")
    list_filter = ("role",)
    search_fields = ("user__email", "shop__name")
