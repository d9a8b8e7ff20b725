# products/apps.py

"""
PRODUCTS APP CONFIG

Product master data per shop.
Stock quantities are NOT stored here: see inventory.StockSnapshot.
"""

from django.apps import AppConfig


class ProductsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "products"
    verbose_name = "Products"
