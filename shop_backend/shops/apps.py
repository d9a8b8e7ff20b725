# shops/apps.py

"""
SHOPS APP CONFIG

Tenant boundary:
- Shop (one business / branch)
- ShopMembership (user ↔ shop, role OWNER / MANAGER / STAFF)
"""

from django.apps import AppConfig


class ShopsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "shops"
    verbose_name = "Shops"
