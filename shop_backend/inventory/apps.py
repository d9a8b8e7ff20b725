# inventory/apps.py

"""
INVENTORY APP CONFIG

The stock ledger:
- StockSnapshot: current quantity per (shop, product)
- StockMovement: append-only audit trail of every quantity change
- services/: ledger engine (adjust / receive / sell primitives), read projections,
  item management
"""

from django.apps import AppConfig


class InventoryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "inventory"
    verbose_name = "Inventory Ledger"
