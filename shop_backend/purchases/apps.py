# purchases/apps.py

"""
PURCHASES APP CONFIG

- Supplier master (per shop)
- Purchase header + lines
- receive_purchase(): stock IN through the inventory ledger
"""

from django.apps import AppConfig


class PurchasesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "purchases"
    verbose_name = "Purchases"
