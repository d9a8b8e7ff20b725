# sales/apps.py

"""
SALES APP CONFIG

- Customer master (per shop)
- Sale header + lines
- record_sale(): stock OUT through the inventory ledger
"""

from django.apps import AppConfig


class SalesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "sales"
    verbose_name = "Sales"
