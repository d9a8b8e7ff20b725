# sales/views/__init__.py

from .customer import CustomerListCreateView
from .sale import SaleDetailView, SaleListCreateView

__all__ = [
    "CustomerListCreateView",
    "SaleDetailView",
    "SaleListCreateView",
]
