# sales/serializers/__init__.py

from .customer import CustomerCreateSerializer, CustomerSerializer
from .sale import (
    SaleCreateSerializer,
    SaleFilter,
    SaleReceiptSerializer,
    SaleSerializer,
)

__all__ = [
    "CustomerCreateSerializer",
    "CustomerSerializer",
    "SaleCreateSerializer",
    "SaleFilter",
    "SaleReceiptSerializer",
    "SaleSerializer",
]
