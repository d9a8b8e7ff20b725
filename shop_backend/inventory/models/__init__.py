"""
PATH: inventory/models/__init__.py

Inventory models export surface.
"""

from .stock_movement import StockMovement
from .stock_snapshot import StockSnapshot

__all__ = [
    "StockMovement",
    "StockSnapshot",
]
