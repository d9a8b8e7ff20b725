# inventory/api/urls.py

from django.urls import path

from inventory.api.views import (
    AdjustStockView,
    BulkImportView,
    InventoryItemDetailView,
    InventoryListCreateView,
    LowStockView,
    StockHistoryView,
)

urlpatterns = [
    path("", InventoryListCreateView.as_view(), name="inventory-list"),
    path("adjust/", AdjustStockView.as_view(), name="inventory-adjust"),
    path("low-stock/", LowStockView.as_view(), name="inventory-low-stock"),
    path("bulk-import/", BulkImportView.as_view(), name="inventory-bulk-import"),
    path("<uuid:item_id>/", InventoryItemDetailView.as_view(), name="inventory-detail"),
    path(
        "<uuid:item_id>/history/",
        StockHistoryView.as_view(),
        name="inventory-history",
    ),
]
