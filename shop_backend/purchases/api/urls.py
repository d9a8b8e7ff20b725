# purchases/api/urls.py

from django.urls import path

from purchases.api.views import (
    PurchaseDetailView,
    PurchaseListCreateView,
    SupplierListCreateView,
)

urlpatterns = [
    path("", PurchaseListCreateView.as_view(), name="purchase-list"),
    path("suppliers/", SupplierListCreateView.as_view(), name="purchase-suppliers"),
    path(
        "<uuid:purchase_id>/", PurchaseDetailView.as_view(), name="purchase-detail"
    ),
]
