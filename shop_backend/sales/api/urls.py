# sales/api/urls.py

"""
SALES API URLS

Explicit non-PK routes ("customers/") are registered before "<uuid:sale_id>/".
"""

from django.urls import path

from sales.views import CustomerListCreateView, SaleDetailView, SaleListCreateView

urlpatterns = [
    path("", SaleListCreateView.as_view(), name="sales-list"),
    path("customers/", CustomerListCreateView.as_view(), name="sales-customers"),
    path("<uuid:sale_id>/", SaleDetailView.as_view(), name="sales-detail"),
]
