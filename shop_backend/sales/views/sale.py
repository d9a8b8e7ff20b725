# sales/views/sale.py

"""
======================================================
PATH: sales/views/sale.py
======================================================
SALES API (shop-scoped)

POST /api/sales/          record a sale (stock OUT through the ledger)
GET  /api/sales/          sales history (filters: see SaleFilter)
GET  /api/sales/<uuid>/   one sale with its lines

Backend is authoritative for totals and stock.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from inventory.api.errors import ledger_error_response
from inventory.api.views import SHOP_HEADER_PARAM
from inventory.services.exceptions import LedgerError
from permissions.roles import CAP_SALES_CREATE, CAP_SALES_VIEW, HasCapability
from sales.models import Sale
from sales.serializers import (
    SaleCreateSerializer,
    SaleFilter,
    SaleReceiptSerializer,
    SaleSerializer,
)
from sales.services.sale_service import record_sale


class ShopSalesMixin:
    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Sale.objects.none()
        return (
            Sale.objects.filter(shop=self.request.shop)
            .select_related("customer")
            .prefetch_related("items", "items__product")
            .order_by("-created_at")
        )


class SaleListCreateView(ShopSalesMixin, GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = {"GET": CAP_SALES_VIEW, "POST": CAP_SALES_CREATE}
    serializer_class = SaleCreateSerializer
    filterset_class = SaleFilter

    @extend_schema(
        tags=["sales"],
        parameters=[SHOP_HEADER_PARAM],
        responses=SaleSerializer(many=True),
    )
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset())
        return Response(SaleSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["sales"],
        parameters=[SHOP_HEADER_PARAM],
        request=SaleCreateSerializer,
        responses={201: SaleReceiptSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            receipt = record_sale(
                shop=request.shop,
                actor=request.user,
                payment_method=data["payment_method"],
                items=data["items"],
                customer_id=data.get("customer_id"),
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(SaleReceiptSerializer(receipt).data, status=status.HTTP_201_CREATED)


class SaleDetailView(ShopSalesMixin, GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_SALES_VIEW
    serializer_class = SaleSerializer

    @extend_schema(tags=["sales"], parameters=[SHOP_HEADER_PARAM], responses=SaleSerializer)
    def get(self, request, sale_id):
        sale = self.get_queryset().filter(id=sale_id).first()
        if sale is None:
            return Response({"detail": "Sale not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(SaleSerializer(sale).data, status=status.HTTP_200_OK)
