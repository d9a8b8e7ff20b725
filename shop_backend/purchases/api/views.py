# purchases/api/views.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from inventory.api.errors import ledger_error_response
from inventory.api.views import SHOP_HEADER_PARAM
from inventory.services.exceptions import LedgerError
from permissions.roles import (
    CAP_PURCHASES_CREATE,
    CAP_PURCHASES_VIEW,
    CAP_SUPPLIERS_MANAGE,
    CAP_SUPPLIERS_VIEW,
    HasCapability,
)
from purchases.api.serializers import (
    PurchaseCreateSerializer,
    PurchaseReceiptSerializer,
    PurchaseSerializer,
    SupplierCreateSerializer,
    SupplierSerializer,
)
from purchases.models import Purchase
from purchases.services.receiving_service import receive_purchase
from purchases.services.suppliers import create_supplier, list_suppliers


def _purchases_for(shop):
    return (
        Purchase.objects.filter(shop=shop)
        .select_related("supplier")
        .prefetch_related("items", "items__product")
        .order_by("-created_at")
    )


class SupplierListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = {"GET": CAP_SUPPLIERS_VIEW, "POST": CAP_SUPPLIERS_MANAGE}
    serializer_class = SupplierCreateSerializer

    @extend_schema(
        tags=["purchases"],
        parameters=[SHOP_HEADER_PARAM],
        responses=SupplierSerializer(many=True),
    )
    def get(self, request):
        qs = list_suppliers(shop=request.shop)
        return Response(SupplierSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["purchases"],
        parameters=[SHOP_HEADER_PARAM],
        request=SupplierCreateSerializer,
        responses={201: SupplierSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            supplier = create_supplier(shop=request.shop, data=s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(SupplierSerializer(supplier).data, status=status.HTTP_201_CREATED)


class PurchaseListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = {"GET": CAP_PURCHASES_VIEW, "POST": CAP_PURCHASES_CREATE}
    serializer_class = PurchaseCreateSerializer

    @extend_schema(
        tags=["purchases"],
        parameters=[SHOP_HEADER_PARAM],
        responses=PurchaseSerializer(many=True),
    )
    def get(self, request):
        qs = _purchases_for(request.shop)
        return Response(PurchaseSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["purchases"],
        parameters=[SHOP_HEADER_PARAM],
        request=PurchaseCreateSerializer,
        responses={201: PurchaseReceiptSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            receipt = receive_purchase(
                shop=request.shop,
                actor=request.user,
                items=data["items"],
                supplier_id=data.get("supplier_id"),
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            PurchaseReceiptSerializer(receipt).data, status=status.HTTP_201_CREATED
        )


class PurchaseDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PURCHASES_VIEW
    serializer_class = PurchaseSerializer

    @extend_schema(
        tags=["purchases"],
        parameters=[SHOP_HEADER_PARAM],
        responses=PurchaseSerializer,
    )
    def get(self, request, purchase_id):
        purchase = _purchases_for(request.shop).filter(id=purchase_id).first()
        if purchase is None:
            return Response(
                {"detail": "Purchase order not found"}, status=status.HTTP_404_NOT_FOUND
            )
        return Response(PurchaseSerializer(purchase).data, status=status.HTTP_200_OK)
