# inventory/api/views.py

"""
INVENTORY API

All endpoints are shop-scoped: HasCapability resolves X-Shop-Id against the
caller's membership and sets request.shop before the handler runs.
"""

from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from inventory.api.errors import ledger_error_response
from inventory.api.serializers import (
    AdjustStockSerializer,
    BulkImportSerializer,
    InventoryItemSerializer,
    InventoryItemWriteSerializer,
    LowStockQuerySerializer,
    StockChangeSerializer,
    StockHistoryEntrySerializer,
    StockHistoryQuerySerializer,
)
from inventory.services import items as item_service
from inventory.services import projections
from inventory.services.exceptions import LedgerError
from inventory.services.ledger import adjust_stock
from permissions.roles import (
    CAP_INVENTORY_ADJUST,
    CAP_INVENTORY_EDIT,
    CAP_INVENTORY_VIEW,
    HasCapability,
)

SHOP_HEADER_PARAM = OpenApiParameter(
    name="X-Shop-Id",
    type=str,
    location=OpenApiParameter.HEADER,
    required=True,
)


class InventoryListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = {"GET": CAP_INVENTORY_VIEW, "POST": CAP_INVENTORY_EDIT}
    serializer_class = InventoryItemWriteSerializer

    @extend_schema(
        tags=["inventory"],
        parameters=[SHOP_HEADER_PARAM, OpenApiParameter("search", str)],
        responses=InventoryItemSerializer(many=True),
    )
    def get(self, request):
        rows = projections.list_items(
            shop=request.shop, search=request.query_params.get("search")
        )
        return Response({"items": InventoryItemSerializer(rows, many=True).data})

    @extend_schema(
        tags=["inventory"],
        parameters=[SHOP_HEADER_PARAM],
        request=InventoryItemWriteSerializer,
        responses={201: InventoryItemSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            item = item_service.create_item(
                shop=request.shop, actor=request.user, data=s.validated_data
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            {"item": InventoryItemSerializer(item).data}, status=status.HTTP_201_CREATED
        )


class InventoryItemDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = {
        "GET": CAP_INVENTORY_VIEW,
        "PATCH": CAP_INVENTORY_EDIT,
        "DELETE": CAP_INVENTORY_EDIT,
    }
    serializer_class = InventoryItemWriteSerializer

    @extend_schema(
        tags=["inventory"],
        parameters=[SHOP_HEADER_PARAM],
        responses=InventoryItemSerializer,
    )
    def get(self, request, item_id):
        try:
            item = projections.get_item(shop=request.shop, product_id=item_id)
        except LedgerError as exc:
            return ledger_error_response(exc)
        return Response({"item": InventoryItemSerializer(item).data})

    @extend_schema(
        tags=["inventory"],
        parameters=[SHOP_HEADER_PARAM],
        request=InventoryItemWriteSerializer,
        responses=InventoryItemSerializer,
    )
    def patch(self, request, item_id):
        s = self.get_serializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)

        try:
            item = item_service.update_item(
                shop=request.shop, product_id=item_id, data=s.validated_data
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response({"item": InventoryItemSerializer(item).data})

    @extend_schema(tags=["inventory"], parameters=[SHOP_HEADER_PARAM], request=None)
    def delete(self, request, item_id):
        try:
            result = item_service.delete_item(shop=request.shop, product_id=item_id)
        except LedgerError as exc:
            return ledger_error_response(exc)
        return Response({"id": str(result["id"]), "deleted": result["deleted"]})


class StockHistoryView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_INVENTORY_VIEW
    serializer_class = StockHistoryQuerySerializer

    @extend_schema(
        tags=["inventory"],
        parameters=[SHOP_HEADER_PARAM, OpenApiParameter("limit", int)],
        responses=StockHistoryEntrySerializer(many=True),
    )
    def get(self, request, item_id):
        q = self.get_serializer(
            data=request.query_params,
            context={"max_limit": int(settings.STOCK_HISTORY_MAX_LIMIT)},
        )
        q.is_valid(raise_exception=True)

        try:
            history = projections.get_stock_history(
                shop=request.shop,
                product_id=item_id,
                limit=q.validated_data.get("limit"),
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response({"history": StockHistoryEntrySerializer(history, many=True).data})


class LowStockView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_INVENTORY_VIEW
    serializer_class = LowStockQuerySerializer

    @extend_schema(
        tags=["inventory"],
        parameters=[SHOP_HEADER_PARAM, OpenApiParameter("threshold", int)],
        responses=InventoryItemSerializer(many=True),
    )
    def get(self, request):
        q = self.get_serializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        threshold = q.validated_data.get("threshold")

        try:
            rows = projections.low_stock(shop=request.shop, threshold=threshold)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            {
                "threshold": threshold,
                "items": InventoryItemSerializer(rows, many=True).data,
            }
        )


class BulkImportView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_INVENTORY_EDIT
    serializer_class = BulkImportSerializer

    @extend_schema(
        tags=["inventory"],
        parameters=[SHOP_HEADER_PARAM],
        request=BulkImportSerializer,
        responses={201: InventoryItemSerializer(many=True)},
    )
    def post(self, request):
        s = self.get_serializer(
            data=request.data,
            context={"max_items": int(settings.BULK_IMPORT_MAX_ITEMS)},
        )
        s.is_valid(raise_exception=True)

        try:
            result = item_service.bulk_import(
                shop=request.shop,
                actor=request.user,
                items=s.validated_data["items"],
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            {
                "created": result["created"],
                "items": InventoryItemSerializer(result["items"], many=True).data,
            },
            status=status.HTTP_201_CREATED,
        )


class AdjustStockView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_INVENTORY_ADJUST
    serializer_class = AdjustStockSerializer

    @extend_schema(
        tags=["inventory"],
        parameters=[SHOP_HEADER_PARAM],
        request=AdjustStockSerializer,
        responses=StockChangeSerializer,
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            change = adjust_stock(
                shop=request.shop,
                actor=request.user,
                product_id=data["product_id"],
                quantity=data["quantity"],
                movement_type=data["movement_type"],
                source=data["source"],
                reference_id=data["reference_id"],
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(StockChangeSerializer(change).data, status=status.HTTP_200_OK)
