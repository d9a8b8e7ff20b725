# sales/views/customer.py

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from inventory.api.errors import ledger_error_response
from inventory.api.views import SHOP_HEADER_PARAM
from inventory.services.exceptions import LedgerError
from permissions.roles import CAP_CUSTOMERS_MANAGE, CAP_CUSTOMERS_VIEW, HasCapability
from sales.serializers import CustomerCreateSerializer, CustomerSerializer
from sales.services.customers import create_customer, list_customers


class CustomerListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = {"GET": CAP_CUSTOMERS_VIEW, "POST": CAP_CUSTOMERS_MANAGE}
    serializer_class = CustomerCreateSerializer

    @extend_schema(
        tags=["sales"],
        parameters=[SHOP_HEADER_PARAM, OpenApiParameter("search", str)],
        responses=CustomerSerializer(many=True),
    )
    def get(self, request):
        qs = list_customers(shop=request.shop, search=request.query_params.get("search"))
        return Response(CustomerSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["sales"],
        parameters=[SHOP_HEADER_PARAM],
        request=CustomerCreateSerializer,
        responses={201: CustomerSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            customer = create_customer(shop=request.shop, data=s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(CustomerSerializer(customer).data, status=status.HTTP_201_CREATED)
