from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from shops.models import ShopMembership
from users.serializers import MeSerializer


class MeView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = MeSerializer

    @extend_schema(
        tags=["Auth"],
        responses={200: MeSerializer},
        description="Current authenticated user and the shops they belong to",
    )
    def get(self, request):
        user = request.user
        memberships = (
            ShopMembership.objects.select_related("shop")
            .filter(user=user, shop__is_active=True)
            .order_by("shop__name")
        )

        payload = {
            "id": user.id,
            "email": user.email,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "memberships": list(memberships),
        }
        return Response(MeSerializer(payload).data)
