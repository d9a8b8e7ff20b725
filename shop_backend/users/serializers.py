# users/serializers.py

from __future__ import annotations

from rest_framework import serializers


# ---------------- MEMBERSHIP OUTPUT ----------------
class MembershipSerializer(serializers.Serializer):
    shopId = serializers.UUIDField(source="shop.id")
    shopName = serializers.CharField(source="shop.name")
    role = serializers.CharField()


# ---------------- ME OUTPUT ----------------
class MeSerializer(serializers.Serializer):
    """
    Safe user representation for the mobile client.
    Memberships drive shop selection (sent back as X-Shop-Id).
    """

    id = serializers.UUIDField()
    email = serializers.EmailField()
    firstName = serializers.CharField(source="first_name", allow_blank=True)
    lastName = serializers.CharField(source="last_name", allow_blank=True)
    memberships = MembershipSerializer(many=True)
