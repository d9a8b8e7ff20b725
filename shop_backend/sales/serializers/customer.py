# sales/serializers/customer.py

from rest_framework import serializers

from sales.models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    isActive = serializers.BooleanField(source="is_active", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Customer
        fields = ["id", "name", "phone", "email", "isActive", "createdAt"]
        read_only_fields = ("id",)


class CustomerCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, min_length=2)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
