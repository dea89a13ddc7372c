from rest_framework import serializers

from apps.exchange.serializers import CurrencyCodeField
from .models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    """Full customer representation."""

    class Meta:
        model = Customer
        fields = [
            'id',
            'public_customer_id',
            'company_contact_name',
            'email',
            'phone',
            'preferred_currency',
            'address',
            'notes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class CustomerListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for lists and pickers."""

    class Meta:
        model = Customer
        fields = [
            'public_customer_id',
            'company_contact_name',
            'email',
            'preferred_currency',
            'updated_at',
        ]
        read_only_fields = fields


class CustomerWriteSerializer(serializers.Serializer):
    """Input for create / update."""

    company_contact_name = serializers.CharField(max_length=120, trim_whitespace=True)
    email = serializers.EmailField(max_length=255, required=False, allow_blank=True, allow_null=True)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    preferred_currency = CurrencyCodeField(required=False)
    address = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(max_length=2000, required=False, allow_blank=True)


class CustomerFilterSerializer(serializers.Serializer):
    """Query parameters for listing customers."""

    search = serializers.CharField(required=False, allow_blank=True)
    currency = CurrencyCodeField(required=False)
