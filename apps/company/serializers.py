from rest_framework import serializers

from apps.exchange.serializers import CurrencyCodeField
from .models import AppSettings, IssuingEntity, PaymentSource


# =============================================================================
# App settings
# =============================================================================

class AppSettingsSerializer(serializers.ModelSerializer):
    base_currency = CurrencyCodeField(required=False)
    default_tax_percentage = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, max_value=100, required=False
    )

    class Meta:
        model = AppSettings
        fields = [
            'base_currency',
            'default_tax_percentage',
            'default_quote_expiry_days',
            'default_invoice_payment_terms_days',
            'default_quote_notes',
            'default_invoice_notes',
            'updated_at',
        ]
        read_only_fields = ['updated_at']
        extra_kwargs = {
            'default_quote_notes': {'max_length': 2000},
            'default_invoice_notes': {'max_length': 2000},
        }


# =============================================================================
# Issuing entities
# =============================================================================

class IssuingEntitySerializer(serializers.ModelSerializer):
    payment_source_count = serializers.IntegerField(source='payment_sources.count', read_only=True)

    class Meta:
        model = IssuingEntity
        fields = [
            'id',
            'entity_name',
            'registration_number',
            'address',
            'website',
            'email',
            'phone',
            'logo_url',
            'is_primary',
            'payment_source_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'payment_source_count', 'created_at', 'updated_at']


class IssuingEntityCreateSerializer(serializers.ModelSerializer):
    is_primary = serializers.BooleanField(required=False, default=False)

    class Meta:
        model = IssuingEntity
        fields = [
            'entity_name',
            'registration_number',
            'address',
            'website',
            'email',
            'phone',
            'logo_url',
            'is_primary',
        ]


# =============================================================================
# Payment sources
# =============================================================================

class PaymentSourceSerializer(serializers.ModelSerializer):
    issuing_entity_name = serializers.CharField(source='issuing_entity.entity_name', read_only=True)

    class Meta:
        model = PaymentSource
        fields = [
            'id',
            'name',
            'currency_code',
            'issuing_entity',
            'issuing_entity_name',
            'bank_name',
            'account_holder_name',
            'account_number',
            'iban',
            'swift_bic',
            'routing_number_us',
            'sort_code_uk',
            'additional_details',
            'is_primary_for_entity',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'issuing_entity_name', 'created_at', 'updated_at']


class PaymentSourceWriteSerializer(serializers.ModelSerializer):
    currency_code = CurrencyCodeField()
    issuing_entity = serializers.PrimaryKeyRelatedField(queryset=IssuingEntity.objects.all())
    is_primary_for_entity = serializers.BooleanField(required=False, default=False)

    class Meta:
        model = PaymentSource
        fields = [
            'name',
            'currency_code',
            'issuing_entity',
            'bank_name',
            'account_holder_name',
            'account_number',
            'iban',
            'swift_bic',
            'routing_number_us',
            'sort_code_uk',
            'additional_details',
            'is_primary_for_entity',
        ]

    def validate_iban(self, value):
        return value.replace(' ', '').upper()

    def validate_swift_bic(self, value):
        value = value.strip().upper()
        if value and len(value) not in (8, 11):
            raise serializers.ValidationError('SWIFT/BIC must be 8 or 11 characters')
        return value


class PaymentSourceFilterSerializer(serializers.Serializer):
    """Query parameters for listing payment sources."""

    entity = serializers.UUIDField(required=False)
