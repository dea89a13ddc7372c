from rest_framework import serializers

from apps.exchange.serializers import CurrencyCodeField
from .models import Product, ProductPrice, ProductStatus, ProductUnit


class ProductPriceSerializer(serializers.ModelSerializer):

    class Meta:
        model = ProductPrice
        fields = ['currency_code', 'price']
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    """Full product representation including additional prices."""

    additional_prices = ProductPriceSerializer(many=True, read_only=True)

    class Meta:
        model = Product
        fields = [
            'id',
            'sku',
            'name',
            'description',
            'unit',
            'base_price',
            'base_currency',
            'status',
            'additional_prices',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ProductListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for lists and line item pickers."""

    class Meta:
        model = Product
        fields = ['sku', 'name', 'unit', 'base_price', 'base_currency', 'status', 'updated_at']
        read_only_fields = fields


# =============================================================================
# Input serializers
# =============================================================================

class AdditionalPriceInputSerializer(serializers.Serializer):
    currency_code = CurrencyCodeField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class ProductWriteSerializer(serializers.Serializer):
    """Input for create / update. SKU and base currency are assigned by the server."""

    name = serializers.CharField(max_length=200, trim_whitespace=True)
    description = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    unit = serializers.ChoiceField(choices=ProductUnit.choices, required=False)
    base_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    status = serializers.ChoiceField(choices=ProductStatus.choices, required=False)
    additional_prices = AdditionalPriceInputSerializer(many=True, required=False)

    def validate_additional_prices(self, value):
        codes = [entry['currency_code'] for entry in value]
        if len(codes) != len(set(codes)):
            raise serializers.ValidationError("Each currency may appear only once")
        return value


class ProductFilterSerializer(serializers.Serializer):
    """Query parameters for listing products."""

    search = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=ProductStatus.choices, required=False)


class PriceQuerySerializer(serializers.Serializer):
    currency = CurrencyCodeField()


# =============================================================================
# Output serializers
# =============================================================================

class PriceResponseSerializer(serializers.Serializer):
    sku = serializers.CharField()
    currency = serializers.CharField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    fx_rate = serializers.DecimalField(max_digits=18, decimal_places=6, allow_null=True)


class NextSkuSerializer(serializers.Serializer):
    sku = serializers.CharField()
