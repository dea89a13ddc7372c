from rest_framework import serializers

from .constants import ALLOWED_CURRENCIES
from .models import ExchangeRate


class CurrencyCodeField(serializers.CharField):
    """Three-letter code, upper-cased before checking the allowed list."""

    def __init__(self, **kwargs):
        kwargs.setdefault('max_length', 3)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        value = super().to_internal_value(data).strip().upper()
        if value not in ALLOWED_CURRENCIES:
            raise serializers.ValidationError(
                f"Unsupported currency '{value}'. Allowed: {', '.join(ALLOWED_CURRENCIES)}"
            )
        return value


# =============================================================================
# Input serializers
# =============================================================================

class RateQuerySerializer(serializers.Serializer):
    """Query parameters for GET /api/fx/."""

    base = CurrencyCodeField()
    target = CurrencyCodeField()


class ConvertQuerySerializer(RateQuerySerializer):
    """Query parameters for GET /api/fx/convert/."""

    amount = serializers.DecimalField(max_digits=18, decimal_places=2)


class ExchangeRateOverrideCreateSerializer(serializers.Serializer):
    from_currency = CurrencyCodeField()
    to_currency = CurrencyCodeField()
    rate = serializers.DecimalField(max_digits=18, decimal_places=6, min_value=0)
    note = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')

    def validate(self, attrs):
        if attrs['from_currency'] == attrs['to_currency']:
            raise serializers.ValidationError({
                'to_currency': 'Must differ from from_currency'
            })
        if attrs['rate'] <= 0:
            raise serializers.ValidationError({'rate': 'Must be greater than zero'})
        return attrs


# =============================================================================
# Output serializers
# =============================================================================

class RateResponseSerializer(serializers.Serializer):
    base = serializers.CharField()
    target = serializers.CharField()
    rate = serializers.DecimalField(max_digits=18, decimal_places=6)
    date = serializers.DateField(allow_null=True)


class ConvertResponseSerializer(RateResponseSerializer):
    amount = serializers.DecimalField(max_digits=18, decimal_places=2)
    converted = serializers.DecimalField(max_digits=18, decimal_places=2)


class ExchangeRateSerializer(serializers.ModelSerializer):
    created_by_email = serializers.EmailField(source='created_by.email', read_only=True, default=None)

    class Meta:
        model = ExchangeRate
        fields = [
            'id',
            'from_currency',
            'to_currency',
            'rate',
            'note',
            'created_by_email',
            'created_at',
        ]
        read_only_fields = fields


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
