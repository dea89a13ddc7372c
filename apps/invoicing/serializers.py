from decimal import Decimal

from rest_framework import serializers

from apps.exchange.serializers import CurrencyCodeField
from .models import Invoice, InvoiceLineItem, InvoiceStatus, Quote, QuoteLineItem, QuoteStatus

PERCENTAGE_FIELD_KWARGS = {
    'max_digits': 5,
    'decimal_places': 2,
    'min_value': Decimal('0'),
    'max_value': Decimal('100'),
    'required': False,
}


# =============================================================================
# Output serializers
# =============================================================================

LINE_ITEM_FIELDS = [
    'id',
    'sku',
    'product_name',
    'description',
    'quantity',
    'unit_price',
    'fx_rate',
    'line_total',
    'position',
]


class QuoteLineItemSerializer(serializers.ModelSerializer):
    sku = serializers.CharField(source='product.sku', read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)

    class Meta:
        model = QuoteLineItem
        fields = LINE_ITEM_FIELDS
        read_only_fields = fields


class InvoiceLineItemSerializer(serializers.ModelSerializer):
    sku = serializers.CharField(source='product.sku', read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)

    class Meta:
        model = InvoiceLineItem
        fields = LINE_ITEM_FIELDS
        read_only_fields = fields


class DocumentPartiesMixin(serializers.Serializer):
    """Flattened party fields shared by quote and invoice output."""

    customer = serializers.CharField(source='customer.public_customer_id', read_only=True)
    customer_name = serializers.CharField(source='customer.company_contact_name', read_only=True)
    issuing_entity = serializers.UUIDField(source='issuing_entity_id', read_only=True)
    issuing_entity_name = serializers.CharField(source='issuing_entity.entity_name', read_only=True)
    payment_source = serializers.UUIDField(source='payment_source_id', read_only=True, allow_null=True)


DOCUMENT_FIELDS = [
    'id',
    'customer',
    'customer_name',
    'issuing_entity',
    'issuing_entity_name',
    'payment_source',
    'issue_date',
    'currency_code',
    'status',
    'discount_percentage',
    'tax_percentage',
    'subtotal_amount',
    'discount_amount',
    'tax_amount',
    'total_amount',
    'notes',
    'created_at',
    'updated_at',
]


class QuoteSerializer(DocumentPartiesMixin, serializers.ModelSerializer):
    """Full quote including line items."""

    line_items = QuoteLineItemSerializer(many=True, read_only=True)
    converted_invoice = serializers.UUIDField(source='converted_invoice_id', read_only=True, allow_null=True)

    class Meta:
        model = Quote
        fields = ['quote_number', 'expiry_date', 'converted_invoice', 'line_items'] + DOCUMENT_FIELDS
        read_only_fields = fields


class QuoteListSerializer(serializers.ModelSerializer):
    customer = serializers.CharField(source='customer.public_customer_id', read_only=True)
    customer_name = serializers.CharField(source='customer.company_contact_name', read_only=True)

    class Meta:
        model = Quote
        fields = [
            'id', 'quote_number', 'customer', 'customer_name', 'issue_date', 'expiry_date',
            'currency_code', 'total_amount', 'status', 'updated_at',
        ]
        read_only_fields = fields


class InvoiceSerializer(DocumentPartiesMixin, serializers.ModelSerializer):
    """Full invoice including line items."""

    line_items = InvoiceLineItemSerializer(many=True, read_only=True)
    source_quote = serializers.UUIDField(source='source_quote_id', read_only=True, allow_null=True)

    class Meta:
        model = Invoice
        fields = ['invoice_number', 'due_date', 'source_quote', 'line_items'] + DOCUMENT_FIELDS
        read_only_fields = fields


class InvoiceListSerializer(serializers.ModelSerializer):
    customer = serializers.CharField(source='customer.public_customer_id', read_only=True)
    customer_name = serializers.CharField(source='customer.company_contact_name', read_only=True)

    class Meta:
        model = Invoice
        fields = [
            'id', 'invoice_number', 'customer', 'customer_name', 'issue_date', 'due_date',
            'currency_code', 'total_amount', 'status', 'updated_at',
        ]
        read_only_fields = fields


# =============================================================================
# Input serializers
# =============================================================================

class LineItemInputSerializer(serializers.Serializer):
    """
    One line item. Leave ``unit_price`` out to price the product in the
    document currency; pass ``id`` to update a stored line.
    """

    id = serializers.UUIDField(required=False)
    sku = serializers.CharField(max_length=8)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False, allow_null=True
    )
    fx_rate = serializers.DecimalField(max_digits=18, decimal_places=6, required=False, allow_null=True)

    def validate_fx_rate(self, value):
        if value is not None and value <= 0:
            raise serializers.ValidationError("Must be greater than zero")
        return value


class DocumentWriteSerializer(serializers.Serializer):
    customer = serializers.CharField(max_length=5, source='public_customer_id')
    issuing_entity = serializers.UUIDField(source='issuing_entity_id', required=False)
    payment_source = serializers.UUIDField(source='payment_source_id', required=False, allow_null=True)
    currency_code = CurrencyCodeField(required=False)
    issue_date = serializers.DateField(required=False)
    discount_percentage = serializers.DecimalField(**PERCENTAGE_FIELD_KWARGS)
    tax_percentage = serializers.DecimalField(**PERCENTAGE_FIELD_KWARGS)
    notes = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    line_items = LineItemInputSerializer(many=True, allow_empty=False)


class QuoteCreateSerializer(DocumentWriteSerializer):
    expiry_date = serializers.DateField(required=False)

    def validate(self, attrs):
        issue_date, expiry_date = attrs.get('issue_date'), attrs.get('expiry_date')
        if issue_date and expiry_date and expiry_date < issue_date:
            raise serializers.ValidationError({'expiry_date': 'Cannot be before the issue date'})
        return attrs


class QuoteUpdateSerializer(QuoteCreateSerializer):
    status = serializers.ChoiceField(choices=QuoteStatus.choices, required=False)


class InvoiceCreateSerializer(DocumentWriteSerializer):
    due_date = serializers.DateField(required=False)

    def validate(self, attrs):
        issue_date, due_date = attrs.get('issue_date'), attrs.get('due_date')
        if issue_date and due_date and due_date < issue_date:
            raise serializers.ValidationError({'due_date': 'Cannot be before the issue date'})
        return attrs


class InvoiceUpdateSerializer(InvoiceCreateSerializer):
    status = serializers.ChoiceField(choices=InvoiceStatus.choices, required=False)


class QuoteStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=QuoteStatus.choices)


class InvoiceStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=InvoiceStatus.choices)


class DocumentFilterSerializer(serializers.Serializer):
    """Query parameters for listing documents."""

    customer = serializers.CharField(max_length=5, required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate(self, attrs):
        date_from, date_to = attrs.get('date_from'), attrs.get('date_to')
        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError({'date_from': 'Must be on or before date_to'})
        return attrs


class QuoteFilterSerializer(DocumentFilterSerializer):
    status = serializers.ChoiceField(choices=QuoteStatus.choices, required=False)


class InvoiceFilterSerializer(DocumentFilterSerializer):
    status = serializers.ChoiceField(choices=InvoiceStatus.choices, required=False)


class TotalsLineSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))


class TotalsPreviewSerializer(serializers.Serializer):
    """Unsaved line items to run through the totals pipeline."""

    line_items = TotalsLineSerializer(many=True)
    discount_percentage = serializers.DecimalField(**PERCENTAGE_FIELD_KWARGS, default=Decimal('0'))
    tax_percentage = serializers.DecimalField(**PERCENTAGE_FIELD_KWARGS, default=Decimal('0'))


class TotalsResponseSerializer(serializers.Serializer):
    line_totals = serializers.ListField(child=serializers.DecimalField(max_digits=15, decimal_places=2))
    subtotal = serializers.DecimalField(max_digits=15, decimal_places=2)
    discount = serializers.DecimalField(max_digits=15, decimal_places=2)
    tax = serializers.DecimalField(max_digits=15, decimal_places=2)
    total = serializers.DecimalField(max_digits=15, decimal_places=2)
