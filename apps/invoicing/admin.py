from django.contrib import admin
from .models import Invoice, InvoiceLineItem, Quote, QuoteLineItem


class QuoteLineItemInline(admin.TabularInline):
    model = QuoteLineItem
    extra = 0
    raw_id_fields = ['product']


class InvoiceLineItemInline(admin.TabularInline):
    model = InvoiceLineItem
    extra = 0
    raw_id_fields = ['product']


@admin.register(Quote)
class QuoteAdmin(admin.ModelAdmin):
    list_display = ['quote_number', 'customer', 'issue_date', 'expiry_date', 'currency_code',
                    'total_amount', 'status', 'deleted_at']
    list_filter = ['status', 'currency_code', ('deleted_at', admin.EmptyFieldListFilter)]
    search_fields = ['quote_number', 'customer__company_contact_name', 'customer__public_customer_id']
    readonly_fields = ['quote_number', 'subtotal_amount', 'discount_amount', 'tax_amount',
                       'total_amount', 'created_at', 'updated_at']
    raw_id_fields = ['customer', 'converted_invoice']
    date_hierarchy = 'issue_date'
    inlines = [QuoteLineItemInline]


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ['invoice_number', 'customer', 'issue_date', 'due_date', 'currency_code',
                    'total_amount', 'status', 'deleted_at']
    list_filter = ['status', 'currency_code', ('deleted_at', admin.EmptyFieldListFilter)]
    search_fields = ['invoice_number', 'customer__company_contact_name', 'customer__public_customer_id']
    readonly_fields = ['invoice_number', 'subtotal_amount', 'discount_amount', 'tax_amount',
                       'total_amount', 'created_at', 'updated_at']
    raw_id_fields = ['customer', 'source_quote']
    date_hierarchy = 'issue_date'
    inlines = [InvoiceLineItemInline]
