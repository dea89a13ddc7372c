from django.contrib import admin
from .models import AppSettings, IssuingEntity, PaymentSource


@admin.register(AppSettings)
class AppSettingsAdmin(admin.ModelAdmin):
    list_display = ['base_currency', 'default_tax_percentage', 'default_quote_expiry_days',
                    'default_invoice_payment_terms_days', 'updated_at']

    def has_add_permission(self, request):
        return not AppSettings.objects.exists()


class PaymentSourceInline(admin.TabularInline):
    model = PaymentSource
    extra = 0
    fields = ['name', 'currency_code', 'bank_name', 'iban', 'is_primary_for_entity']


@admin.register(IssuingEntity)
class IssuingEntityAdmin(admin.ModelAdmin):
    list_display = ['entity_name', 'registration_number', 'email', 'is_primary', 'updated_at']
    search_fields = ['entity_name', 'registration_number', 'email']
    inlines = [PaymentSourceInline]


@admin.register(PaymentSource)
class PaymentSourceAdmin(admin.ModelAdmin):
    list_display = ['name', 'issuing_entity', 'currency_code', 'bank_name', 'is_primary_for_entity']
    list_filter = ['currency_code', 'issuing_entity']
    search_fields = ['name', 'bank_name', 'iban', 'account_number']
