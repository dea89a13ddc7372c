from django.contrib import admin
from .models import ExchangeRate


@admin.register(ExchangeRate)
class ExchangeRateAdmin(admin.ModelAdmin):
    list_display = ['from_currency', 'to_currency', 'rate', 'note', 'created_by', 'created_at']
    list_filter = ['from_currency', 'to_currency']
    readonly_fields = ['created_at']
    ordering = ['-created_at']
