from django.contrib import admin
from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['public_customer_id', 'company_contact_name', 'email', 'preferred_currency',
                    'deleted_at', 'updated_at']
    list_filter = ['preferred_currency', ('deleted_at', admin.EmptyFieldListFilter)]
    search_fields = ['public_customer_id', 'company_contact_name', 'email']
    readonly_fields = ['public_customer_id', 'created_at', 'updated_at']
