from django.contrib import admin
from .models import Product, ProductPrice


class ProductPriceInline(admin.TabularInline):
    model = ProductPrice
    extra = 0


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['sku', 'name', 'unit', 'base_price', 'base_currency', 'status', 'deleted_at']
    list_filter = ['status', 'unit', 'base_currency', ('deleted_at', admin.EmptyFieldListFilter)]
    search_fields = ['sku', 'name', 'description']
    readonly_fields = ['sku', 'base_currency', 'created_at', 'updated_at']
    inlines = [ProductPriceInline]
