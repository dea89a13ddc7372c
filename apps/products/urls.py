from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'products'

router = DefaultRouter()
router.register(r'', views.ProductViewSet, basename='product')

urlpatterns = [
    # Product ViewSet routes
    # GET    /api/products/                     - List products (?search=&status=)
    # POST   /api/products/                     - Create product
    # GET    /api/products/next-sku/            - Preview an unused SKU
    # GET    /api/products/{sku}/               - Get product
    # PUT    /api/products/{sku}/               - Update product
    # PATCH  /api/products/{sku}/               - Partial update
    # DELETE /api/products/{sku}/               - Soft delete
    # GET    /api/products/{sku}/price/         - Price in ?currency=
    path('', include(router.urls)),
]
