from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'customers'

router = DefaultRouter()
router.register(r'', views.CustomerViewSet, basename='customer')

urlpatterns = [
    # Customer ViewSet routes
    # GET    /api/customers/                 - List customers (?search=&currency=)
    # POST   /api/customers/                 - Create customer
    # GET    /api/customers/{public_id}/     - Get customer
    # PUT    /api/customers/{public_id}/     - Update customer
    # PATCH  /api/customers/{public_id}/     - Partial update
    # DELETE /api/customers/{public_id}/     - Soft delete
    path('', include(router.urls)),
]
