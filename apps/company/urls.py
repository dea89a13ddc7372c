from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'company'

router = DefaultRouter()
router.register(r'entities', views.IssuingEntityViewSet, basename='entity')
router.register(r'payment-sources', views.PaymentSourceViewSet, basename='payment-source')

urlpatterns = [
    # GET/PATCH /api/settings/                    - App settings singleton
    path('', views.app_settings, name='app-settings'),

    # Issuing entity routes
    # GET    /api/settings/entities/                    - List entities
    # POST   /api/settings/entities/                    - Create entity
    # GET    /api/settings/entities/{id}/               - Get entity
    # PATCH  /api/settings/entities/{id}/               - Update entity
    # DELETE /api/settings/entities/{id}/               - Delete entity
    # GET    /api/settings/entities/{id}/payment-sources/ - Entity's sources

    # Payment source routes
    # GET    /api/settings/payment-sources/?entity=     - List sources
    # POST   /api/settings/payment-sources/             - Create source
    # GET    /api/settings/payment-sources/{id}/        - Get source
    # PATCH  /api/settings/payment-sources/{id}/        - Update source
    # DELETE /api/settings/payment-sources/{id}/        - Delete source
    path('', include(router.urls)),
]
