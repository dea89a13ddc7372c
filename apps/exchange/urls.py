from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'exchange'

router = DefaultRouter()
router.register(r'overrides', views.ExchangeRateOverrideViewSet, basename='override')

urlpatterns = [
    # GET    /api/fx/?base=USD&target=GBP             - Rate lookup
    # GET    /api/fx/convert/?base=&target=&amount=   - Convert an amount
    path('', views.exchange_rate, name='rate'),
    path('convert/', views.convert, name='convert'),

    # Override ViewSet routes
    # GET    /api/fx/overrides/        - List overrides
    # POST   /api/fx/overrides/        - Create override
    # GET    /api/fx/overrides/{id}/   - Get override
    # DELETE /api/fx/overrides/{id}/   - Delete override
    path('', include(router.urls)),
]
