from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'invoicing'

router = DefaultRouter()
router.register(r'quotes', views.QuoteViewSet, basename='quote')
router.register(r'invoices', views.InvoiceViewSet, basename='invoice')

urlpatterns = [
    # Totals preview
    path('totals/', views.preview_totals, name='preview-totals'),

    # Quote ViewSet routes
    # GET    /api/invoicing/quotes/                 - List quotes (?status=&customer=&date_from=&date_to=)
    # POST   /api/invoicing/quotes/                 - Create quote
    # GET    /api/invoicing/quotes/{id}/            - Get quote
    # PUT    /api/invoicing/quotes/{id}/            - Update quote
    # PATCH  /api/invoicing/quotes/{id}/            - Partial update
    # DELETE /api/invoicing/quotes/{id}/            - Soft delete
    # POST   /api/invoicing/quotes/{id}/status/     - Change status
    # POST   /api/invoicing/quotes/{id}/convert/    - Convert to invoice
    # GET    /api/invoicing/quotes/{id}/pdf/        - PDF

    # Invoice ViewSet routes
    # GET    /api/invoicing/invoices/               - List invoices (same filters)
    # POST   /api/invoicing/invoices/               - Create invoice
    # GET    /api/invoicing/invoices/{id}/          - Get invoice
    # PUT    /api/invoicing/invoices/{id}/          - Update invoice
    # PATCH  /api/invoicing/invoices/{id}/          - Partial update
    # DELETE /api/invoicing/invoices/{id}/          - Soft delete
    # POST   /api/invoicing/invoices/{id}/status/   - Change status
    # GET    /api/invoicing/invoices/{id}/pdf/      - PDF
    path('', include(router.urls)),
]
