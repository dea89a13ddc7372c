from django.urls import path
from . import views

app_name = 'dashboard'

urlpatterns = [
    # KPI cards
    path('kpis/', views.kpis, name='kpis'),

    # Tables
    path('overdue-invoices/', views.overdue_invoices, name='overdue-invoices'),
    path('expiring-quotes/', views.expiring_quotes, name='expiring-quotes'),

    # Revenue chart
    path('revenue/', views.monthly_revenue, name='revenue'),

    # Activity feed
    path('recent/', views.recently_updated, name='recent'),

    # Everything at once
    path('summary/', views.summary, name='summary'),
]
