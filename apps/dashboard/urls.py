from django.urls import path
from . import views

app_name = 'dashboard'

urlpatterns = [
    # NGO staff
    path('ngo/', views.ngo_overview, name='ngo-overview'),
    path('inventory/', views.inventory_summary, name='inventory-summary'),

    # Any authenticated user
    path('donor/', views.donor_summary, name='donor-summary'),
    path('marketplace/', views.marketplace_summary, name='marketplace-summary'),
]
