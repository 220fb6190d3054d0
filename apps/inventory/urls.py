from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'inventory'

router = DefaultRouter()
router.register(r'items', views.WarehouseStockItemViewSet, basename='stock-item')

urlpatterns = [
    # Stock item routes (NGO staff)
    # GET  /api/inventory/items/                    - List stock items
    # GET  /api/inventory/items/{id}/               - Stock item details
    # POST /api/inventory/items/{id}/distribute/    - Direct distribution
    # GET  /api/inventory/items/{id}/movements/     - Movement ledger
    # GET  /api/inventory/items/{id}/consistency/   - Reconciliation check
    path('', include(router.urls)),
]
