from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'marketplace'

router = DefaultRouter()
router.register(r'allocations', views.MarketplaceAllocationViewSet, basename='allocation')

urlpatterns = [
    # Allocation routes
    # GET    /api/marketplace/allocations/              - List allocations
    # POST   /api/marketplace/allocations/              - Post stock to a machine (staff)
    # GET    /api/marketplace/allocations/{id}/         - Allocation details
    # PUT    /api/marketplace/allocations/{id}/         - Edit allocation (staff)
    # PATCH  /api/marketplace/allocations/{id}/         - Partial edit (staff)
    # DELETE /api/marketplace/allocations/{id}/         - Delete allocation (staff)
    # POST   /api/marketplace/allocations/{id}/claim/   - Record a claim
    # POST   /api/marketplace/allocations/{id}/view/    - Record a view
    path('', include(router.urls)),
]
