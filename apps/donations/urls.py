from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'donations'

router = DefaultRouter()
router.register(r'', views.DonationRequestViewSet, basename='donation')

urlpatterns = [
    # Donation request routes
    # GET  /api/donations/                 - List requests (own, or all for staff)
    # POST /api/donations/                 - Submit a request
    # GET  /api/donations/{id}/            - Request details
    # GET  /api/donations/queue/           - Pending queue (staff)
    # POST /api/donations/{id}/approve/    - Approve (staff)
    # POST /api/donations/{id}/deny/       - Deny with reason (staff)
    # POST /api/donations/{id}/verify/     - Verify with proof (staff)
    # GET  /api/donations/{id}/history/    - Audit trail
    path('', include(router.urls)),
]
