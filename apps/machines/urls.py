from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'machines'

router = DefaultRouter()
router.register(r'', views.MachineViewSet, basename='machine')

urlpatterns = [
    # GET /api/machines/        - List machines
    # GET /api/machines/{id}/   - Machine details
    path('', include(router.urls)),
]
