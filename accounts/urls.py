from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView

from .views import CustomTokenObtainPairView, SupplierViewSet

# Create a router for ViewSets
router = DefaultRouter()
router.register(r'suppliers', SupplierViewSet, basename='supplier')  # /api/suppliers/

urlpatterns = [
    # Auth endpoints
    path('token/', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # Include router URLs
    path('', include(router.urls)),
]
