from .auth import CustomTokenObtainPairView
from .suppliers import SupplierViewSet

__all__ = [
    'CustomTokenObtainPairView',
    'SupplierViewSet',
]
