from .models import (
    SupplierProfileSerializer,
    SupplierSerializer,
    EsgScoresSerializer,
    FormSubmissionSerializer,
)

from .auth import CustomTokenObtainPairSerializer

__all__ = [
    'SupplierProfileSerializer',
    'SupplierSerializer',
    'EsgScoresSerializer',
    'FormSubmissionSerializer',
    'CustomTokenObtainPairSerializer',
]
