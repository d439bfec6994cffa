import logging

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import ReadOnlyModelViewSet

from ..models import CustomUser, RoleChoices
from ..permissions import IsPlatformAdmin, IsSupplierOwnerOrAdmin
from ..serializers import EsgScoresSerializer, FormSubmissionSerializer, SupplierSerializer
from ..services import get_supplier, update_esg_scores, update_form_submission
from .mixins import ErrorHandlingMixin

logger = logging.getLogger(__name__)


class SupplierViewSet(ReadOnlyModelViewSet, ErrorHandlingMixin):
    """
    Supplier accounts with their profiles.

    Admins list all suppliers and maintain their score summary; a supplier
    may read its own entry and flag its own forms as submitted.
    """
    queryset = CustomUser.objects.filter(role=RoleChoices.SUPPLIER).select_related('supplier_profile').order_by('id')
    serializer_class = SupplierSerializer

    def get_permissions(self):
        if self.action in ('list', 'esg_scores'):
            return [IsAuthenticated(), IsPlatformAdmin()]
        return [IsAuthenticated(), IsSupplierOwnerOrAdmin()]

    def get_object(self):
        try:
            supplier = get_supplier(self.kwargs['pk'])
        except (CustomUser.DoesNotExist, ValueError):
            raise NotFound("Supplier not found")
        self.check_object_permissions(self.request, supplier)
        return supplier

    @action(detail=True, methods=['patch'], url_path='esg-scores')
    def esg_scores(self, request, pk=None):
        """Update the supplier's ESG score summary. Returns the new scores."""
        supplier = self.get_object()
        serializer = EsgScoresSerializer(data=request.data)
        if not serializer.is_valid():
            return self.handle_validation_error(serializer.errors)

        try:
            profile = update_esg_scores(supplier, **serializer.validated_data)
        except ValueError as e:
            return self.handle_validation_error(e)

        logger.info(f"ESG scores of supplier {supplier.email} updated by {request.user.email}")
        return Response(profile.esg_scores, status=status.HTTP_200_OK)

    @action(detail=True, methods=['patch'], url_path='form-submission')
    def form_submission(self, request, pk=None):
        """Mark one of the supplier's category forms as submitted or not."""
        supplier = self.get_object()
        serializer = FormSubmissionSerializer(data=request.data)
        if not serializer.is_valid():
            return self.handle_validation_error(serializer.errors)

        try:
            profile = update_form_submission(
                supplier,
                serializer.validated_data['formType'],
                serializer.validated_data['submitted'],
            )
        except ValueError as e:
            return self.handle_validation_error(e)

        logger.info(
            f"Form '{serializer.validated_data['formType']}' of supplier {supplier.email} "
            f"marked submitted={serializer.validated_data['submitted']}"
        )
        return Response(profile.form_submissions, status=status.HTTP_200_OK)
