"""
API views for reading and writing ESG records.

The views only check request shape and permissions; merging, scoring and
the status lifecycle live in ``assessments.services.records``.
"""

import logging

import django_filters
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsPlatformAdmin, IsSupplier
from ..exceptions import ESGRecordError
from ..models import ESGRecord
from ..sections import COMPANY_INFO_CATEGORY
from ..serializers import (
    CompanyInfoPatchSerializer, CompanyInfoRatingSerializer, ESGPatchSerializer,
    ESGRecordListSerializer, ESGRecordSerializer, PointsOverrideSerializer, ReviewSerializer,
)
from ..services.records import (
    apply_patch, get_record_for_user, override_section_points, review_record, submit_record,
)
from .mixins import ESGErrorHandlingMixin

logger = logging.getLogger(__name__)


class ESGUpdateView(ESGErrorHandlingMixin, APIView):
    """
    POST /api/esg/update/

    Body: ``{"category": ..., "section": ..., "data": {...}}``. Merges the data
    into the caller's record, creating the record on first use.
    """
    permission_classes = [IsAuthenticated, IsSupplier]

    def post(self, request):
        serializer = ESGPatchSerializer(data=request.data)
        if not serializer.is_valid():
            return self.handle_validation_error(serializer.errors)

        try:
            record = apply_patch(request.user, **serializer.validated_data)
        except ESGRecordError as e:
            return self.handle_esg_error(e)

        return Response({
            'data': ESGRecordSerializer(record).data,
            'message': 'ESG data updated successfully',
        }, status=status.HTTP_200_OK)


class ESGDataView(ESGErrorHandlingMixin, APIView):
    """GET /api/esg/data/ - the caller's own record."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            record = get_record_for_user(request.user)
        except ESGRecordError as e:
            return self.handle_esg_error(e)
        return Response({'data': ESGRecordSerializer(record).data})


class ESGSubmitView(ESGErrorHandlingMixin, APIView):
    permission_classes = [IsAuthenticated, IsSupplier]

    def post(self, request):
        try:
            record = submit_record(request.user)
        except ESGRecordError as e:
            return self.handle_esg_error(e)

        return Response({
            'data': ESGRecordSerializer(record).data,
            'message': 'ESG data submitted successfully',
        })


class ESGReviewView(ESGErrorHandlingMixin, APIView):
    """POST /api/esg/review/<id>/ - admins set the review outcome."""
    permission_classes = [IsAuthenticated, IsPlatformAdmin]

    def post(self, request, record_id):
        serializer = ReviewSerializer(data=request.data)
        if not serializer.is_valid():
            return self.handle_validation_error(serializer.errors)

        try:
            record = review_record(
                record_id,
                serializer.validated_data['status'],
                serializer.validated_data['comments'],
                reviewer=request.user,
            )
        except ESGRecordError as e:
            return self.handle_esg_error(e)

        return Response({
            'data': ESGRecordSerializer(record).data,
            'message': 'ESG data reviewed successfully',
        })


class ESGPointsUpdateView(ESGErrorHandlingMixin, APIView):
    """POST /api/esg/update-points/ - manual points for one sub-section."""
    permission_classes = [IsAuthenticated, IsPlatformAdmin]

    def post(self, request):
        serializer = PointsOverrideSerializer(data=request.data)
        if not serializer.is_valid():
            return self.handle_validation_error(serializer.errors)

        data = serializer.validated_data
        try:
            record = override_section_points(
                data['esgDataId'], data['category'], data['section'], data['points'],
                remarks=data['remarks'],
            )
        except ESGRecordError as e:
            return self.handle_esg_error(e)

        logger.info(f"Admin {request.user.email} overrode points on ESG record {record.pk}")
        return Response({
            'data': ESGRecordSerializer(record).data,
            'message': 'Points updated successfully',
        })


class ESGRecordFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=ESGRecord.Status.choices)
    user_id = django_filters.NumberFilter(field_name='user', lookup_expr='exact')
    updated_after = django_filters.IsoDateTimeFilter(field_name='last_updated', lookup_expr='gte')

    class Meta:
        model = ESGRecord
        fields = ['status']


class ESGRecordListView(generics.ListAPIView):
    """GET /api/esg/all/ - every record, newest first, for admins."""
    permission_classes = [IsAuthenticated, IsPlatformAdmin]
    serializer_class = ESGRecordListSerializer
    queryset = ESGRecord.objects.select_related('user').order_by('-last_updated')
    filter_backends = [DjangoFilterBackend]
    filterset_class = ESGRecordFilter


class CompanyInfoView(ESGErrorHandlingMixin, APIView):
    """
    GET /api/company-info/ returns the caller's company information.
    POST /api/company-info/ merges ``{"data": {...}}`` into it.
    """
    permission_classes = [IsAuthenticated, IsSupplier]

    def get(self, request):
        try:
            record = get_record_for_user(request.user)
        except ESGRecordError as e:
            return self.handle_esg_error(e)

        if not record.company_info:
            return Response({'error': 'Company information not found'}, status=status.HTTP_404_NOT_FOUND)
        return Response({'data': {'companyInfo': record.company_info}})

    def post(self, request):
        serializer = CompanyInfoPatchSerializer(data=request.data)
        if not serializer.is_valid():
            return self.handle_validation_error(serializer.errors)

        try:
            record = apply_patch(request.user, COMPANY_INFO_CATEGORY, None, serializer.validated_data['data'])
        except ESGRecordError as e:
            return self.handle_esg_error(e)

        return Response({
            'data': {'companyInfo': record.company_info},
            'message': 'Company information updated successfully',
        })


class CompanyInfoRatingView(ESGErrorHandlingMixin, APIView):
    """POST /api/company-info/rating/ - admins rate a record's company information."""
    permission_classes = [IsAuthenticated, IsPlatformAdmin]

    def post(self, request):
        serializer = CompanyInfoRatingSerializer(data=request.data)
        if not serializer.is_valid():
            return self.handle_validation_error(serializer.errors)

        data = serializer.validated_data
        try:
            record = override_section_points(
                data['esgDataId'], COMPANY_INFO_CATEGORY, None, data['points'], remarks=data['remarks'],
            )
        except ESGRecordError as e:
            return self.handle_esg_error(e)

        return Response({
            'data': {'companyInfo': record.company_info},
            'message': 'Company information rating updated successfully',
        })
