"""
API views for ESG dashboard data.
"""

import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsPlatformAdmin
from ..exceptions import ESGRecordError
from ..services.dashboard import build_admin_summary
from ..services.records import get_dashboard

logger = logging.getLogger(__name__)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def supplier_dashboard_api(request):
    """
    API endpoint for the supplier dashboard: scores, completion per category
    and the most recent activity on the caller's ESG record.
    """
    try:
        return Response({'data': get_dashboard(request.user)})
    except ESGRecordError as e:
        return Response(e.as_response_data(), status=e.status_code)
    except Exception as e:
        logger.error(f"Error generating dashboard data for user {request.user.pk}: {e}", exc_info=True)
        return Response({
            'error': 'An error occurred while generating dashboard data',
            'message': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPlatformAdmin])
def admin_dashboard_api(request):
    """
    API endpoint for the admin dashboard summary: user counts by role,
    pending approvals, submission trend, category distribution and recent
    activity across all suppliers.
    """
    try:
        return Response({'data': build_admin_summary()})
    except Exception as e:
        logger.error(f"Error generating admin dashboard summary: {e}", exc_info=True)
        return Response({
            'error': 'An error occurred while generating dashboard summary',
            'message': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
