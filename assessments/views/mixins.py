import logging

from rest_framework import status
from rest_framework.response import Response

logger = logging.getLogger(__name__)


class ESGErrorHandlingMixin:
    """Turn ESG service errors and serializer errors into error responses."""

    def handle_esg_error(self, error):
        if error.status_code >= 409:
            logger.warning(f"{type(error).__name__}: {error.message}")
        return Response(error.as_response_data(), status=error.status_code)

    def handle_validation_error(self, errors):
        logger.warning(f"Rejected ESG request: {errors}")
        return Response({'error': errors}, status=status.HTTP_400_BAD_REQUEST)
