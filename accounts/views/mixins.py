from rest_framework import status
from rest_framework.response import Response


class ErrorHandlingMixin:
    """Mixin for common error handling patterns"""

    def handle_validation_error(self, error):
        return Response(
            {"error": error if isinstance(error, dict) else str(error)},
            status=status.HTTP_400_BAD_REQUEST
        )
