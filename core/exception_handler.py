"""
Exception handler for Django REST Framework.

Converts our error taxonomy, DRF's own exceptions and database failures
into consistent API responses.
"""
import logging

from django.db import DatabaseError
from rest_framework.views import exception_handler
from rest_framework.response import Response

from .exceptions import BaseAPIException, UpstreamFailure

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    Custom exception handler for DRF.

    Args:
        exc: The exception instance
        context: The context dictionary

    Returns:
        Response object with error details
    """
    if isinstance(exc, DatabaseError):
        view = context.get('view')
        view_name = view.__class__.__name__ if view else 'unknown view'
        logger.exception(f"Database failure in {view_name}")
        exc = UpstreamFailure()

    if isinstance(exc, BaseAPIException):
        return Response(exc.to_dict(), status=exc.status_code)

    # Let DRF handle other exceptions
    response = exception_handler(exc, context)

    if response is not None:
        data = response.data
        if isinstance(data, dict) and 'detail' in data:
            response.data = {
                'success': False,
                'error': str(data['detail']),
            }
        else:
            response.data = {
                'success': False,
                'error': 'Validation failed',
                'fields': data,
            }

    return response
