"""
API error taxonomy.

Every error the API reports on purpose is one of these. The exception
handler in core.exception_handler turns them into JSON responses.
"""

from typing import Optional, Dict, Any


class BaseAPIException(Exception):
    """
    Base class for errors that map to an HTTP response.
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
        extra_data: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.detail = detail or message
        if status_code is not None:
            self.status_code = status_code
        self.error_code = self.__class__.__name__
        self.extra_data = extra_data or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'success': False,
            'error': self.message,
            'detail': self.detail,
            'error_code': self.error_code,
        }
        if self.extra_data:
            result.update(self.extra_data)
        return result


class ValidationError(BaseAPIException):
    """Missing or invalid input field (400, or 422 for state changes)."""

    status_code = 400

    def __init__(self, message: str, detail: Optional[str] = None,
                 fields: Optional[Dict[str, Any]] = None, status_code: Optional[int] = None):
        extra_data = {'fields': fields} if fields else {}
        super().__init__(message, detail, status_code, extra_data)


class NotFound(BaseAPIException):
    """Requested record does not exist (404)."""

    status_code = 404

    def __init__(self, message: str = 'Not found', resource_type: Optional[str] = None):
        extra_data = {'resource_type': resource_type} if resource_type else {}
        super().__init__(message, None, None, extra_data)


class UpstreamFailure(BaseAPIException):
    """The database or another required backend is unavailable (500)."""

    status_code = 500

    def __init__(self, message: str = 'Internal server error'):
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {'success': False, 'error': self.message}


class EnrichmentFailure(Exception):
    """
    Geolocation lookup failed.

    Never reaches a client: contact.enrichment absorbs it and stores the
    Unknown sentinel instead.
    """
