"""
Submissions API Client

HTTP client used by the dashboard for everything it does with contact
submissions: listing, triage, notes, deletion and CSV export.

Usage:
    api = SubmissionsAPI('https://api.panchroma.ca')
    api.login('admin', 'secret')
    page = api.list_submissions(query='website', status='new')
    api.bulk_delete([row['id'] for row in page['results'][:2]])
"""

import logging
from typing import Any, Dict, Iterable, Optional

import requests

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Non-2xx response or transport failure talking to the API."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}

    @property
    def fields(self) -> Dict[str, Any]:
        return self.payload.get('fields') or {}


class SubmissionsAPI:
    """
    Thin wrapper around the submissions REST endpoints.

    Every method raises APIError on failure; nothing is retried.
    """

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 10,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.token = token

    @property
    def token(self) -> Optional[str]:
        return self._token

    @token.setter
    def token(self, value: Optional[str]):
        self._token = value
        if value:
            self.session.headers['Authorization'] = f'Bearer {value}'
        else:
            self.session.headers.pop('Authorization', None)

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        kwargs.setdefault('timeout', self.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.exceptions.Timeout as e:
            raise APIError(f"Request to {path} timed out") from e
        except requests.exceptions.RequestException as e:
            raise APIError(f"Could not reach the API: {e}") from e

        if not response.ok:
            try:
                payload = response.json()
            except ValueError:
                payload = {}
            message = payload.get('error') or payload.get('detail') or f"HTTP {response.status_code}"
            logger.warning(f"{method} {path} failed with {response.status_code}: {message}")
            raise APIError(message, status_code=response.status_code, payload=payload)

        return response

    # Auth

    def login(self, username: str, password: str) -> str:
        response = self._request('POST', '/api/auth/token/', json={
            'username': username,
            'password': password,
        })
        self.token = response.json()['access']
        return self.token

    # Public contact form

    def submit_contact(self, data: Dict[str, str]) -> Dict[str, Any]:
        return self._request('POST', '/api/contact/', json=data).json()

    # Submissions

    def list_submissions(self, query: str = '', status: Optional[str] = None, page: int = 1,
             page_size: Optional[int] = None) -> Dict[str, Any]:
        params = {'page': page}
        if query:
            params['query'] = query
        if status and status != 'all':
            params['status'] = status
        if page_size:
            params['page_size'] = page_size
        return self._request('GET', '/api/submissions/', params=params).json()

    def get(self, submission_id: str) -> Dict[str, Any]:
        return self._request('GET', f'/api/submissions/{submission_id}/').json()

    def update_status(self, submission_id: str, status: str) -> Dict[str, Any]:
        return self._request(
            'PATCH', f'/api/submissions/{submission_id}/status/', json={'status': status}
        ).json()

    def update_notes(self, submission_id: str, notes: str) -> Dict[str, Any]:
        return self._request(
            'PATCH', f'/api/submissions/{submission_id}/notes/', json={'notes': notes}
        ).json()

    def delete(self, submission_id: str) -> None:
        self._request('DELETE', f'/api/submissions/{submission_id}/')

    def bulk_delete(self, ids: Iterable[str]) -> int:
        """Delete the given submissions; returns how many the server removed."""
        response = self._request('POST', '/api/submissions/bulk-delete/', json={'ids': list(ids)})
        return response.json()['deletedCount']

    def export_csv(self, ids: Optional[Iterable[str]] = None, query: str = '',
                   status: Optional[str] = None) -> str:
        """
        CSV text for the given ids, or for everything matching the filter
        when ids is None.
        """
        if ids is not None:
            params = {'ids': ','.join(str(i) for i in ids)}
        else:
            params = {}
            if query:
                params['query'] = query
            if status and status != 'all':
                params['status'] = status
        return self._request('GET', '/api/submissions/export/', params=params).text

    def stats(self) -> Dict[str, Any]:
        return self._request('GET', '/api/submissions/stats/').json()
