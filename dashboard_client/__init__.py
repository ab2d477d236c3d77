"""
Dashboard Client

Client-side logic of the submissions dashboard: the API client, table
selection, bulk actions and the contact form validation state.
"""
from .api import APIError, SubmissionsAPI
from .bulk_actions import BulkActionController
from .form_state import ContactFormState
from .selection import FULL, PARTIAL, UNSELECTED, SelectionState

__all__ = [
    'APIError',
    'SubmissionsAPI',
    'BulkActionController',
    'ContactFormState',
    'SelectionState',
    'UNSELECTED',
    'PARTIAL',
    'FULL',
]
