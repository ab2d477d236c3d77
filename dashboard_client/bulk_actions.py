"""
Bulk actions for the submissions table.

Drives "Export Selected" and "Delete Selected" against the API for the
rows picked in a SelectionState.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from .api import APIError, SubmissionsAPI
from .selection import SelectionState

logger = logging.getLogger(__name__)

EXPORT = 'export'
DELETE = 'delete'


def _plural(n: int) -> str:
    return f"{n} submission{'s' if n != 1 else ''}"


class BulkActionController:
    """
    Runs bulk actions for one table view.

    Args:
        api: SubmissionsAPI used for export and delete
        selection: selection state of the table
        confirm: blocking prompt, returns True to proceed
        notify: callable(level, message) showing a toast; level is
            'success' or 'error'
        download: callable(filename, content) saving the exported CSV

    An action is disabled while a request for it is in flight; calling it
    again in that window does nothing.
    """

    def __init__(self, api: SubmissionsAPI, selection: SelectionState,
                 confirm: Callable[[str], bool],
                 notify: Callable[[str, str], None],
                 download: Callable[[str, str], None]):
        self.api = api
        self.selection = selection
        self.confirm = confirm
        self.notify = notify
        self.download = download
        self._in_flight = set()

    def is_busy(self, action: Optional[str] = None) -> bool:
        if action is None:
            return bool(self._in_flight)
        return action in self._in_flight

    def is_enabled(self, action: str) -> bool:
        return self.selection.action_bar_visible and action not in self._in_flight

    def load(self, query: str = '', status: Optional[str] = None, page: int = 1) -> dict:
        """Fetch a page of submissions and show it. Selection is kept."""
        data = self.api.list_submissions(query=query, status=status, page=page)
        self.selection.set_rows(data.get('results', []))
        return data

    def export_selected(self) -> bool:
        """Export the selected rows as CSV. Selection is left unchanged."""
        if not self.is_enabled(EXPORT):
            return False

        ids = self.selection.selected_ids
        self._in_flight.add(EXPORT)
        try:
            content = self.api.export_csv(ids=ids)
        except APIError as e:
            logger.warning(f"Export of {len(ids)} submissions failed: {e}")
            self.notify('error', 'Failed to export submissions')
            return False
        finally:
            self._in_flight.discard(EXPORT)

        filename = f"selected-submissions-{datetime.now().strftime('%Y%m%d-%H%M%S')}.csv"
        self.download(filename, content)
        self.notify('success', f"Exported {_plural(len(ids))}")
        return True

    def delete_selected(self) -> Optional[int]:
        """
        Delete the selected rows after confirmation.

        Returns the server's deleted count, or None when nothing was
        deleted (disabled, cancelled at the prompt, or the request failed).
        On failure the selection and rows are left as they were.
        """
        if not self.is_enabled(DELETE):
            return None

        ids = self.selection.selected_ids
        if not self.confirm(f"Are you sure you want to delete {_plural(len(ids))}?"):
            return None

        self._in_flight.add(DELETE)
        try:
            deleted_count = self.api.bulk_delete(ids)
        except APIError as e:
            logger.warning(f"Bulk delete of {len(ids)} submissions failed: {e}")
            self.notify('error', f"Failed to delete submissions: {e.message}")
            return None
        finally:
            self._in_flight.discard(DELETE)

        self.selection.remove_rows(ids)
        self.selection.cancel()
        self.notify('success', f"Successfully deleted {_plural(deleted_count)}")
        return deleted_count

    def cancel(self):
        self.selection.cancel()
