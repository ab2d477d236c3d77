"""
Row selection for the submissions table.

Tracks which visible rows are checked and derives the state of the
header checkbox and the bulk-action bar from it.
"""

from typing import Dict, Iterable, List

UNSELECTED = 'unselected'
PARTIAL = 'partial'
FULL = 'full'


class SelectionState:
    """
    Selection over the rows currently shown in the table.

    Rows are submission dicts with an 'id' key. Replacing the rows (new
    search or status filter) keeps the existing selection; "select all"
    only ever applies to the rows visible at the time it is toggled.
    """

    def __init__(self, rows: Iterable[Dict] = ()):
        self._rows: List[Dict] = []
        self._selected = set()
        self.set_rows(rows)

    # Rows

    @property
    def rows(self) -> List[Dict]:
        """Visible rows with the transient 'selected' flag applied."""
        return [dict(row, selected=row['id'] in self._selected) for row in self._rows]

    @property
    def visible_ids(self) -> List[str]:
        return [row['id'] for row in self._rows]

    def set_rows(self, rows: Iterable[Dict]):
        self._rows = [dict(row) for row in rows]
        for row in self._rows:
            row.pop('selected', None)

    def remove_rows(self, ids: Iterable[str]):
        """Drop rows (and their selection), e.g. after they were deleted."""
        ids = set(ids)
        self._rows = [row for row in self._rows if row['id'] not in ids]
        self._selected -= ids

    # Selection

    def is_selected(self, row_id: str) -> bool:
        return row_id in self._selected

    @property
    def selected_ids(self) -> List[str]:
        """Selected ids, visible rows first in table order."""
        visible = [row_id for row_id in self.visible_ids if row_id in self._selected]
        hidden = sorted(self._selected.difference(visible))
        return visible + hidden

    @property
    def count(self) -> int:
        return len(self._selected)

    @property
    def mode(self) -> str:
        if not self._selected:
            return UNSELECTED
        visible = self.visible_ids
        if visible and all(row_id in self._selected for row_id in visible):
            return FULL
        return PARTIAL

    @property
    def header_checked(self) -> bool:
        return self.mode == FULL

    def toggle(self, row_id: str):
        if row_id not in self.visible_ids:
            raise KeyError(f"Row {row_id} is not visible")
        if row_id in self._selected:
            self._selected.discard(row_id)
        else:
            self._selected.add(row_id)

    def toggle_all(self):
        """Header checkbox: select every visible row, or clear if they all are."""
        if self.mode == FULL:
            self._selected.clear()
        else:
            self._selected.update(self.visible_ids)

    def cancel(self):
        self._selected.clear()

    # Bulk-action bar

    @property
    def action_bar_visible(self) -> bool:
        return self.count > 0

    @property
    def action_bar_label(self) -> str:
        n = self.count
        return f"{n} item{'s' if n != 1 else ''} selected"
