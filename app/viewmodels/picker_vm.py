"""ViewModel for the "prior text" picker.

The picker always lists the history placeholder first and resets its
selection to it whenever the list is rebuilt. Only a change of the selected
value counts as a pick, so a user must move off the placeholder explicitly
before any text reaches the editor.
"""

from __future__ import annotations

from app.viewmodels.session_vm import PhotoSessionVM
from core.models import HISTORY_PLACEHOLDER, HistoryPlaceholder
from core.services.interfaces import EVENT_HISTORY_CHANGED, SessionEvent

PickerItem = str | HistoryPlaceholder


class HistoryPickerVM:
    """Filter and select previously saved annotation texts."""

    def __init__(self, session: PhotoSessionVM) -> None:
        self._session = session
        self.filter_text = ""
        self.items: list[PickerItem] = []
        self.selected: PickerItem = HISTORY_PLACEHOLDER
        self._rebuild()
        session.subscribe(self._on_session_event)

    def _on_session_event(self, event: SessionEvent) -> None:
        if event.kind == EVENT_HISTORY_CHANGED:
            self._rebuild()

    def _rebuild(self) -> None:
        self.items = self._session.history.filtered(self.filter_text)
        self.selected = HISTORY_PLACEHOLDER

    def set_filter(self, text: str) -> None:
        """Apply a new filter; the selection returns to the placeholder."""
        self.filter_text = text
        self._rebuild()

    def select(self, item: PickerItem) -> bool:
        """Select `item` from `items`.

        Returns True when the pick copied a history text into the draft.
        Re-selecting the current value or choosing the placeholder does
        nothing.
        """
        if item is not HISTORY_PLACEHOLDER and item not in self.items:
            raise ValueError(f"Not in picker list: {item!r}")
        if item == self.selected:
            return False
        self.selected = item
        if item is HISTORY_PLACEHOLDER:
            return False
        if item == self._session.draft_text:
            return False
        self._session.edit_draft(item)
        return True

    def select_index(self, row: int) -> bool:
        """Select by position in `items` (row 0 is the placeholder)."""
        return self.select(self.items[row])
