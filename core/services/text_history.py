"""Most-recently-used history of saved annotation texts.

The history never stores the picker placeholder; `filtered` synthesizes it at
position 0 of every displayed list.
"""

from __future__ import annotations

from core.models import HISTORY_PLACEHOLDER, HistoryPlaceholder

DEFAULT_HISTORY_LIMIT = 200


class TextHistory:
    """Bounded, duplicate-free list of texts, most recent first."""

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self._limit = max(1, int(limit))
        self._items: list[str] = []

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def items(self) -> list[str]:
        """Copy of the stored texts, most recent first."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def insert_front(self, text: str) -> None:
        """Move `text` to the front, dropping the oldest entries over the limit."""
        if text in self._items:
            self._items.remove(text)
        self._items.insert(0, text)
        del self._items[self._limit :]

    def filtered(self, query: str = "") -> list[str | HistoryPlaceholder]:
        """Return the placeholder followed by entries containing `query`.

        Matching is case-insensitive and keeps history order.
        """
        result: list[str | HistoryPlaceholder] = [HISTORY_PLACEHOLDER]
        if not query:
            result.extend(self._items)
            return result
        needle = query.lower()
        result.extend(t for t in self._items if needle in t.lower())
        return result
