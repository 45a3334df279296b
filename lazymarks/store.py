"""Bookmark data model: document identity -> ascending line numbers.

The store is the single source of truth once loaded. Sets are immutable
tuples and every mutation installs a fully computed replacement.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .config import PersistenceAdapter
from .signals import ChangeSignal

BookmarkSet = tuple[int, ...]

EMPTY: BookmarkSet = ()


class BookmarkStore:
    """Per-document bookmark sets with write-through persistence.

    ``changed`` fires after ``replace`` and ``clear``; ``load_all`` is silent.
    """

    def __init__(self, persistence: PersistenceAdapter | None = None) -> None:
        self._persistence = persistence
        self._sets: dict[str, BookmarkSet] = {}
        self.changed = ChangeSignal()

    def get(self, doc_id: str) -> BookmarkSet:
        return self._sets.get(doc_id, EMPTY)

    def doc_ids(self) -> list[str]:
        return sorted(self._sets)

    def snapshot(self) -> dict[str, list[int]]:
        return {doc_id: list(lines) for doc_id, lines in self._sets.items()}

    def replace(self, doc_id: str, lines: Iterable[int]) -> BookmarkSet:
        """Install ``lines`` sorted ascending and deduplicated, then persist."""
        bookmark_set = tuple(sorted(set(lines)))
        self._sets[doc_id] = bookmark_set
        self.flush()
        self.changed.emit()
        return bookmark_set

    def clear(self, doc_id: str) -> None:
        """Drop the cached set for ``doc_id``.

        The removal reaches persistence on the next ``replace`` or ``flush``.
        """
        self._sets.pop(doc_id, None)
        self.changed.emit()

    def flush(self) -> None:
        if self._persistence is not None:
            self._persistence.save(self.snapshot())

    def load_all(self, data: Mapping[str, Iterable[int]]) -> None:
        """Bulk install persisted data at startup, without notification.

        ``data`` comes from a ``PersistenceAdapter``, which filters malformed
        entries before they get here.
        """
        self._sets = {doc_id: tuple(lines) for doc_id, lines in data.items()}
