"""Reconcile the bookmark store with live buffer markers.

Cached sets are trusted until invalidated. Any toggle or content edit drops
the cached set, and the next access rescans the buffer's markers, which are
the authoritative state. Line shifts are never tracked incrementally.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .markers import LineMarkerAdapter
from .store import BookmarkSet, BookmarkStore

logger = logging.getLogger(__name__)


class SyncEngine:
    """Keep ``BookmarkStore`` consistent with ``LineMarkerAdapter`` state.

    ``resolve_markers`` maps a document identity to its live buffer, or
    ``None`` when the document is not open; such calls are silent no-ops.
    The ``on_buffer_*`` methods make the engine a ``BufferEvents`` listener.
    """

    def __init__(
        self,
        store: BookmarkStore,
        resolve_markers: Callable[[str], LineMarkerAdapter | None],
    ) -> None:
        self.store = store
        self._resolve_markers = resolve_markers

    def rebuild(self, doc_id: str) -> BookmarkSet | None:
        """Rescan every marked line and install the result as the new set."""
        markers = self._resolve_markers(doc_id)
        if markers is None:
            return None
        lines: list[int] = []
        markers.for_each_marked_line(lines.append)
        logger.debug(f"Rebuilt bookmarks for {doc_id}: {len(lines)} marked line(s)")
        return self.store.replace(doc_id, lines)

    def ensure_fresh(self, doc_id: str) -> bool:
        """Return whether ``doc_id`` has bookmarks, scanning unless a non-empty set is cached."""
        if self.store.get(doc_id):
            return True
        return bool(self.rebuild(doc_id))

    def invalidate(self, doc_id: str) -> None:
        self.store.clear(doc_id)

    def on_buffer_opened(self, doc_id: str) -> None:
        """Apply the stored set onto the buffer, skipping lines past its end.

        A set that no longer fits the buffer is dropped so the next access
        rescans the markers that were actually applied.
        """
        markers = self._resolve_markers(doc_id)
        if markers is None:
            return
        line_count = markers.line_count()
        skipped = False
        for line in self.store.get(doc_id):
            if line < line_count:
                markers.set_marked(line, True)
            else:
                skipped = True
        if skipped:
            self.invalidate(doc_id)

    def on_buffer_changed(self, doc_id: str) -> None:
        self.invalidate(doc_id)

    def on_buffer_closing(self, doc_id: str) -> None:
        # The on-screen markers win at close time, even over a cached set.
        self.rebuild(doc_id)
