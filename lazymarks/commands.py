"""User-facing bookmark commands: toggle and goto next/previous."""

from __future__ import annotations

from collections.abc import Callable

from .document import OpenDocument
from .flash import LineFlash
from .markers import LineMarkerAdapter
from .navigation import find_target
from .store import BookmarkStore
from .sync import SyncEngine


def toggle_bookmark(markers: LineMarkerAdapter, sync: SyncEngine, doc_id: str, line_no: int) -> None:
    """Flip the marker on ``line_no`` and drop the cached set for ``doc_id``.

    The store is not updated here; the next access rescans the markers.
    """
    markers.set_marked(line_no, not markers.is_marked(line_no))
    sync.invalidate(doc_id)


class BookmarkCommands:
    """Commands acting on whichever document ``active_document`` returns.

    With no active document every command does nothing.
    """

    def __init__(
        self,
        store: BookmarkStore,
        sync: SyncEngine,
        active_document: Callable[[], OpenDocument | None],
        flash: LineFlash | None = None,
    ) -> None:
        self.store = store
        self.sync = sync
        self._active_document = active_document
        self.flash = LineFlash() if flash is None else flash

    def toggle_bookmark(self) -> None:
        document = self._active_document()
        if document is None:
            return
        toggle_bookmark(document.buffer, self.sync, document.doc_id, document.cursor_line)

    def goto_bookmark(self, forward: bool) -> int | None:
        """Move the cursor to the next bookmark in the given direction.

        Returns the target line, or ``None`` when nothing moved.
        """
        document = self._active_document()
        if document is None or not self.sync.ensure_fresh(document.doc_id):
            return None

        target = find_target(self.store.get(document.doc_id), document.cursor_line, forward)
        if target is None:
            return None

        document.set_cursor(target, 0)
        self.flash.flash(document.buffer, target)
        return target

    def goto_next_bookmark(self) -> int | None:
        return self.goto_bookmark(True)

    def goto_prev_bookmark(self) -> int | None:
        return self.goto_bookmark(False)
