"""Session bootstrap: wire store, sync engine, events and commands together.

A session owns the open documents and the bookmark store for one process.
Nothing here is module-level state; every collaborator is injected.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from .commands import BookmarkCommands
from .config import PersistenceAdapter
from .document import OpenDocument, document_id_for, read_text
from .events import BufferEvents
from .flash import FLASH_SECONDS, LineFlash, Scheduler
from .markers import LineBuffer
from .store import BookmarkSet, BookmarkStore
from .sync import SyncEngine


class DocumentAlreadyOpenError(ValueError):
    """Raised when a second buffer would share an open document identity."""


class BookmarkSession:
    """Open documents plus the bookmark machinery that follows them.

    The store is loaded from ``persistence`` once, here, before any listener
    exists. Closing a document runs the final rescan and persist before its
    identity is released for reuse.
    """

    def __init__(
        self,
        persistence: PersistenceAdapter | None = None,
        *,
        flash_seconds: float = FLASH_SECONDS,
        schedule: Scheduler | None = None,
    ) -> None:
        self.store = BookmarkStore(persistence)
        if persistence is not None:
            self.store.load_all(persistence.load())
        self.events = BufferEvents()
        self.sync = SyncEngine(self.store, self._markers_for)
        self._sync_subscription = self.events.subscribe(self.sync)
        self._documents: dict[str, OpenDocument] = {}
        self._active_doc_id: str | None = None
        self.commands = BookmarkCommands(
            self.store,
            self.sync,
            self.active_document,
            LineFlash(flash_seconds, schedule),
        )

    def _markers_for(self, doc_id: str) -> LineBuffer | None:
        document = self._documents.get(doc_id)
        return None if document is None else document.buffer

    def document(self, doc_id: str) -> OpenDocument | None:
        return self._documents.get(doc_id)

    def active_document(self) -> OpenDocument | None:
        if self._active_doc_id is None:
            return None
        return self._documents.get(self._active_doc_id)

    def activate(self, doc_id: str) -> OpenDocument | None:
        document = self._documents.get(doc_id)
        if document is not None:
            self._active_doc_id = doc_id
        return document

    def open_document(self, doc_id: str, lines: Iterable[str]) -> OpenDocument:
        """Open a buffer under ``doc_id``, restore its markers and activate it."""
        if doc_id in self._documents:
            raise DocumentAlreadyOpenError(f"Document already open: {doc_id}")

        def publish_change() -> None:
            self.events.buffer_changed(doc_id)

        document = OpenDocument(doc_id=doc_id, buffer=LineBuffer(lines, on_change=publish_change))
        self._documents[doc_id] = document
        self.events.buffer_opened(doc_id)
        self._active_doc_id = doc_id
        return document

    def open_path(self, path: Path) -> OpenDocument:
        return self.open_document(document_id_for(path), read_text(path).split("\n"))

    def close_document(self, doc_id: str) -> None:
        if doc_id not in self._documents:
            return
        self.events.buffer_closing(doc_id)
        del self._documents[doc_id]
        if self._active_doc_id == doc_id:
            self._active_doc_id = next(iter(self._documents), None)

    def bookmarks_for(self, doc_id: str) -> BookmarkSet:
        """Fresh bookmark set for ``doc_id``, as a listing view would read it."""
        self.sync.ensure_fresh(doc_id)
        return self.store.get(doc_id)

    def close(self) -> None:
        for doc_id in list(self._documents):
            self.close_document(doc_id)
        self._sync_subscription.cancel()
