"""Buffer lifecycle events delivered to explicitly subscribed listeners."""

from __future__ import annotations

from typing import Protocol

from .signals import Subscription


class BufferListener(Protocol):
    def on_buffer_opened(self, doc_id: str) -> None:
        ...

    def on_buffer_changed(self, doc_id: str) -> None:
        ...

    def on_buffer_closing(self, doc_id: str) -> None:
        ...


class BufferEvents:
    """Synchronous dispatcher for opened/content-changed/closing events.

    Listeners run in subscription order and each event handler runs to
    completion before ``buffer_*`` returns.
    """

    def __init__(self) -> None:
        self._listeners: list[BufferListener] = []

    def subscribe(self, listener: BufferListener) -> Subscription:
        self._listeners.append(listener)

        def detach() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return Subscription(detach)

    def buffer_opened(self, doc_id: str) -> None:
        for listener in list(self._listeners):
            listener.on_buffer_opened(doc_id)

    def buffer_changed(self, doc_id: str) -> None:
        for listener in list(self._listeners):
            listener.on_buffer_changed(doc_id)

    def buffer_closing(self, doc_id: str) -> None:
        for listener in list(self._listeners):
            listener.on_buffer_closing(doc_id)
