"""Payload-free change signal with explicit subscription handles."""

from __future__ import annotations

from collections.abc import Callable


class Subscription:
    """Handle returned by ``connect``/``subscribe``; ``cancel`` detaches it."""

    def __init__(self, detach: Callable[[], None]) -> None:
        self._detach: Callable[[], None] | None = detach

    def cancel(self) -> None:
        """Detach the listener. Cancelling twice is a no-op."""
        detach = self._detach
        self._detach = None
        if detach is not None:
            detach()


class ChangeSignal:
    """Notify connected callbacks that some observed data changed.

    Callbacks take no arguments; listeners re-read whatever they display.
    """

    def __init__(self) -> None:
        self._callbacks: list[Callable[[], None]] = []

    def connect(self, callback: Callable[[], None]) -> Subscription:
        self._callbacks.append(callback)

        def detach() -> None:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                pass

        return Subscription(detach)

    def emit(self) -> None:
        # Copy so callbacks may cancel their own subscription while being called.
        for callback in list(self._callbacks):
            callback()
