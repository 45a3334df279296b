"""Transient highlight shown on a line after jumping to it."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from .markers import FlashAdapter

logger = logging.getLogger(__name__)

FLASH_SECONDS = 0.1

Scheduler = Callable[[float, Callable[[], None]], None]


def _timer_schedule(delay: float, callback: Callable[[], None]) -> None:
    """Run ``callback`` once after ``delay`` seconds on a daemon timer thread."""
    timer = threading.Timer(delay, callback)
    timer.name = "lazymarks-flash"
    timer.daemon = True
    timer.start()


class LineFlash:
    """Highlight a line, then clear it after a short delay.

    The reset is fire-and-forget: it never raises, even when the line or the
    whole buffer is gone by the time it runs. A non-positive delay disables
    flashing entirely.
    """

    def __init__(self, delay_seconds: float = FLASH_SECONDS, schedule: Scheduler | None = None) -> None:
        self.delay_seconds = delay_seconds
        self._schedule = _timer_schedule if schedule is None else schedule

    def flash(self, target: FlashAdapter, line: int) -> None:
        if self.delay_seconds <= 0:
            return
        target.set_flashed(line, True)

        def reset() -> None:
            try:
                target.set_flashed(line, False)
            except Exception as exc:
                logger.debug(f"Ignoring flash reset failure on line {line}: {exc}")

        self._schedule(self.delay_seconds, reset)
