"""Line-marker boundary types and the in-memory reference buffer.

``LineMarkerAdapter`` is what the bookmark core needs from a host editor.
``LineBuffer`` implements it for tests and the CLI: markers travel with their
lines when lines are inserted or deleted, the way editor line classes do.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Protocol


class LineMarkerAdapter(Protocol):
    """Per-line boolean marked state on a live buffer."""

    def is_marked(self, line: int) -> bool:
        ...

    def set_marked(self, line: int, marked: bool) -> None:
        ...

    def line_count(self) -> int:
        ...

    def for_each_marked_line(self, visit: Callable[[int], None]) -> None:
        """Call ``visit`` with each marked line number, in any order."""
        ...


class FlashAdapter(Protocol):
    """Transient per-line highlight used as navigation feedback."""

    def set_flashed(self, line: int, flashed: bool) -> None:
        ...


class LineBuffer:
    """Editable list of text lines with bookmark markers and flash highlights.

    ``on_change`` fires after every content edit (not after marker changes),
    so owners can forward it as a buffer-content-changed event.
    """

    def __init__(self, lines: Iterable[str] = (), on_change: Callable[[], None] | None = None) -> None:
        self.lines: list[str] = list(lines) or [""]
        self.on_change = on_change
        self._marked: set[int] = set()
        self._flashed: set[int] = set()

    def line_count(self) -> int:
        return len(self.lines)

    def _in_range(self, line: int) -> bool:
        return 0 <= line < len(self.lines)

    def is_marked(self, line: int) -> bool:
        return line in self._marked

    def set_marked(self, line: int, marked: bool) -> None:
        if not self._in_range(line):
            return
        if marked:
            self._marked.add(line)
        else:
            self._marked.discard(line)

    def for_each_marked_line(self, visit: Callable[[int], None]) -> None:
        for line in sorted(self._marked):
            visit(line)

    def is_flashed(self, line: int) -> bool:
        return line in self._flashed

    def set_flashed(self, line: int, flashed: bool) -> None:
        if flashed:
            if self._in_range(line):
                self._flashed.add(line)
        else:
            self._flashed.discard(line)

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def _shift(self, marks: set[int], start: int, delta: int, dropped: range | None = None) -> set[int]:
        shifted: set[int] = set()
        for line in marks:
            if dropped is not None and line in dropped:
                continue
            shifted.add(line + delta if line >= start else line)
        return shifted

    def insert_lines(self, at: int, new_lines: Iterable[str]) -> None:
        """Insert ``new_lines`` before line ``at``; markers at or below move down."""
        inserted = list(new_lines)
        if not inserted:
            return
        at = max(0, min(at, len(self.lines)))
        self.lines[at:at] = inserted
        self._marked = self._shift(self._marked, at, len(inserted))
        self._flashed = self._shift(self._flashed, at, len(inserted))
        self._notify()

    def delete_lines(self, start: int, count: int = 1) -> None:
        """Delete ``count`` lines from ``start``; their markers go with them."""
        start = max(0, start)
        end = min(len(self.lines), start + max(0, count))
        if start >= end:
            return
        del self.lines[start:end]
        if not self.lines:
            self.lines = [""]
        removed = range(start, end)
        self._marked = self._shift(self._marked, end, start - end, dropped=removed)
        self._flashed = self._shift(self._flashed, end, start - end, dropped=removed)
        self._notify()
