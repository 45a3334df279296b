"""Circular bookmark navigation.

This module intentionally has no UI concerns: callers move the cursor and
show any feedback themselves.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Sequence


def find_target(bookmarks: Sequence[int], cursor_line: int, forward: bool) -> int | None:
    """Return the next (or previous) bookmark relative to ``cursor_line``.

    ``bookmarks`` must be strictly ascending. Searching forward picks the
    first line after the cursor and wraps to the first bookmark; backward
    picks the last line before the cursor and wraps to the last one. A wrap
    that would land on the cursor line itself yields ``None``.
    """
    if not bookmarks:
        return None

    if forward:
        index = bisect_right(bookmarks, cursor_line)
        if index < len(bookmarks):
            return bookmarks[index]
        wrapped = bookmarks[0]
    else:
        index = bisect_left(bookmarks, cursor_line)
        if index > 0:
            return bookmarks[index - 1]
        wrapped = bookmarks[-1]

    return None if wrapped == cursor_line else wrapped
