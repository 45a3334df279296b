"""Pygments rendering of bookmarked source lines for terminal output.

Control bytes are escaped before highlighting so previews cannot move the
cursor or ring the bell.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"
RESET = "\033[0m"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_FORMATTERS: dict[str, Terminal256Formatter] = {}


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group()):02x}", source)


def normalize_style(style: str | None) -> str:
    """Return ``style`` when Pygments knows it, else the default style."""
    if not style:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return DEFAULT_STYLE
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def highlight_source(path: Path, source: str, style: str | None = None) -> list[str]:
    """Highlight the whole file and split it back into per-line strings.

    The whole source is lexed at once so multi-line tokens (docstrings,
    block comments) keep their colors on every line.
    """
    try:
        lexer = get_lexer_for_filename(path.name, source, stripnl=False)
    except ClassNotFound:
        lexer = TextLexer(stripnl=False)
    rendered = highlight(source, lexer, _formatter_for_style(normalize_style(style)))
    if rendered.endswith("\n") and not source.endswith("\n"):
        rendered = rendered[:-1]
    return rendered.split("\n")


def render_bookmarked_lines(
    path: Path,
    source: str,
    bookmarks: Sequence[int],
    style: str | None = None,
    no_color: bool = False,
) -> str:
    """Render ``line_no: text`` rows (1-based) for each bookmarked line."""
    source = sanitize_terminal_text(source)
    plain_lines = source.split("\n")
    lines = plain_lines if no_color else highlight_source(path, source, style)
    width = len(str(len(plain_lines)))

    out: list[str] = []
    for line in bookmarks:
        if not 0 <= line < len(plain_lines):
            continue
        text = lines[line] if line < len(lines) else plain_lines[line]
        out.append(f"{line + 1:>{width}}: {text}")
        if "\033" in text:
            out.append(RESET)
        out.append("\n")
    return "".join(out)
