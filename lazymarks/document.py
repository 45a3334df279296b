"""Open-document record, identity helper, and tolerant file reading."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .markers import LineBuffer


def document_id_for(path: Path) -> str:
    """Return the stable identity for a file: its resolved absolute path."""
    try:
        resolved = path.resolve()
    except OSError:
        resolved = path.absolute()
    return str(resolved)


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1; as a final fallback decodes
    raw bytes with UTF-8 replacement semantics.
    """
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


@dataclass
class OpenDocument:
    """One open buffer together with its editor-owned cursor line (0-based)."""

    doc_id: str
    buffer: LineBuffer
    cursor_line: int = 0
    cursor_column: int = 0

    def set_cursor(self, line: int, column: int = 0) -> None:
        last_line = max(0, self.buffer.line_count() - 1)
        self.cursor_line = max(0, min(line, last_line))
        self.cursor_column = max(0, column)
