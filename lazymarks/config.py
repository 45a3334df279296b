"""Persistent JSON config helpers.

Stores the bookmark mapping and the preferred highlight style.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "lazymarks"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH
BOOKMARKS_KEY = "bookmarks"
STYLE_KEY = "style"


class PersistenceAdapter(Protocol):
    """Durable storage for the whole docId -> lines mapping."""

    def load(self) -> dict[str, list[int]]:
        ...

    def save(self, bookmarks: Mapping[str, Sequence[int]]) -> None:
        ...


def _config_path(path: Path | None = None) -> Path:
    return CONFIG_PATH if path is None else path


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = _config_path(path)
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning(f"Ignoring unreadable config {config_path}: {exc}")
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object], path: Path | None = None) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem/serialization errors are logged and otherwise ignored so a
    read-only config directory never breaks editing.
    """
    config_path = _config_path(path)
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning(f"Failed to write config {config_path}: {exc}")


def _coerce_line_numbers(value: object) -> list[int] | None:
    """Keep non-negative integer entries, sorted and unique.

    Booleans count as invalid even though they are ``int`` subclasses.
    Returns ``None`` when the value is not a list at all.
    """
    if not isinstance(value, list):
        return None
    lines = {
        entry
        for entry in value
        if isinstance(entry, int) and not isinstance(entry, bool) and entry >= 0
    }
    return sorted(lines)


def sanitize_bookmarks(value: object) -> dict[str, list[int]]:
    """Filter a decoded bookmark mapping down to well-formed entries."""
    if not isinstance(value, dict):
        return {}

    bookmarks: dict[str, list[int]] = {}
    for doc_id, raw_lines in value.items():
        if not isinstance(doc_id, str) or not doc_id:
            continue
        lines = _coerce_line_numbers(raw_lines)
        if lines is None:
            continue
        bookmarks[doc_id] = lines
    return bookmarks


def load_bookmarks(path: Path | None = None) -> dict[str, list[int]]:
    """Load the persisted bookmark mapping with strict validation."""
    return sanitize_bookmarks(load_config(path).get(BOOKMARKS_KEY))


def save_bookmarks(bookmarks: Mapping[str, Sequence[int]], path: Path | None = None) -> None:
    """Persist the full bookmark mapping, keeping other config keys intact."""
    serialized = {doc_id: [int(line) for line in lines] for doc_id, lines in bookmarks.items()}
    config = load_config(path)
    config[BOOKMARKS_KEY] = serialized
    save_config(config, path)


def load_style_name(path: Path | None = None) -> str | None:
    """Load persisted Pygments style name, returning ``None`` when unset/invalid."""
    value = load_config(path).get(STYLE_KEY)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def save_style_name(style: str, path: Path | None = None) -> None:
    """Persist the preferred Pygments style name."""
    stripped = str(style).strip()
    if not stripped:
        return
    config = load_config(path)
    config[STYLE_KEY] = stripped
    save_config(config, path)


class JsonBookmarkPersistence:
    """``PersistenceAdapter`` backed by the JSON config file.

    With no explicit path the module-level ``CONFIG_PATH`` is read on every
    call, so tests can patch it.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path

    def load(self) -> dict[str, list[int]]:
        return load_bookmarks(self.path)

    def save(self, bookmarks: Mapping[str, Sequence[int]]) -> None:
        save_bookmarks(bookmarks, self.path)
