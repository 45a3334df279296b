"""Command-line front door for lazymarks.

Opens files through a ``BookmarkSession`` so every command goes through the
same open/toggle/close lifecycle an editor would drive. Line numbers are
1-based on the command line and 0-based everywhere else.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import JsonBookmarkPersistence, load_style_name, save_style_name
from .document import OpenDocument, document_id_for, read_text
from .highlight import render_bookmarked_lines
from .session import BookmarkSession


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _existing_file(raw_path: str) -> Path:
    path = Path(raw_path)
    if not path.is_file():
        raise SystemExit(f"Path not found: {path}")
    return path


def _format_lines(lines: tuple[int, ...] | list[int]) -> str:
    return ", ".join(str(line + 1) for line in lines)


def _open_at_line(session: BookmarkSession, path: Path, line: int) -> OpenDocument:
    document = session.open_path(path)
    if line > document.buffer.line_count():
        session.close_document(document.doc_id)
        raise SystemExit(f"Line {line} is past the end of {path} ({document.buffer.line_count()} lines).")
    document.set_cursor(line - 1)
    return document


def _cmd_list(session: BookmarkSession, args: argparse.Namespace) -> None:
    if args.path is not None:
        lines = session.store.get(document_id_for(Path(args.path)))
        if lines:
            sys.stdout.write(_format_lines(lines) + "\n")
        return
    for doc_id in session.store.doc_ids():
        lines = session.store.get(doc_id)
        if lines:
            sys.stdout.write(f"{doc_id}: {_format_lines(lines)}\n")


def _cmd_toggle(session: BookmarkSession, args: argparse.Namespace) -> None:
    document = _open_at_line(session, _existing_file(args.path), args.line)
    session.commands.toggle_bookmark()
    state = "set" if document.buffer.is_marked(document.cursor_line) else "removed"
    session.close_document(document.doc_id)
    sys.stdout.write(f"Bookmark {state} at line {args.line}.\n")


def _cmd_goto(session: BookmarkSession, args: argparse.Namespace, forward: bool) -> None:
    document = _open_at_line(session, _existing_file(args.path), args.line)
    target = session.commands.goto_bookmark(forward)
    session.close_document(document.doc_id)
    if target is not None:
        sys.stdout.write(f"{target + 1}\n")


def _cmd_show(session: BookmarkSession, args: argparse.Namespace) -> None:
    path = _existing_file(args.path)
    bookmarks = session.store.get(document_id_for(path))
    style = args.style or load_style_name(args.config_path)
    if args.style:
        save_style_name(args.style, args.config_path)
    sys.stdout.write(render_bookmarked_lines(path, read_text(path), bookmarks, style, args.no_color))


def _cmd_clear(session: BookmarkSession, args: argparse.Namespace) -> None:
    document = session.open_path(_existing_file(args.path))
    for line in session.bookmarks_for(document.doc_id):
        document.buffer.set_marked(line, False)
    session.sync.invalidate(document.doc_id)
    session.close_document(document.doc_id)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazymarks",
        description="Toggle, list and jump between line bookmarks kept per file.",
    )
    parser.add_argument("--config", metavar="PATH", default=None, help="Config file holding bookmarks.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages to stderr.")
    commands = parser.add_subparsers(dest="command", required=True)

    list_parser = commands.add_parser("list", help="List bookmarked lines.")
    list_parser.add_argument("path", nargs="?", default=None, help="Only list bookmarks of this file.")

    toggle_parser = commands.add_parser("toggle", help="Toggle the bookmark on a line.")
    toggle_parser.add_argument("path")
    toggle_parser.add_argument("line", type=_positive_int)

    for name, help_text in (("next", "Print the next bookmarked line."), ("prev", "Print the previous bookmarked line.")):
        goto_parser = commands.add_parser(name, help=help_text)
        goto_parser.add_argument("path")
        goto_parser.add_argument("line", type=_positive_int, help="Current cursor line.")

    show_parser = commands.add_parser("show", help="Print bookmarked lines with syntax highlighting.")
    show_parser.add_argument("path")
    show_parser.add_argument("--style", default=None, help="Pygments style name (remembered).")
    show_parser.add_argument("--no-color", action="store_true", help="Disable color output.")

    clear_parser = commands.add_parser("clear", help="Remove every bookmark of a file.")
    clear_parser.add_argument("path")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run one bookmark command."""
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    args.config_path = Path(args.config) if args.config is not None else None

    session = BookmarkSession(JsonBookmarkPersistence(args.config_path), flash_seconds=0)
    try:
        if args.command == "list":
            _cmd_list(session, args)
        elif args.command == "toggle":
            _cmd_toggle(session, args)
        elif args.command in ("next", "prev"):
            _cmd_goto(session, args, forward=args.command == "next")
        elif args.command == "show":
            _cmd_show(session, args)
        elif args.command == "clear":
            _cmd_clear(session, args)
    finally:
        session.close()


if __name__ == "__main__":
    main()
