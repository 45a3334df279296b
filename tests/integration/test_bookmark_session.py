"""End-to-end bookmark lifecycle through ``BookmarkSession``.

Drives open/edit/toggle/navigate/close the way a host editor would and
checks what reaches persistence.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from lazymarks.config import JsonBookmarkPersistence
from lazymarks.session import BookmarkSession, DocumentAlreadyOpenError


class MemoryPersistence:
    def __init__(self, data: dict[str, object] | None = None) -> None:
        self.data: dict[str, object] = dict(data or {})
        self.save_count = 0

    def load(self) -> dict[str, object]:
        return dict(self.data)

    def save(self, bookmarks) -> None:
        self.save_count += 1
        self.data = {doc_id: list(lines) for doc_id, lines in bookmarks.items()}


def _lines(count: int) -> list[str]:
    return [f"line {idx}" for idx in range(count)]


class SessionScenarioTests(unittest.TestCase):
    def _session(self, data: dict[str, object] | None = None) -> tuple[BookmarkSession, MemoryPersistence]:
        persistence = MemoryPersistence(data)
        return BookmarkSession(persistence, flash_seconds=0), persistence

    def test_navigation_scenarios_from_persisted_bookmarks(self) -> None:
        session, _persistence = self._session({"f": [2, 5, 9]})
        document = session.open_document("f", _lines(12))
        cases = [
            (5, True, 9),
            (9, True, 2),
            (2, False, 9),
        ]
        for cursor_line, forward, expected in cases:
            with self.subTest(cursor=cursor_line, forward=forward):
                document.set_cursor(cursor_line)
                self.assertEqual(session.commands.goto_bookmark(forward), expected)
                self.assertEqual(document.cursor_line, expected)

    def test_only_bookmark_under_cursor_has_no_target(self) -> None:
        session, _persistence = self._session({"f": [7]})
        document = session.open_document("f", _lines(10))
        document.set_cursor(7)
        self.assertIsNone(session.commands.goto_next_bookmark())

    def test_toggle_on_bookmark_free_document(self) -> None:
        session, _persistence = self._session()
        document = session.open_document("f", _lines(10))
        document.set_cursor(4)

        session.commands.toggle_bookmark()

        self.assertTrue(session.sync.ensure_fresh("f"))
        self.assertEqual(session.store.get("f"), (4,))

    def test_close_persists_markers_and_reopen_restores_them(self) -> None:
        session, persistence = self._session()
        document = session.open_document("f", _lines(10))
        for line in (8, 1):
            document.set_cursor(line)
            session.commands.toggle_bookmark()

        session.close_document("f")
        self.assertEqual(persistence.data, {"f": [1, 8]})
        self.assertIsNone(session.document("f"))

        reopened = session.open_document("f", _lines(10))
        self.assertTrue(reopened.buffer.is_marked(1))
        self.assertTrue(reopened.buffer.is_marked(8))

    def test_reopen_of_shrunk_buffer_skips_lines_past_end(self) -> None:
        session, persistence = self._session({"f": [1, 8]})
        document = session.open_document("f", _lines(5))

        self.assertTrue(document.buffer.is_marked(1))
        self.assertFalse(document.buffer.is_marked(4))
        self.assertEqual(session.bookmarks_for("f"), (1,))
        session.close_document("f")
        self.assertEqual(persistence.data, {"f": [1]})

    def test_goto_after_reopening_shrunk_buffer_stays_inside_it(self) -> None:
        session, _persistence = self._session({"f": [1, 3, 8]})
        document = session.open_document("f", _lines(5))
        document.set_cursor(3)

        self.assertEqual(session.commands.goto_next_bookmark(), 1)
        self.assertEqual(document.cursor_line, 1)

        document.set_cursor(1)
        self.assertEqual(session.commands.goto_prev_bookmark(), 3)
        self.assertEqual(document.cursor_line, 3)

    def test_goto_on_only_surviving_bookmark_of_shrunk_buffer_does_not_move(self) -> None:
        session, _persistence = self._session({"f": [1, 8]})
        document = session.open_document("f", _lines(5))
        document.set_cursor(1)

        self.assertIsNone(session.commands.goto_next_bookmark())
        self.assertEqual(document.cursor_line, 1)

    def test_edit_above_bookmark_invalidates_and_rebuild_follows_markers(self) -> None:
        session, _persistence = self._session({"f": [3]})
        document = session.open_document("f", _lines(6))
        self.assertEqual(session.bookmarks_for("f"), (3,))

        document.buffer.insert_lines(0, ["new a", "new b"])
        self.assertNotIn("f", session.store.doc_ids())

        self.assertEqual(session.bookmarks_for("f"), (5,))

    def test_change_signal_fires_for_panel_refresh(self) -> None:
        session, _persistence = self._session()
        refreshes: list[tuple[int, ...]] = []
        session.store.changed.connect(lambda: refreshes.append(session.store.get("f")))
        document = session.open_document("f", _lines(4))
        document.set_cursor(2)

        session.commands.toggle_bookmark()
        session.bookmarks_for("f")

        self.assertEqual(refreshes, [(), (2,)])

    def test_duplicate_identity_is_rejected_while_open(self) -> None:
        session, _persistence = self._session()
        session.open_document("f", _lines(2))
        with self.assertRaises(DocumentAlreadyOpenError):
            session.open_document("f", _lines(2))

    def test_active_document_moves_on_close(self) -> None:
        session, _persistence = self._session()
        session.open_document("a", _lines(2))
        session.open_document("b", _lines(2))
        self.assertEqual(session.active_document().doc_id, "b")

        session.close_document("b")
        self.assertEqual(session.active_document().doc_id, "a")
        self.assertEqual(session.activate("missing"), None)

    def test_close_session_persists_every_document_and_detaches_sync(self) -> None:
        session, persistence = self._session()
        first = session.open_document("a", _lines(3))
        first.buffer.set_marked(2, True)
        second = session.open_document("b", _lines(3))
        second.buffer.set_marked(0, True)

        session.close()

        self.assertEqual(persistence.data, {"a": [2], "b": [0]})
        self.assertIsNone(session.document("a"))
        self.assertIsNone(session.active_document())
        session.events.buffer_changed("a")
        self.assertIn("a", session.store.doc_ids())


class SessionFilePersistenceTests(unittest.TestCase):
    def test_open_path_uses_resolved_identity_and_json_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            source = root / "module.py"
            source.write_text("a = 1\nb = 2\nc = 3\n", encoding="utf-8")
            config_path = root / "config.json"

            session = BookmarkSession(JsonBookmarkPersistence(config_path), flash_seconds=0)
            document = session.open_path(source)
            document.set_cursor(1)
            session.commands.toggle_bookmark()
            session.close()

            reloaded = BookmarkSession(JsonBookmarkPersistence(config_path), flash_seconds=0)
            self.assertEqual(document.doc_id, str(source))
            self.assertEqual(reloaded.store.get(str(source)), (1,))


if __name__ == "__main__":
    unittest.main()
