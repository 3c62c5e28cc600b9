"""Tests for the per-document session driven by the terminal loop."""

from __future__ import annotations

import io
import tempfile
import unittest
from dataclasses import replace
from pathlib import Path
from unittest import mock

from markview.document import load_document
from markview.navigation import Mode
from markview.runtime import loop
from markview.runtime.config import ViewerConfig, WatchSettings


def _write_lines(path: Path, count: int, prefix: str = "line") -> None:
    path.write_text("\n".join(f"{prefix} {idx}" for idx in range(count)) + "\n", encoding="utf-8")


def _session(path: Path, watch: bool = False, **kwargs) -> loop.ViewerSession:
    config = replace(ViewerConfig(), watch=WatchSettings(enabled=watch, poll_seconds=0.25))
    return loop.ViewerSession(path, config, load_document(path), rows=24, no_color=True, **kwargs)


class ViewerSessionTests(unittest.TestCase):
    def test_viewport_spans_rows_above_status_line(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "doc.md"
            _write_lines(path, 100)

            session = _session(path)

        self.assertEqual(session.coordinator.viewport.viewport_size, 23 * 24.0)

    def test_keys_drive_coordinator_and_quit_stops(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "doc.md"
            _write_lines(path, 100)
            session = _session(path)

            self.assertTrue(session.handle_key("j"))
            self.assertEqual(session.coordinator.position, 20.0)
            self.assertTrue(session.handle_key("/"))
            self.assertEqual(session.coordinator.mode, Mode.SEARCHING)
            self.assertTrue(session.handle_key("ESC"))
            self.assertFalse(session.handle_key("q"))

    def test_font_change_is_persisted_and_viewport_follows(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "doc.md"
            _write_lines(path, 100)
            config_path = Path(tmp) / "config.json"
            session = _session(path, config_path=config_path)

            with mock.patch("markview.runtime.loop.save_font_scale") as save:
                session.handle_key("+")

            save.assert_called_once_with(1.125, config_path)
            session.sync_viewport(24)
            self.assertEqual(session.coordinator.viewport.viewport_size, 23 * 27.0)

    def test_font_change_not_persisted_when_disabled(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "doc.md"
            _write_lines(path, 10)
            session = _session(path, persist_font_scale=False)

            with mock.patch("markview.runtime.loop.save_font_scale") as save:
                session.handle_key("+")

            save.assert_not_called()

    def test_sync_viewport_keeps_status_message(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "doc.md"
            _write_lines(path, 100)
            session = _session(path)
            session.handle_key("'")
            session.handle_key("x")

            session.sync_viewport(40)

        self.assertEqual(session.coordinator.status_message, "Mark 'x' not set")

    def test_tick_reloads_changed_document(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "doc.md"
            _write_lines(path, 10)
            session = _session(path, watch=True)
            session.watcher.poll_seconds = 0.0

            _write_lines(path, 100, prefix="changed line")
            session.tick()

            self.assertEqual(session.coordinator.summary.line_count, 100)
            self.assertEqual(len(session.document), 100)
            self.assertTrue(session.dirty)

    def test_reload_of_missing_file_keeps_previous_document(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "doc.md"
            _write_lines(path, 10)
            session = _session(path)
            path.unlink()

            with self.assertLogs("markview.runtime.loop", level="WARNING"):
                session.reload()

        self.assertEqual(session.coordinator.summary.line_count, 10)
        self.assertFalse(session.coordinator.is_stale)

    def test_frame_has_one_row_per_terminal_line(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "doc.md"
            _write_lines(path, 100)
            session = _session(path)

            rows = session.frame(80, 24)

        self.assertEqual(len(rows), 24)
        self.assertEqual(rows[0], "line 0")


class RunViewerTests(unittest.TestCase):
    def test_nopager_prints_document(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "doc.md"
            path.write_text("# Title\n\nbody\n", encoding="utf-8")
            stdout = io.StringIO()

            with mock.patch("markview.runtime.loop.sys.stdout", stdout):
                loop.run_viewer(path, ViewerConfig(), nopager=True, no_color=True)

        self.assertEqual(stdout.getvalue(), "# Title\n\nbody\n")


if __name__ == "__main__":
    unittest.main()
