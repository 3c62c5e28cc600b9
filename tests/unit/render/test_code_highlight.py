"""Tests for fenced-code syntax highlighting."""

from __future__ import annotations

import unittest
from unittest import mock

from markview.ansi import strip_ansi
from markview.render import highlight


class HighlightCodeTests(unittest.TestCase):
    def test_highlighting_keeps_one_row_per_source_line(self) -> None:
        source = "\ndef f():\n    return 1\n"

        lines = highlight.highlight_code(source, "python")

        self.assertEqual(len(lines), len(source.splitlines()))
        self.assertEqual([strip_ansi(line) for line in lines], source.splitlines())

    def test_unknown_language_falls_back_to_plain_text_lexer(self) -> None:
        lines = highlight.highlight_code("some text\nmore", "no-such-language")

        self.assertEqual([strip_ansi(line) for line in lines], ["some text", "more"])

    def test_unknown_style_uses_default(self) -> None:
        lines = highlight.highlight_code("x = 1", "python", style="no-such-style")

        self.assertEqual(strip_ansi(lines[0]), "x = 1")

    def test_missing_pygments_returns_plain_lines(self) -> None:
        with mock.patch.object(highlight, "_ensure_pygments_loaded", return_value=False):
            lines = highlight.highlight_code("a\nb", "python")

        self.assertEqual(lines, ["a", "b"])

    def test_failing_highlighter_returns_plain_lines(self) -> None:
        highlight._ensure_pygments_loaded()
        with mock.patch.object(highlight, "_PYGMENTS_HIGHLIGHT", side_effect=RuntimeError("boom")):
            lines = highlight.highlight_code("a\nb", "python")

        self.assertEqual(lines, ["a", "b"])

    def test_empty_source_is_empty(self) -> None:
        self.assertEqual(highlight.highlight_code("", "python"), [])


if __name__ == "__main__":
    unittest.main()
