"""Tests for ANSI-aware measurement, clipping, and span highlighting."""

from __future__ import annotations

import unittest

from markview.ansi import clip_ansi_line, display_width, highlight_spans, strip_ansi


class AnsiMeasureTests(unittest.TestCase):
    def test_escapes_do_not_count_toward_width(self) -> None:
        self.assertEqual(display_width("\033[1mbold\033[0m"), 4)
        self.assertEqual(strip_ansi("\033[38;5;45mx\033[39m"), "x")

    def test_wide_and_combining_characters(self) -> None:
        self.assertEqual(display_width("日本"), 4)
        self.assertEqual(display_width("é"), 1)

    def test_tabs_expand_to_next_stop(self) -> None:
        self.assertEqual(display_width("ab\tc"), 9)


class ClipAnsiLineTests(unittest.TestCase):
    def test_clip_keeps_escapes_and_counts_visible_columns(self) -> None:
        self.assertEqual(clip_ansi_line("\033[1mabcdef\033[0m", 3), "\033[1mabc")

    def test_wide_character_that_would_overflow_is_dropped(self) -> None:
        self.assertEqual(clip_ansi_line("a日本", 2), "a")

    def test_tabs_become_spaces(self) -> None:
        self.assertEqual(clip_ansi_line("a\tb", 20), "a       b")

    def test_non_positive_width_is_empty(self) -> None:
        self.assertEqual(clip_ansi_line("abc", 0), "")


class HighlightSpansTests(unittest.TestCase):
    def test_span_wraps_visible_characters(self) -> None:
        self.assertEqual(highlight_spans("say foo now", [(4, 3)], "<", ">"), "say <foo> now")

    def test_existing_escapes_are_skipped_when_counting(self) -> None:
        styled = "\033[1mab\033[0mcd"

        self.assertEqual(highlight_spans(styled, [(1, 2)], "<", ">"), "\033[1ma<b\033[0mc>d")

    def test_span_at_end_of_line_is_closed(self) -> None:
        self.assertEqual(highlight_spans("abc", [(1, 2)], "<", ">"), "a<bc>")

    def test_empty_spans_leave_text_untouched(self) -> None:
        self.assertEqual(highlight_spans("abc", [], "<", ">"), "abc")
        self.assertEqual(highlight_spans("abc", [(0, 0)], "<", ">"), "abc")


if __name__ == "__main__":
    unittest.main()
