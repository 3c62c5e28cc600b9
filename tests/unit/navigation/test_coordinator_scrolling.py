"""Coordinator tests for scrolling, reflow, marks, and outline jumps."""

from __future__ import annotations

import unittest

from markview.document import DocumentSummary, summarize_markdown
from markview.navigation import Mode, NavigationCoordinator
from markview.navigation import intents as it
from markview.viewport import MetricsSettings


def _document(line_count: int = 100) -> DocumentSummary:
    lines = [f"line {idx}" for idx in range(line_count)]
    if line_count == 100:
        lines[10] = "## Setup"
        lines[40] = "## Usage"
        lines[41] = "needle here"
        lines[80] = "### Notes needle"
    return summarize_markdown("\n".join(lines))


def _coordinator(summary: DocumentSummary | None = None) -> NavigationCoordinator:
    return NavigationCoordinator(
        summary if summary is not None else _document(),
        800.0,
        metrics_settings=MetricsSettings(structural_padding=400.0),
    )


class ScrollIntentTests(unittest.TestCase):
    def test_initial_geometry(self) -> None:
        nav = _coordinator()

        self.assertEqual(nav.extent, 2000.0)
        self.assertEqual(nav.position, 0.0)
        self.assertEqual(nav.line_height, 24.0)
        self.assertEqual(nav.mode, Mode.NORMAL)

    def test_page_down_uses_configured_fraction(self) -> None:
        nav = _coordinator()

        self.assertTrue(nav.dispatch(it.PageScroll(1)))

        self.assertEqual(nav.position, 640.0)

    def test_step_sizes(self) -> None:
        nav = _coordinator()

        nav.dispatch(it.ArrowScroll(1))
        self.assertEqual(nav.position, 20.0)
        nav.dispatch(it.HalfPageScroll(1))
        self.assertEqual(nav.position, 420.0)
        nav.dispatch(it.PageScroll(1, 0.2))
        self.assertEqual(nav.position, 580.0)
        nav.dispatch(it.ArrowScroll(-1))
        self.assertEqual(nav.position, 560.0)

    def test_absolute_scrolls(self) -> None:
        nav = _coordinator()

        nav.dispatch(it.ScrollToBottom())
        self.assertEqual(nav.position, 2000.0)
        self.assertEqual(nav.percentage(), 1.0)
        nav.dispatch(it.ScrollToPercentage(0.5))
        self.assertEqual(nav.position, 1000.0)
        nav.dispatch(it.ScrollToTop())
        self.assertEqual(nav.position, 0.0)
        nav.dispatch(it.ScrollBy(-5.0))
        self.assertEqual(nav.position, 0.0)

    def test_center_view_without_match_keeps_position(self) -> None:
        nav = _coordinator()
        nav.dispatch(it.ScrollBy(640.0))

        self.assertFalse(nav.dispatch(it.CenterView()))

        self.assertEqual(nav.position, 640.0)
        self.assertEqual(nav.status_message, "No match to centre")

    def test_current_line_and_section_follow_position(self) -> None:
        nav = _coordinator()
        self.assertEqual(nav.current_line(), 1)
        self.assertIsNone(nav.current_section())

        nav.dispatch(it.ScrollBy(500.0))

        self.assertEqual(nav.current_line(), 21)
        self.assertEqual(nav.current_section().title, "Setup")

    def test_unsupported_intent_raises(self) -> None:
        with self.assertRaises(TypeError):
            _coordinator().dispatch(object())


class ReflowTests(unittest.TestCase):
    def test_font_scale_keeps_top_line_and_rescales_marks_and_outline(self) -> None:
        nav = _coordinator()
        nav.dispatch(it.ScrollBy(240.0))
        nav.dispatch(it.SetMark("a"))

        self.assertTrue(nav.dispatch(it.SetFontScale(2.0)))

        self.assertEqual(nav.position, 480.0)
        self.assertEqual(nav.current_line(), 11)
        self.assertEqual(nav.marks.jump_to_mark("a"), 480.0)
        self.assertEqual(nav.outline.entries[0].position, 480.0)

    def test_font_scale_is_clamped_and_unchanged_scale_is_rejected(self) -> None:
        nav = _coordinator()

        nav.dispatch(it.SetFontScale(10.0))
        self.assertEqual(nav.font_scale, 4.0)
        self.assertFalse(nav.dispatch(it.SetFontScale(4.0)))
        nav.dispatch(it.ChangeFontScale(-0.5))
        self.assertEqual(nav.font_scale, 3.5)

    def test_resize_recomputes_extent(self) -> None:
        nav = _coordinator()
        nav.dispatch(it.ScrollToBottom())

        nav.dispatch(it.Resize(1600.0))

        self.assertEqual(nav.extent, 1200.0)
        self.assertEqual(nav.position, 1200.0)

    def test_line_height_hint_grows_estimate(self) -> None:
        nav = _coordinator()

        nav.dispatch(it.Resize(800.0, line_height_hint=30.0))

        self.assertEqual(nav.line_height, 30.0)
        self.assertEqual(nav.extent, 100 * 30.0 + 400.0 - 800.0)


class MarkIntentTests(unittest.TestCase):
    def test_mark_round_trip(self) -> None:
        nav = _coordinator()
        nav.dispatch(it.PageScroll(1))

        self.assertTrue(nav.dispatch(it.SetMark("a")))
        self.assertEqual(nav.status_message, "Mark 'a' set")
        nav.dispatch(it.ScrollToTop())
        self.assertTrue(nav.dispatch(it.JumpToMark("a")))

        self.assertEqual(nav.position, 640.0)
        self.assertEqual(nav.mark_keys(), ["a"])

    def test_unset_mark_reports_status(self) -> None:
        nav = _coordinator()

        self.assertFalse(nav.dispatch(it.JumpToMark("b")))
        self.assertEqual(nav.status_message, "Mark 'b' not set")

    def test_invalid_mark_key_is_rejected(self) -> None:
        nav = _coordinator()

        self.assertFalse(nav.dispatch(it.SetMark(" ")))
        self.assertFalse(nav.dispatch(it.SetMark("-")))
        self.assertEqual(nav.status_message, "Invalid mark key '-'")
        self.assertEqual(nav.mark_keys(), [])

    def test_marks_only_in_normal_mode(self) -> None:
        nav = _coordinator()
        nav.dispatch(it.OpenSearch())

        self.assertFalse(nav.dispatch(it.SetMark("a")))


class HeadingIntentTests(unittest.TestCase):
    def test_jump_to_numbered_heading(self) -> None:
        nav = _coordinator()

        self.assertTrue(nav.dispatch(it.JumpToHeading(1)))

        self.assertEqual(nav.position, 40 * 24.0)

    def test_missing_heading_number(self) -> None:
        nav = _coordinator()

        self.assertFalse(nav.dispatch(it.JumpToHeading(5)))
        self.assertEqual(nav.status_message, "No heading 6")

    def test_next_and_previous_heading(self) -> None:
        nav = _coordinator()

        self.assertFalse(nav.dispatch(it.PreviousHeading()))
        self.assertEqual(nav.status_message, "No previous heading")
        nav.dispatch(it.NextHeading())
        self.assertEqual(nav.position, 240.0)
        nav.dispatch(it.NextHeading())
        self.assertEqual(nav.position, 960.0)
        nav.dispatch(it.PreviousHeading())
        self.assertEqual(nav.position, 240.0)

    def test_no_next_heading_at_bottom(self) -> None:
        nav = _coordinator()
        nav.dispatch(it.ScrollToBottom())

        self.assertFalse(nav.dispatch(it.NextHeading()))
        self.assertEqual(nav.status_message, "No next heading")


if __name__ == "__main__":
    unittest.main()
