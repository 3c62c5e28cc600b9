"""Tests for scroll position ownership and bounds enforcement."""

from __future__ import annotations

import math
import random
import unittest

from markview.viewport import ContentMetrics, MetricsSettings, ViewportState


def _viewport(line_count: int = 100, padding: float = 400.0, viewport: float = 800.0) -> ViewportState:
    metrics = ContentMetrics(MetricsSettings(structural_padding=padding))
    return ViewportState(metrics, viewport, line_count=line_count, structural_weight=padding)


class ViewportStateTests(unittest.TestCase):
    def test_extent_is_content_height_minus_viewport(self) -> None:
        state = _viewport()

        self.assertEqual(state.extent, 2000.0)
        self.assertEqual(state.position, 0.0)

    def test_page_down_moves_fraction_of_viewport(self) -> None:
        state = _viewport()

        state.page_by(0.8, 1)

        self.assertEqual(state.position, 640.0)

    def test_scroll_clamps_at_both_ends(self) -> None:
        state = _viewport()

        state.scroll_by(-50.0)
        self.assertEqual(state.position, 0.0)
        state.scroll_by(1_000_000.0)
        self.assertEqual(state.position, 2000.0)
        state.scroll_to(-1.0)
        self.assertEqual(state.position, 0.0)

    def test_scroll_to_bottom_then_top(self) -> None:
        state = _viewport()

        state.scroll_to_bottom()
        self.assertEqual(state.position, state.extent)
        state.scroll_to_top()
        self.assertEqual(state.position, 0.0)

    def test_shrinking_extent_reclamps_position(self) -> None:
        state = _viewport()
        state.scroll_to(500.0)

        state.set_extent(200.0)

        self.assertEqual(state.extent, 200.0)
        self.assertEqual(state.position, 200.0)

    def test_degenerate_extent_and_viewport_collapse_to_zero(self) -> None:
        state = _viewport()
        state.scroll_to(300.0)

        state.set_extent(float("nan"))
        self.assertEqual((state.extent, state.position), (0.0, 0.0))

        state.set_extent(-10.0)
        self.assertEqual(state.extent, 0.0)

        other = ViewportState(ContentMetrics(), -100.0, line_count=10)
        self.assertEqual(other.viewport_size, 0.0)

    def test_nan_delta_is_ignored(self) -> None:
        state = _viewport()
        state.scroll_to(100.0)

        state.scroll_by(float("nan"))

        self.assertEqual(state.position, 100.0)

    def test_percentage_reads_complete_when_unscrollable(self) -> None:
        state = _viewport(line_count=2)

        self.assertEqual(state.extent, 0.0)
        self.assertEqual(state.percentage(), 1.0)

    def test_set_percentage(self) -> None:
        state = _viewport()

        state.set_percentage(0.25)
        self.assertEqual(state.position, 500.0)
        self.assertEqual(state.percentage(), 0.25)
        state.set_percentage(3.0)
        self.assertEqual(state.position, 2000.0)

    def test_font_scale_change_keeps_top_line(self) -> None:
        state = _viewport()
        state.scroll_to(240.0)

        state.set_font_scale(2.0)

        self.assertEqual(state.position, 480.0)
        self.assertEqual(state.extent, 100 * 48.0 + 400.0 - 800.0)

    def test_viewport_resize_recomputes_extent(self) -> None:
        state = _viewport()
        state.scroll_to(2000.0)

        state.set_viewport_size(1600.0)

        self.assertEqual(state.extent, 1200.0)
        self.assertEqual(state.position, 1200.0)

    def test_random_operation_sequences_keep_position_in_bounds(self) -> None:
        rng = random.Random(1234)
        state = _viewport()
        for _ in range(500):
            choice = rng.randrange(7)
            if choice == 0:
                state.scroll_by(rng.uniform(-3000.0, 3000.0))
            elif choice == 1:
                state.scroll_to(rng.uniform(-500.0, 5000.0))
            elif choice == 2:
                state.page_by(rng.choice([0.2, 0.5, 0.8]), rng.choice([-1, 1]))
            elif choice == 3:
                state.set_content(rng.randrange(0, 400), rng.uniform(0.0, 600.0))
            elif choice == 4:
                state.set_viewport_size(rng.uniform(-10.0, 2000.0))
            elif choice == 5:
                state.set_font_scale(rng.uniform(0.5, 3.0))
            else:
                state.set_extent(rng.choice([float("nan"), -1.0, rng.uniform(0.0, 4000.0)]))
            self.assertTrue(math.isfinite(state.position))
            self.assertGreaterEqual(state.position, 0.0)
            self.assertLessEqual(state.position, state.extent)
            self.assertGreaterEqual(state.extent, 0.0)


if __name__ == "__main__":
    unittest.main()
