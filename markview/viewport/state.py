"""Scroll position ownership and bounds enforcement.

``ViewportState`` is the only object that stores the scroll position. Every
public mutator leaves ``0 <= position <= extent`` true; each mutation computes
the new value first and assigns it once, so no caller observes a torn state.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

from .metrics import ContentMetrics

logger = logging.getLogger(__name__)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _sanitize_size(value: float) -> float:
    """Degenerate geometry (negative, NaN, infinite) collapses to zero."""
    if not math.isfinite(value) or value <= 0:
        return 0.0
    return float(value)


class ViewportState:
    """Scroll position, viewport size, and content extent for one document."""

    def __init__(
        self,
        metrics: ContentMetrics,
        viewport_size: float,
        line_count: int = 0,
        structural_weight: float = 0.0,
        font_scale: float = 1.0,
    ) -> None:
        self.metrics = metrics
        self.position = 0.0
        self.extent = 0.0
        self.viewport_size = _sanitize_size(viewport_size)
        self.line_count = max(0, line_count)
        self.structural_weight = max(0.0, structural_weight)
        self.font_scale = font_scale if math.isfinite(font_scale) and font_scale > 0 else 1.0
        self._recompute_extent()

    @property
    def content_height(self) -> float:
        return self.metrics.estimate(self.line_count, self.font_scale, self.structural_weight, self.viewport_size)

    def _recompute_extent(self) -> None:
        self.set_extent(self.content_height - self.viewport_size)

    def scroll_by(self, delta: float) -> None:
        """Move by ``delta``; negative values scroll toward the document start."""
        if math.isnan(delta):
            return
        self.position = _clamp(self.position + delta, 0.0, self.extent)

    def scroll_to(self, target: float) -> None:
        """Move to an absolute offset, clamped into ``[0, extent]``."""
        if math.isnan(target):
            return
        self.position = _clamp(target, 0.0, self.extent)

    def scroll_to_top(self) -> None:
        self.position = 0.0

    def scroll_to_bottom(self) -> None:
        self.position = self.extent

    def page_by(self, fraction: float, direction: int) -> None:
        """Scroll ``fraction`` of a viewport in ``direction`` (+1 down, -1 up)."""
        self.scroll_by(direction * self.viewport_size * fraction)

    def set_percentage(self, fraction: float) -> None:
        if math.isnan(fraction):
            return
        self.scroll_to(_clamp(fraction, 0.0, 1.0) * self.extent)

    def set_extent(self, new_extent: float) -> None:
        """Replace the extent and re-clamp position into the new bounds."""
        extent = new_extent if math.isfinite(new_extent) else 0.0
        extent = max(0.0, extent)
        position = _clamp(self.position, 0.0, extent)
        if position != self.position:
            logger.debug("Re-clamped position %.1f -> %.1f (extent %.1f)", self.position, position, extent)
        self.extent = extent
        self.position = position

    def _reflow(self, apply: Callable[[], None]) -> None:
        """Apply a line-height change keeping the same source line at the top."""
        old_line_height = self.metrics.average_line_height(self.font_scale)
        apply()
        new_line_height = self.metrics.average_line_height(self.font_scale)
        position = self.position
        if old_line_height > 0 and new_line_height != old_line_height:
            position = position * (new_line_height / old_line_height)
        extent = max(0.0, self.content_height - self.viewport_size)
        self.extent = extent
        self.position = _clamp(position, 0.0, extent)

    def set_viewport_size(self, new_size: float, line_height_hint: float | None = None) -> None:
        """Resize the viewport; a rendered line-height hint refines the estimate."""
        size = _sanitize_size(new_size)

        def apply() -> None:
            self.viewport_size = size
            if line_height_hint is not None:
                self.metrics.set_line_height_hint(line_height_hint)

        self._reflow(apply)

    def set_content(self, line_count: int, structural_weight: float) -> None:
        self.line_count = max(0, line_count)
        self.structural_weight = max(0.0, structural_weight) if math.isfinite(structural_weight) else 0.0
        self._recompute_extent()

    def set_font_scale(self, font_scale: float) -> None:
        if not math.isfinite(font_scale) or font_scale <= 0:
            return

        def apply() -> None:
            self.font_scale = font_scale

        self._reflow(apply)

    def percentage(self) -> float:
        """Return scroll progress in ``[0, 1]``; an unscrollable document reads as complete."""
        if self.extent <= 0:
            return 1.0
        return self.position / self.extent
