"""Content-height estimation from a structural document summary.

The estimate is a documented approximation, not layout: every source line is
assumed to occupy one average line height, and a constant structural padding
(plus a per-image allowance) absorbs headings, code blocks, tables, and images
that render taller than plain text.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..document.summary import DocumentSummary


@dataclass(frozen=True)
class MetricsSettings:
    """Tunable constants for height estimation."""

    base_text_size: float = 16.0
    line_height_multiplier: float = 1.5
    structural_padding: float = 200.0
    image_padding: float = 500.0


def _finite_nonnegative(value: float) -> float:
    if not math.isfinite(value):
        return 0.0
    return max(0.0, float(value))


class ContentMetrics:
    """Line-based height estimator shared by viewport, search, and outline."""

    def __init__(self, settings: MetricsSettings | None = None, line_height_hint: float | None = None) -> None:
        self.settings = settings if settings is not None else MetricsSettings()
        self.line_height_hint = line_height_hint

    def set_line_height_hint(self, hint: float | None) -> None:
        """Record the renderer's measured line height; non-positive hints are dropped."""
        if hint is None or not math.isfinite(hint) or hint <= 0:
            self.line_height_hint = None
            return
        self.line_height_hint = float(hint)

    def average_line_height(self, font_scale: float) -> float:
        """Return the estimated height of one source line at ``font_scale``.

        A rendered hint only ever raises the estimate so extent is never
        under-estimated.
        """
        scale = _finite_nonnegative(font_scale)
        estimated = self.settings.base_text_size * scale * self.settings.line_height_multiplier
        if self.line_height_hint is not None:
            return max(estimated, self.line_height_hint)
        return estimated

    def structural_weight(self, summary: DocumentSummary) -> float:
        """Return the fixed padding plus the per-image allowance for ``summary``."""
        return self.settings.structural_padding + self.settings.image_padding * max(0, summary.image_count)

    def estimate(
        self,
        line_count: int,
        font_scale: float,
        structural_weight: float,
        viewport_size: float,
    ) -> float:
        """Estimate total content height.

        Empty documents report exactly one viewport of content. Non-empty ones
        never report less than one viewport.
        """
        viewport = _finite_nonnegative(viewport_size)
        if line_count <= 0:
            return viewport
        height = line_count * self.average_line_height(font_scale) + _finite_nonnegative(structural_weight)
        return max(viewport, height)

    def offset_for_line(self, line: int, font_scale: float) -> float:
        """Map a 0-based source line to its estimated top offset."""
        return max(0, line) * self.average_line_height(font_scale)

    def line_for_offset(self, offset: float, font_scale: float) -> int:
        """Map an offset back to the 0-based source line it falls on."""
        line_height = self.average_line_height(font_scale)
        if line_height <= 0 or not math.isfinite(offset):
            return 0
        return max(0, int(offset // line_height))
