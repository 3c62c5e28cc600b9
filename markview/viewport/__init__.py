"""Viewport geometry: content-height estimation and bounded scroll state."""

from .metrics import ContentMetrics, MetricsSettings
from .state import ViewportState

__all__ = ["ContentMetrics", "MetricsSettings", "ViewportState"]
