"""Heading outline used for section navigation and current-section lookup."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Callable
from dataclasses import dataclass, replace

from ..document.summary import DocumentSummary

OUTLINE_MIN_LEVEL = 2
OUTLINE_MAX_LEVEL = 4


@dataclass(frozen=True)
class OutlineEntry:
    level: int
    title: str
    line: int
    position: float


class OutlineIndex:
    """Ordered level 2-4 headings with estimated scroll positions."""

    def __init__(self, position_for_line: Callable[[int], float]) -> None:
        self._position_for_line = position_for_line
        self.entries: list[OutlineEntry] = []
        self._positions: list[float] = []

    def _set_entries(self, entries: list[OutlineEntry]) -> None:
        # Line order already implies non-decreasing positions; the running max
        # keeps bisect valid even if an injected estimator is not monotonic.
        ordered: list[OutlineEntry] = []
        floor = 0.0
        for entry in entries:
            floor = max(floor, entry.position)
            ordered.append(entry if entry.position == floor else replace(entry, position=floor))
        self.entries = ordered
        self._positions = [entry.position for entry in ordered]

    def rebuild(self, summary: DocumentSummary) -> None:
        """Replace the outline with ``summary``'s headings in document order."""
        self._set_entries(
            [
                OutlineEntry(
                    level=heading.level,
                    title=heading.title,
                    line=heading.line,
                    position=self._position_for_line(heading.line),
                )
                for heading in sorted(summary.headings, key=lambda node: node.line)
                if OUTLINE_MIN_LEVEL <= heading.level <= OUTLINE_MAX_LEVEL
            ]
        )

    def reposition(self) -> None:
        """Re-estimate positions after the line-height estimate changed."""
        self._set_entries([replace(entry, position=self._position_for_line(entry.line)) for entry in self.entries])

    def current_section(self, position: float) -> OutlineEntry | None:
        """Return the last entry at or above ``position``, or ``None`` before the first heading."""
        idx = bisect_right(self._positions, position)
        if idx == 0:
            return None
        return self.entries[idx - 1]

    def current_index(self, position: float) -> int | None:
        idx = bisect_right(self._positions, position)
        return idx - 1 if idx > 0 else None

    def jump_target(self, entry: OutlineEntry) -> float:
        return entry.position

    def next_entry(self, position: float) -> OutlineEntry | None:
        """Return the first entry strictly below ``position``."""
        idx = bisect_right(self._positions, position)
        if idx >= len(self.entries):
            return None
        return self.entries[idx]

    def previous_entry(self, position: float) -> OutlineEntry | None:
        """Return the last entry strictly above ``position``."""
        idx = bisect_left(self._positions, position)
        if idx == 0:
            return None
        return self.entries[idx - 1]

    def __len__(self) -> int:
        return len(self.entries)
