"""Cyclic in-document search cursor with query history.

Matches are case-insensitive literal occurrences found by scanning the
document top to bottom, so the list is always in (line, column) order.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

MAX_SEARCH_HISTORY = 100


@dataclass(frozen=True)
class SearchMatch:
    """One match; ``line`` and ``column`` are 0-based."""

    line: int
    column: int
    length: int


def find_matches(query: str, text: str) -> list[SearchMatch]:
    """Return non-overlapping case-insensitive occurrences of ``query``.

    Columns and lengths index the original line, so they stay valid for
    characters whose case folding changes length (``ß``, ``İ``).
    """
    if not query:
        return []

    pattern = re.compile(re.escape(query), re.IGNORECASE)
    matches: list[SearchMatch] = []
    for line_idx, line in enumerate(text.splitlines()):
        for found in pattern.finditer(line):
            matches.append(SearchMatch(line=line_idx, column=found.start(), length=found.end() - found.start()))
    return matches


class SearchCursor:
    """Query, ordered matches, and a current index that wraps in both directions.

    ``position_for_line`` maps a 0-based line to a scroll offset; it is the
    same estimate the viewport uses, injected so the cursor never holds a
    reference to the viewport itself.
    """

    def __init__(self, position_for_line: Callable[[int], float], text: str = "") -> None:
        self._position_for_line = position_for_line
        self._text = text
        self.query = ""
        self.matches: list[SearchMatch] = []
        self.current_index: int | None = None
        self.history: list[str] = []
        self._history_index: int | None = None

    def _rescan(self, anchor_position: float) -> None:
        self.matches = find_matches(self.query, self._text)
        if not self.matches:
            self.current_index = None
            return
        for idx, match in enumerate(self.matches):
            if self._position_for_line(match.line) >= anchor_position:
                self.current_index = idx
                return
        self.current_index = 0

    def set_query(self, text: str, anchor_position: float = 0.0) -> None:
        """Replace the query and select the first match at or after ``anchor_position``."""
        self.query = text
        self._rescan(anchor_position)

    def set_document(self, text: str, anchor_position: float = 0.0) -> None:
        """Swap in reloaded document text and rescan with the current query."""
        self._text = text
        self._rescan(anchor_position)

    def next(self) -> SearchMatch | None:
        if not self.matches:
            return None
        if self.current_index is None:
            self.current_index = 0
        else:
            self.current_index = (self.current_index + 1) % len(self.matches)
        return self.matches[self.current_index]

    def previous(self) -> SearchMatch | None:
        if not self.matches:
            return None
        if self.current_index is None:
            self.current_index = len(self.matches) - 1
        else:
            self.current_index = (self.current_index - 1) % len(self.matches)
        return self.matches[self.current_index]

    def current_match(self) -> SearchMatch | None:
        if self.current_index is None:
            return None
        return self.matches[self.current_index]

    def current_match_position(self) -> float | None:
        match = self.current_match()
        if match is None:
            return None
        return self._position_for_line(match.line)

    @property
    def match_count(self) -> int:
        return len(self.matches)

    @property
    def current_match_number(self) -> int | None:
        """1-based index of the current match for display."""
        if self.current_index is None:
            return None
        return self.current_index + 1

    def commit(self) -> None:
        """Push the current query onto history, skipping blanks and adjacent repeats."""
        self._history_index = None
        query = self.query.strip()
        if not query:
            return
        if self.history and self.history[-1] == query:
            return
        self.history.append(query)
        overflow = len(self.history) - MAX_SEARCH_HISTORY
        if overflow > 0:
            del self.history[:overflow]

    def clear(self) -> None:
        """Drop query and matches; history survives."""
        self.query = ""
        self.matches = []
        self.current_index = None
        self._history_index = None

    def history_previous(self) -> str | None:
        """Step to an older history entry and return it, or ``None`` when history is empty."""
        if not self.history:
            return None
        if self._history_index is None:
            self._history_index = len(self.history) - 1
        else:
            self._history_index = max(0, self._history_index - 1)
        return self.history[self._history_index]

    def history_next(self) -> str | None:
        """Step to a newer history entry; past the newest returns an empty query."""
        if self._history_index is None:
            return None
        if self._history_index + 1 >= len(self.history):
            self._history_index = None
            return ""
        self._history_index += 1
        return self.history[self._history_index]
