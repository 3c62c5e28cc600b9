"""Navigation coordinator: the single mutation entry point for a document session.

Input layers translate keys into intent values and call ``dispatch``. The
coordinator owns the viewport, marks, search cursor, and outline; each resolved
navigation intent ends in exactly one ``ViewportState`` mutator call.

Document changes arrive as ``invalidate_document`` followed by
``reload_document``. Intents dispatched in between are queued and replayed
against the recomputed bounds.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ..document.summary import DocumentSummary
from ..errors import LineNumberError
from ..viewport.metrics import ContentMetrics, MetricsSettings
from ..viewport.state import ViewportState
from . import intents as it
from .marks import MarkRegistry, is_named_mark_key
from .outline import OutlineEntry, OutlineIndex
from .search import SearchCursor

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    NORMAL = "normal"
    SEARCHING = "searching"
    GOTO_LINE = "goto_line"
    HELP = "help"
    OUTLINE = "outline"


@dataclass(frozen=True)
class ScrollSettings:
    """Scroll step sizes; fractions are of the viewport height."""

    page_fraction: float = 0.8
    space_fraction: float = 0.2
    arrow_increment: float = 20.0


@dataclass(frozen=True)
class FontSettings:
    font_scale: float = 1.0
    min_font_scale: float = 0.5
    max_font_scale: float = 4.0
    font_scale_step: float = 0.125


def parse_line_number(text: str) -> int:
    """Parse goto-line input into a positive 1-based line number."""
    stripped = text.strip()
    if not stripped:
        raise LineNumberError("Enter a line number")
    if not stripped.isdigit():
        raise LineNumberError(f"Not a line number: {stripped!r}")
    line = int(stripped)
    if line <= 0:
        raise LineNumberError("Line number must be greater than 0")
    return line


def validate_line_number(line: int, total_lines: int) -> None:
    if line <= 0:
        raise LineNumberError("Line number must be greater than 0")
    if line > total_lines:
        raise LineNumberError(f"Line number {line} exceeds total lines ({total_lines})")


def _direction(value: int) -> int:
    return 1 if value >= 0 else -1


class NavigationCoordinator:
    """Owns all navigation state for one open document."""

    def __init__(
        self,
        summary: DocumentSummary,
        viewport_size: float,
        metrics_settings: MetricsSettings | None = None,
        scroll: ScrollSettings | None = None,
        font: FontSettings | None = None,
        line_height_hint: float | None = None,
    ) -> None:
        self.scroll_settings = scroll if scroll is not None else ScrollSettings()
        self.font_settings = font if font is not None else FontSettings()
        self.metrics = ContentMetrics(metrics_settings, line_height_hint)
        self.summary = summary
        self.viewport = ViewportState(
            self.metrics,
            viewport_size,
            line_count=summary.line_count,
            structural_weight=self.metrics.structural_weight(summary),
            font_scale=self._clamp_font_scale(self.font_settings.font_scale),
        )
        self.marks = MarkRegistry()
        self.search = SearchCursor(self.position_for_line, summary.text)
        self.outline = OutlineIndex(self.position_for_line)
        self.outline.rebuild(summary)
        self.mode = Mode.NORMAL
        self.pending_input = ""
        self.outline_selection = 0
        self.status_message = ""
        self._stale = False
        self._queued: deque[it.Intent] = deque()
        self._handlers: dict[type, Callable[..., bool]] = {
            it.ScrollBy: self._scroll_by,
            it.ArrowScroll: self._arrow_scroll,
            it.PageScroll: self._page_scroll,
            it.HalfPageScroll: self._half_page_scroll,
            it.ScrollToTop: self._scroll_to_top,
            it.ScrollToBottom: self._scroll_to_bottom,
            it.CenterView: self._center_view,
            it.ScrollToPercentage: self._scroll_to_percentage,
            it.Resize: self._resize,
            it.SetFontScale: self._set_font_scale,
            it.ChangeFontScale: self._change_font_scale,
            it.OpenSearch: self._open_search,
            it.SearchInput: self._search_input,
            it.SearchBackspace: self._search_backspace,
            it.SetSearchQuery: self._set_search_query,
            it.NextMatch: self._next_match,
            it.PreviousMatch: self._previous_match,
            it.SearchHistoryPrevious: self._search_history_previous,
            it.SearchHistoryNext: self._search_history_next,
            it.CloseSearch: self._close_search,
            it.OpenGotoLine: self._open_goto_line,
            it.GotoLineInput: self._goto_line_input,
            it.GotoLineBackspace: self._goto_line_backspace,
            it.SubmitGotoLine: self._submit_goto_line,
            it.GotoLine: self._goto_line,
            it.ToggleHelp: self._toggle_help,
            it.Cancel: self._cancel,
            it.SetMark: self._set_mark,
            it.JumpToMark: self._jump_to_mark,
            it.JumpToHeading: self._jump_to_heading,
            it.NextHeading: self._next_heading,
            it.PreviousHeading: self._previous_heading,
            it.ToggleOutline: self._toggle_outline,
            it.MoveOutlineSelection: self._move_outline_selection,
            it.SubmitOutline: self._submit_outline,
        }

    # -- queries exposed to presentation -------------------------------------------------

    @property
    def position(self) -> float:
        return self.viewport.position

    @property
    def extent(self) -> float:
        return self.viewport.extent

    @property
    def line_height(self) -> float:
        return self.metrics.average_line_height(self.viewport.font_scale)

    @property
    def font_scale(self) -> float:
        return self.viewport.font_scale

    @property
    def match_count(self) -> int:
        return self.search.match_count

    @property
    def current_match_number(self) -> int | None:
        return self.search.current_match_number

    @property
    def is_stale(self) -> bool:
        return self._stale

    def percentage(self) -> float:
        return self.viewport.percentage()

    def current_section(self) -> OutlineEntry | None:
        return self.outline.current_section(self.viewport.position)

    def mark_keys(self) -> list[str]:
        return self.marks.keys()

    def position_for_line(self, line: int) -> float:
        return self.metrics.offset_for_line(line, self.viewport.font_scale)

    def current_line(self) -> int:
        """Return the 1-based source line at the top of the viewport."""
        line = self.metrics.line_for_offset(self.viewport.position, self.viewport.font_scale) + 1
        return max(1, min(line, max(1, self.summary.line_count)))

    # -- document lifecycle --------------------------------------------------------------

    def load_document(self, summary: DocumentSummary) -> None:
        """Start a new document session: marks and search reset, position returns to 0."""
        self.summary = summary
        self.marks.clear()
        self.search.clear()
        self.search.set_document(summary.text)
        self.outline.rebuild(summary)
        self.viewport.set_content(summary.line_count, self.metrics.structural_weight(summary))
        self.viewport.scroll_to_top()
        self.mode = Mode.NORMAL
        self.pending_input = ""
        self.outline_selection = 0
        self.status_message = ""
        self._stale = False
        self._queued.clear()
        logger.debug("Loaded document with %d lines", summary.line_count)

    def invalidate_document(self) -> None:
        """Mark bounds stale; intents are queued until ``reload_document``."""
        self._stale = True

    def reload_document(self, summary: DocumentSummary) -> None:
        """Apply a changed version of the same document, then replay queued intents."""
        self.summary = summary
        self.viewport.set_content(summary.line_count, self.metrics.structural_weight(summary))
        self.outline.rebuild(summary)
        if self.outline.entries:
            self.outline_selection = min(self.outline_selection, len(self.outline) - 1)
        else:
            self.outline_selection = 0
            if self.mode == Mode.OUTLINE:
                self._set_mode(Mode.NORMAL)
        self.search.set_document(summary.text, self.viewport.position)
        self.marks.clamp_to(self.viewport.extent)
        self._stale = False
        logger.debug(
            "Reloaded document: lines=%d extent=%.1f position=%.1f queued=%d",
            summary.line_count,
            self.viewport.extent,
            self.viewport.position,
            len(self._queued),
        )
        while self._queued and not self._stale:
            self.dispatch(self._queued.popleft())

    # -- dispatch ------------------------------------------------------------------------

    def dispatch(self, intent: it.Intent) -> bool:
        """Apply one intent and return whether it was accepted.

        ``False`` covers goto-line validation failures, empty results such as an
        unset mark, and intents not valid in the current mode. Intents received
        while the document is stale are queued and reported as accepted.
        """
        if self._stale:
            self._queued.append(intent)
            logger.debug("Queued %r while document is stale", intent)
            return True
        handler = self._handlers.get(type(intent))
        if handler is None:
            raise TypeError(f"Unsupported navigation intent: {intent!r}")
        self.status_message = ""
        return handler(intent)

    def _set_mode(self, mode: Mode) -> None:
        if mode != self.mode:
            logger.debug("Mode %s -> %s", self.mode.value, mode.value)
        self.mode = mode

    # -- scrolling -----------------------------------------------------------------------

    def _scroll_by(self, intent: it.ScrollBy) -> bool:
        self.viewport.scroll_by(intent.delta)
        return True

    def _arrow_scroll(self, intent: it.ArrowScroll) -> bool:
        self.viewport.scroll_by(_direction(intent.direction) * self.scroll_settings.arrow_increment)
        return True

    def _page_scroll(self, intent: it.PageScroll) -> bool:
        fraction = intent.fraction if intent.fraction is not None else self.scroll_settings.page_fraction
        self.viewport.page_by(fraction, _direction(intent.direction))
        return True

    def _half_page_scroll(self, intent: it.HalfPageScroll) -> bool:
        self.viewport.page_by(0.5, _direction(intent.direction))
        return True

    def _scroll_to_top(self, _intent: it.ScrollToTop) -> bool:
        self.viewport.scroll_to_top()
        return True

    def _scroll_to_bottom(self, _intent: it.ScrollToBottom) -> bool:
        self.viewport.scroll_to_bottom()
        return True

    def _center_on(self, offset: float) -> None:
        self.viewport.scroll_to(offset - self.viewport.viewport_size / 2)

    def _center_view(self, _intent: it.CenterView) -> bool:
        """Centre the current search match; without one the view stays put."""
        target = self.search.current_match_position()
        if target is None:
            self.status_message = "No match to centre"
            return False
        self._center_on(target)
        return True

    def _scroll_to_percentage(self, intent: it.ScrollToPercentage) -> bool:
        self.viewport.set_percentage(intent.fraction)
        return True

    # -- reflow --------------------------------------------------------------------------

    def _after_reflow(self, old_line_height: float) -> None:
        new_line_height = self.line_height
        if old_line_height > 0 and new_line_height != old_line_height:
            self.marks.rescale(new_line_height / old_line_height)
            self.outline.reposition()
        self.marks.clamp_to(self.viewport.extent)

    def _resize(self, intent: it.Resize) -> bool:
        old_line_height = self.line_height
        self.viewport.set_viewport_size(intent.viewport_size, line_height_hint=intent.line_height_hint)
        self._after_reflow(old_line_height)
        return True

    def _clamp_font_scale(self, scale: float) -> float:
        settings = self.font_settings
        return max(settings.min_font_scale, min(settings.max_font_scale, scale))

    def _set_font_scale(self, intent: it.SetFontScale) -> bool:
        scale = self._clamp_font_scale(intent.scale)
        if scale == self.viewport.font_scale:
            return False
        old_line_height = self.line_height
        self.viewport.set_font_scale(scale)
        self._after_reflow(old_line_height)
        logger.debug("Font scale set to %.3f", scale)
        return True

    def _change_font_scale(self, intent: it.ChangeFontScale) -> bool:
        return self._set_font_scale(it.SetFontScale(self.viewport.font_scale + intent.delta))

    # -- search --------------------------------------------------------------------------

    def _scroll_to_current_match(self) -> bool:
        target = self.search.current_match_position()
        if target is None:
            if self.search.query:
                self.status_message = f"No matches for {self.search.query!r}"
            return False
        self._center_on(target)
        return True

    def _open_search(self, _intent: it.OpenSearch) -> bool:
        if self.mode != Mode.NORMAL:
            return False
        self.search.clear()
        self._set_mode(Mode.SEARCHING)
        return True

    def _apply_query(self, query: str) -> bool:
        self.search.set_query(query, self.viewport.position)
        if not query:
            return True
        return self._scroll_to_current_match()

    def _search_input(self, intent: it.SearchInput) -> bool:
        if self.mode != Mode.SEARCHING:
            return False
        return self._apply_query(self.search.query + intent.text)

    def _search_backspace(self, _intent: it.SearchBackspace) -> bool:
        if self.mode != Mode.SEARCHING:
            return False
        return self._apply_query(self.search.query[:-1])

    def _set_search_query(self, intent: it.SetSearchQuery) -> bool:
        if self.mode not in {Mode.NORMAL, Mode.SEARCHING}:
            return False
        return self._apply_query(intent.query)

    def _step_match(self, forward: bool) -> bool:
        """Step through matches; with no live query, resume the last committed one.

        A resumed search starts at the first match at or below the viewport top,
        so ``n`` lands there and ``N`` lands on the match before it.
        """
        if self.mode not in {Mode.NORMAL, Mode.SEARCHING}:
            return False
        if not self.search.query:
            if not self.search.history:
                self.status_message = "No active search"
                return False
            self.search.set_query(self.search.history[-1], self.viewport.position)
            if not forward:
                self.search.previous()
        elif forward:
            self.search.next()
        else:
            self.search.previous()
        return self._scroll_to_current_match()

    def _next_match(self, _intent: it.NextMatch) -> bool:
        return self._step_match(forward=True)

    def _previous_match(self, _intent: it.PreviousMatch) -> bool:
        return self._step_match(forward=False)

    def _recall_history(self, query: str | None) -> bool:
        if query is None:
            return False
        self._apply_query(query)
        return True

    def _search_history_previous(self, _intent: it.SearchHistoryPrevious) -> bool:
        if self.mode != Mode.SEARCHING:
            return False
        return self._recall_history(self.search.history_previous())

    def _search_history_next(self, _intent: it.SearchHistoryNext) -> bool:
        if self.mode != Mode.SEARCHING:
            return False
        return self._recall_history(self.search.history_next())

    def _close_search(self, _intent: it.CloseSearch) -> bool:
        if self.mode != Mode.SEARCHING:
            return False
        self.search.commit()
        self.search.clear()
        self._set_mode(Mode.NORMAL)
        return True

    # -- goto line -----------------------------------------------------------------------

    def _open_goto_line(self, _intent: it.OpenGotoLine) -> bool:
        if self.mode != Mode.NORMAL:
            return False
        self.pending_input = ""
        self._set_mode(Mode.GOTO_LINE)
        return True

    def _goto_line_input(self, intent: it.GotoLineInput) -> bool:
        if self.mode != Mode.GOTO_LINE:
            return False
        digits = "".join(ch for ch in intent.text if ch.isdigit())
        if not digits:
            return False
        self.pending_input += digits
        return True

    def _goto_line_backspace(self, _intent: it.GotoLineBackspace) -> bool:
        if self.mode != Mode.GOTO_LINE:
            return False
        self.pending_input = self.pending_input[:-1]
        return True

    def _scroll_to_line(self, line: int) -> None:
        """Centre 1-based ``line``; out-of-range lines are clamped into the document."""
        line = max(1, min(line, max(1, self.summary.line_count)))
        self._center_on(self.position_for_line(line - 1))

    def _submit_goto_line(self, _intent: it.SubmitGotoLine) -> bool:
        if self.mode != Mode.GOTO_LINE:
            return False
        try:
            line = parse_line_number(self.pending_input)
            validate_line_number(line, self.summary.line_count)
        except LineNumberError as exc:
            self.status_message = str(exc)
            logger.debug("Rejected goto-line input %r: %s", self.pending_input, exc)
            return False
        self._scroll_to_line(line)
        self.pending_input = ""
        self._set_mode(Mode.NORMAL)
        return True

    def _goto_line(self, intent: it.GotoLine) -> bool:
        if self.mode != Mode.NORMAL:
            return False
        try:
            validate_line_number(intent.line, self.summary.line_count)
        except LineNumberError as exc:
            self.status_message = str(exc)
            return False
        self._scroll_to_line(intent.line)
        return True

    # -- overlays and cancel -------------------------------------------------------------

    def _toggle_help(self, _intent: it.ToggleHelp) -> bool:
        if self.mode == Mode.HELP:
            self._set_mode(Mode.NORMAL)
            return True
        if self.mode != Mode.NORMAL:
            return False
        self._set_mode(Mode.HELP)
        return True

    def _cancel(self, _intent: it.Cancel) -> bool:
        if self.mode == Mode.SEARCHING:
            return self._close_search(it.CloseSearch())
        if self.mode == Mode.NORMAL:
            if not self.search.query:
                return False
            self.search.clear()
            return True
        self.pending_input = ""
        self._set_mode(Mode.NORMAL)
        return True

    # -- marks and outline ---------------------------------------------------------------

    def _set_mark(self, intent: it.SetMark) -> bool:
        if self.mode != Mode.NORMAL:
            return False
        if not is_named_mark_key(intent.key):
            self.status_message = f"Invalid mark key {intent.key!r}"
            return False
        self.marks.set_mark(intent.key, self.viewport.position)
        self.status_message = f"Mark '{intent.key}' set"
        return True

    def _jump_to_mark(self, intent: it.JumpToMark) -> bool:
        if self.mode != Mode.NORMAL:
            return False
        target = self.marks.jump_to_mark(intent.key)
        if target is None:
            self.status_message = f"Mark '{intent.key}' not set"
            return False
        self.viewport.scroll_to(target)
        return True

    def _jump_to_entry(self, entry: OutlineEntry | None, missing_message: str) -> bool:
        if entry is None:
            self.status_message = missing_message
            return False
        self.viewport.scroll_to(self.outline.jump_target(entry))
        return True

    def _jump_to_heading(self, intent: it.JumpToHeading) -> bool:
        if self.mode != Mode.NORMAL:
            return False
        entry = self.outline.entries[intent.index] if 0 <= intent.index < len(self.outline) else None
        return self._jump_to_entry(entry, f"No heading {intent.index + 1}")

    def _next_heading(self, _intent: it.NextHeading) -> bool:
        if self.mode != Mode.NORMAL:
            return False
        return self._jump_to_entry(self.outline.next_entry(self.viewport.position), "No next heading")

    def _previous_heading(self, _intent: it.PreviousHeading) -> bool:
        if self.mode != Mode.NORMAL:
            return False
        return self._jump_to_entry(self.outline.previous_entry(self.viewport.position), "No previous heading")

    # -- outline overlay -----------------------------------------------------------------

    def _toggle_outline(self, _intent: it.ToggleOutline) -> bool:
        """Open the outline overlay with the current section selected, or close it."""
        if self.mode == Mode.OUTLINE:
            self._set_mode(Mode.NORMAL)
            return True
        if self.mode != Mode.NORMAL:
            return False
        if not self.outline.entries:
            self.status_message = "No headings"
            return False
        current = self.outline.current_index(self.viewport.position)
        self.outline_selection = current if current is not None else 0
        self._set_mode(Mode.OUTLINE)
        return True

    def _move_outline_selection(self, intent: it.MoveOutlineSelection) -> bool:
        if self.mode != Mode.OUTLINE:
            return False
        last = len(self.outline) - 1
        self.outline_selection = max(0, min(last, self.outline_selection + intent.step))
        return True

    def _submit_outline(self, _intent: it.SubmitOutline) -> bool:
        if self.mode != Mode.OUTLINE:
            return False
        self._set_mode(Mode.NORMAL)
        return self._jump_to_heading(it.JumpToHeading(self.outline_selection))
