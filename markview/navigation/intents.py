"""Navigation intent values dispatched into ``NavigationCoordinator``.

Intents are plain frozen dataclasses so input layers can build them without a
UI harness and tests can replay them deterministically.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScrollBy:
    """Pixel delta, e.g. from a wheel event; negative scrolls up."""

    delta: float


@dataclass(frozen=True)
class ArrowScroll:
    direction: int


@dataclass(frozen=True)
class PageScroll:
    """Page by ``fraction`` of the viewport; ``None`` uses the configured page fraction."""

    direction: int
    fraction: float | None = None


@dataclass(frozen=True)
class HalfPageScroll:
    direction: int


@dataclass(frozen=True)
class ScrollToTop:
    pass


@dataclass(frozen=True)
class ScrollToBottom:
    pass


@dataclass(frozen=True)
class CenterView:
    pass


@dataclass(frozen=True)
class ScrollToPercentage:
    fraction: float


@dataclass(frozen=True)
class Resize:
    viewport_size: float
    line_height_hint: float | None = None


@dataclass(frozen=True)
class SetFontScale:
    scale: float


@dataclass(frozen=True)
class ChangeFontScale:
    delta: float


@dataclass(frozen=True)
class OpenSearch:
    pass


@dataclass(frozen=True)
class SearchInput:
    text: str


@dataclass(frozen=True)
class SearchBackspace:
    pass


@dataclass(frozen=True)
class SetSearchQuery:
    query: str


@dataclass(frozen=True)
class NextMatch:
    pass


@dataclass(frozen=True)
class PreviousMatch:
    pass


@dataclass(frozen=True)
class SearchHistoryPrevious:
    pass


@dataclass(frozen=True)
class SearchHistoryNext:
    pass


@dataclass(frozen=True)
class CloseSearch:
    pass


@dataclass(frozen=True)
class OpenGotoLine:
    pass


@dataclass(frozen=True)
class GotoLineInput:
    text: str


@dataclass(frozen=True)
class GotoLineBackspace:
    pass


@dataclass(frozen=True)
class SubmitGotoLine:
    pass


@dataclass(frozen=True)
class GotoLine:
    """Direct 1-based line jump, e.g. from the CLI or a count prefix."""

    line: int


@dataclass(frozen=True)
class ToggleHelp:
    pass


@dataclass(frozen=True)
class Cancel:
    pass


@dataclass(frozen=True)
class SetMark:
    key: str


@dataclass(frozen=True)
class JumpToMark:
    key: str


@dataclass(frozen=True)
class JumpToHeading:
    """Jump to the outline entry at 0-based ``index``."""

    index: int


@dataclass(frozen=True)
class NextHeading:
    pass


@dataclass(frozen=True)
class PreviousHeading:
    pass


@dataclass(frozen=True)
class ToggleOutline:
    pass


@dataclass(frozen=True)
class MoveOutlineSelection:
    """Move the outline overlay's selection by ``step`` entries, clamped at the ends."""

    step: int


@dataclass(frozen=True)
class SubmitOutline:
    """Jump to the selected outline entry and close the overlay."""


Intent = (
    ScrollBy
    | ArrowScroll
    | PageScroll
    | HalfPageScroll
    | ScrollToTop
    | ScrollToBottom
    | CenterView
    | ScrollToPercentage
    | Resize
    | SetFontScale
    | ChangeFontScale
    | OpenSearch
    | SearchInput
    | SearchBackspace
    | SetSearchQuery
    | NextMatch
    | PreviousMatch
    | SearchHistoryPrevious
    | SearchHistoryNext
    | CloseSearch
    | OpenGotoLine
    | GotoLineInput
    | GotoLineBackspace
    | SubmitGotoLine
    | GotoLine
    | ToggleHelp
    | Cancel
    | SetMark
    | JumpToMark
    | JumpToHeading
    | NextHeading
    | PreviousHeading
    | ToggleOutline
    | MoveOutlineSelection
    | SubmitOutline
)
