"""Navigation state: marks, search, outline, and the coordinator that owns them."""

from .coordinator import FontSettings, Mode, NavigationCoordinator, ScrollSettings
from .marks import MarkRegistry, is_named_mark_key
from .outline import OutlineEntry, OutlineIndex
from .search import SearchCursor, SearchMatch, find_matches

__all__ = [
    "FontSettings",
    "MarkRegistry",
    "Mode",
    "NavigationCoordinator",
    "OutlineEntry",
    "OutlineIndex",
    "ScrollSettings",
    "SearchCursor",
    "SearchMatch",
    "find_matches",
    "is_named_mark_key",
]
