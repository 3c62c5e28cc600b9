"""Outline overlay: every outline entry in a centred box, selection highlighted.

Rendering helpers here are presentation-only and side-effect free.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..ansi import REVERSE_OFF, REVERSE_ON, clip_ansi_line, display_width
from ..navigation.outline import OutlineEntry


OUTLINE_TITLE = "outline"
CURRENT_MARKER = "▸ "
_BORDER = "\033[38;5;45m"
_CURRENT = "\033[1;38;5;229m"
_RESET = "\033[0m"


def _visible_range(count: int, selection: int, rows: int) -> tuple[int, int]:
    """Return ``[start, end)`` of entries shown so ``selection`` stays in view."""
    if count <= rows:
        return 0, count
    start = max(0, min(selection - rows // 2, count - rows))
    return start, start + rows


def _entry_text(entry: OutlineEntry, is_current: bool) -> str:
    marker = CURRENT_MARKER if is_current else " " * len(CURRENT_MARKER)
    indent = "  " * max(0, entry.level - 2)
    return f"{marker}{indent}{entry.title}"


def outline_panel_lines(
    entries: Sequence[OutlineEntry],
    selection: int,
    current: int | None,
    width: int,
    height: int,
) -> list[str]:
    """Return exactly ``height`` rows drawing the outline box centred in ``width`` columns.

    ``current`` is the index of the section containing the viewport top; it is
    marked with an arrow. The ``selection`` row is drawn in reverse video.
    """
    if width <= 0 or height <= 0:
        return []

    modal_w = min(72, max(20, width - 4), width)
    modal_h = min(len(entries) + 2, height)
    x = max(0, (width - modal_w) // 2)
    y = max(0, (height - modal_h) // 2)
    inner_w = max(0, modal_w - 2)
    inner_h = max(0, modal_h - 2)
    pad = " " * x

    rows = [""] * height
    if modal_h < 3 or modal_w < 3:
        rows[0] = clip_ansi_line(OUTLINE_TITLE, width)
        return rows

    title = f" {OUTLINE_TITLE} {selection + 1}/{len(entries)} "
    title_w = min(len(title), inner_w)
    left_rule = max(0, (inner_w - title_w) // 2)
    right_rule = max(0, inner_w - title_w - left_rule)
    rows[y] = f"{pad}{_BORDER}╭{'─' * left_rule}\033[1m{title[:title_w]}\033[22m{'─' * right_rule}╮{_RESET}"

    start, end = _visible_range(len(entries), selection, inner_h)
    for offset, idx in enumerate(range(start, end)):
        text = clip_ansi_line(_entry_text(entries[idx], idx == current), inner_w)
        text += " " * max(0, inner_w - display_width(text))
        if idx == selection:
            text = f"{REVERSE_ON}{text}{REVERSE_OFF}"
        elif idx == current:
            text = f"{_CURRENT}{text}{_RESET}"
        rows[y + 1 + offset] = f"{pad}{_BORDER}│{_RESET}{text}{_BORDER}│{_RESET}"
    rows[y + modal_h - 1] = f"{pad}{_BORDER}╰{'─' * inner_w}╯{_RESET}"
    return rows
