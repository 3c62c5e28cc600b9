"""Screen composition for the terminal viewer.

``build_frame_lines`` is a pure function of coordinator state and the styled
document; ``render_frame`` is the only place that writes to the terminal.
Each source line occupies one row, and the top row is derived from the scroll
position as ``floor(position / line_height)``.
"""

from __future__ import annotations

import math
import os
import sys
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path

from ..ansi import REVERSE_OFF, REVERSE_ON, clip_ansi_line, highlight_spans
from ..document.source import sanitize_terminal_text
from ..document.summary import DocumentSummary, code_fences
from ..navigation.coordinator import Mode, NavigationCoordinator
from .help import help_modal_lines
from .outline import outline_panel_lines
from .highlight import DEFAULT_STYLE, highlight_code

HEADING_STYLES = {
    1: "\033[1;4;38;5;45m",
    2: "\033[1;38;5;81m",
    3: "\033[1;38;5;117m",
}
DEFAULT_HEADING_STYLE = "\033[1;38;5;152m"
CURRENT_MATCH_ON = "\033[1;30;43m"
CURRENT_MATCH_OFF = "\033[22;39;49m"
RESET = "\033[0m"


@dataclass(frozen=True)
class RenderedDocument:
    """Raw source lines paired with their styled terminal rows."""

    raw_lines: tuple[str, ...]
    styled_lines: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.raw_lines)


def prepare_document(summary: DocumentSummary, style: str = DEFAULT_STYLE, no_color: bool = False) -> RenderedDocument:
    """Style every source line once: headings coloured, fenced code highlighted."""
    raw_lines = summary.lines
    styled = [sanitize_terminal_text(line) for line in raw_lines]
    if no_color:
        return RenderedDocument(tuple(raw_lines), tuple(styled))

    for fence in code_fences(summary.text):
        body = styled[fence.start : fence.end]
        if not body:
            continue
        highlighted = highlight_code("\n".join(body), fence.language, style)
        if len(highlighted) == len(body):
            styled[fence.start : fence.end] = highlighted

    for heading in summary.headings:
        if 0 <= heading.line < len(styled):
            code = HEADING_STYLES.get(heading.level, DEFAULT_HEADING_STYLE)
            styled[heading.line] = f"{code}{styled[heading.line]}{RESET}"

    return RenderedDocument(tuple(raw_lines), tuple(styled))


def render_document_text(document: RenderedDocument) -> str:
    """Return the whole styled document for non-interactive output."""
    out: list[str] = []
    for line in document.styled_lines:
        out.append(line)
        if "\033" in line:
            out.append(RESET)
        out.append("\n")
    return "".join(out)


def top_row(coordinator: NavigationCoordinator) -> int:
    line_height = coordinator.line_height
    if line_height <= 0:
        return 0
    return max(0, int(math.floor(coordinator.position / line_height)))


def build_status_line(left_text: str, width: int, right_text: str = "│ ? Help") -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * (usable - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def status_text(coordinator: NavigationCoordinator, path: Path) -> str:
    """Compose the left side of the status row from coordinator queries."""
    total = coordinator.summary.line_count
    parts = [f"{path.name} L{coordinator.current_line()}/{total} {coordinator.percentage() * 100:5.1f}%"]

    if coordinator.mode == Mode.SEARCHING:
        prompt = f"/{coordinator.search.query}"
        if coordinator.search.query:
            if coordinator.match_count:
                prompt += f" [{coordinator.current_match_number}/{coordinator.match_count}]"
            else:
                prompt += " [no matches]"
        parts.append(prompt)
    elif coordinator.mode == Mode.GOTO_LINE:
        parts.append(f":{coordinator.pending_input}")
    elif coordinator.mode == Mode.OUTLINE:
        parts.append("outline: Enter jump │ o/Esc close")
    else:
        section = coordinator.current_section()
        if section is not None:
            parts.append(f"§ {section.title}")
        marks = coordinator.mark_keys()
        if marks:
            parts.append(f"marks:{''.join(marks)}")

    if coordinator.status_message:
        parts.append(coordinator.status_message)
    return " │ ".join(parts)


def _match_spans(coordinator: NavigationCoordinator, first: int, last: int) -> dict[int, list[tuple[int, int]]]:
    spans: dict[int, list[tuple[int, int]]] = defaultdict(list)
    for match in coordinator.search.matches:
        if first <= match.line < last:
            spans[match.line].append((match.column, match.length))
    return spans


def build_frame_lines(
    coordinator: NavigationCoordinator,
    document: RenderedDocument,
    path: Path,
    width: int,
    height: int,
) -> list[str]:
    """Return ``height`` rows: document, help, or outline rows followed by the status row."""
    if width <= 0 or height <= 0:
        return []
    content_rows = height - 1
    line_width = max(1, width - 1)

    if coordinator.mode == Mode.HELP:
        rows = help_modal_lines(line_width, content_rows)
    elif coordinator.mode == Mode.OUTLINE:
        rows = outline_panel_lines(
            coordinator.outline.entries,
            coordinator.outline_selection,
            coordinator.outline.current_index(coordinator.position),
            line_width,
            content_rows,
        )
    else:
        first = top_row(coordinator)
        last = first + content_rows
        spans = _match_spans(coordinator, first, last)
        current = coordinator.search.current_match()
        rows = []
        for idx in range(first, last):
            if idx >= len(document):
                rows.append("")
                continue
            text = document.styled_lines[idx]
            # Sanitized lines no longer share columns with the raw search text.
            if idx in spans and sanitize_terminal_text(document.raw_lines[idx]) == document.raw_lines[idx]:
                others = [span for span in spans[idx] if current is None or current.line != idx or span[0] != current.column]
                text = highlight_spans(text, others, REVERSE_ON, REVERSE_OFF)
                if current is not None and current.line == idx:
                    text = highlight_spans(text, [(current.column, current.length)], CURRENT_MATCH_ON, CURRENT_MATCH_OFF)
            rows.append(clip_ansi_line(text, line_width))

    status = build_status_line(status_text(coordinator, path), width)
    rows.append(f"{REVERSE_ON}{status}{RESET}")
    return rows


def render_frame(rows: list[str]) -> None:
    """Write a full frame to stdout in one ``os.write`` call."""
    out: list[str] = ["\033[H\033[J"]
    for idx, row in enumerate(rows):
        out.append(row)
        if "\033" in row:
            out.append(RESET)
        if idx + 1 < len(rows):
            out.append("\r\n")
    os.write(sys.stdout.fileno(), "".join(out).encode("utf-8", errors="replace"))
