"""ANSI-aware text measurement and line shaping utilities.

Clipping and highlighting here preserve escape sequences so rendering stays
aligned when color codes and wide chars are present.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8
REVERSE_ON = "\033[7m"
REVERSE_OFF = "\033[27m"


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    col = 0
    for ch in strip_ansi(text):
        col += char_display_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    ANSI escape sequences are preserved verbatim and do not count toward width.
    Tabs are expanded into spaces so clipping aligns with rendered terminal cells.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if ch == "\t":
            if col + w > max_cols:
                break
            out.append(" " * w)
            col += w
            i += 1
            continue
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
        i += 1

    return "".join(out)


def highlight_spans(text: str, spans: list[tuple[int, int]], on: str = REVERSE_ON, off: str = REVERSE_OFF) -> str:
    """Wrap plain-text character ranges of a styled line in ``on``/``off`` codes.

    ``spans`` are ``(start, length)`` pairs measured in visible characters,
    ignoring escape sequences already present in ``text``.
    """
    if not spans or not text:
        return text

    boundaries: dict[int, list[str]] = {}
    for start, length in spans:
        if length <= 0:
            continue
        boundaries.setdefault(start, []).append(on)
        boundaries.setdefault(start + length, []).insert(0, off)

    out: list[str] = []
    visible = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        out.extend(boundaries.pop(visible, ()))
        out.append(text[i])
        visible += 1
        i += 1
    for position in sorted(boundaries):
        out.extend(boundaries[position])
    return "".join(out)
