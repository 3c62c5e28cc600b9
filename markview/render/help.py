"""Help overlay content and modal layout.

Rendering helpers here are presentation-only and side-effect free.
"""

from __future__ import annotations

from ..ansi import clip_ansi_line, display_width

_KEY = "\033[38;5;229m"
_HEAD = "\033[1;38;5;81m"
_RESET = "\033[0m"
HELP_TITLE = "markview help"


def _k(text: str) -> str:
    return f"{_KEY}{text}{_RESET}"


HELP_LINES: tuple[str, ...] = (
    "",
    f"{_HEAD}Scrolling{_RESET}",
    f"  {_k('j/k')} or {_k('Up/Down')} line   {_k('d/u')} half page   {_k('Space')} short page",
    f"  {_k('f/PgDn')} page down   {_k('b/PgUp')} page up   {_k('g/G')} or {_k('Home/End')} top/bottom",
    f"  {_k('zz')} centre current match   {_k('+/-')} font scale",
    "",
    f"{_HEAD}Search{_RESET}",
    f"  {_k('/')} or {_k('Ctrl+F')} search   {_k('n/N')} next/previous match (resumes last search)",
    f"  {_k('Enter/Ctrl+N')} next   {_k('Ctrl+P')} previous   {_k('Up/Down')} history   {_k('Esc')} close",
    f"  {_k('Esc')} in normal mode clears a resumed search",
    "",
    f"{_HEAD}Jumping{_RESET}",
    f"  {_k(':')} or {_k('Ctrl+G')} go to line   {_k(']/[')} next/previous heading",
    f"  {_k('1-9')} jump to outline entry   {_k('o')} outline (j/k select, Enter jump)",
    f"  {_k('m{key}')} set named mark   {_k(chr(39) + '{key}')} jump to named mark",
    "",
    f"{_HEAD}General{_RESET}",
    f"  {_k('?')} toggle help   {_k('q')} quit",
    "",
    f"\033[2;38;5;250mPress ? / Esc to close{_RESET}",
)


def help_modal_lines(width: int, height: int) -> list[str]:
    """Return exactly ``height`` rows drawing the help modal centred in ``width`` columns."""
    if width <= 0 or height <= 0:
        return []

    modal_w = min(84, max(20, width - 4), width)
    modal_h = min(len(HELP_LINES) + 3, height)
    x = max(0, (width - modal_w) // 2)
    y = max(0, (height - modal_h) // 2)
    inner_w = max(0, modal_w - 2)
    inner_h = max(0, modal_h - 2)
    pad = " " * x

    rows = [""] * height
    if modal_h < 2 or modal_w < 2:
        rows[0] = clip_ansi_line(HELP_TITLE, width)
        return rows

    title = f" {HELP_TITLE} "
    title_w = min(len(title), inner_w)
    left_rule = max(0, (inner_w - title_w) // 2)
    right_rule = max(0, inner_w - title_w - left_rule)
    rows[y] = (
        f"{pad}\033[38;5;45m╭{'─' * left_rule}\033[1m{title[:title_w]}\033[22m{'─' * right_rule}╮{_RESET}"
    )
    for i in range(inner_h):
        body = HELP_LINES[i] if i < len(HELP_LINES) else ""
        text = clip_ansi_line(body, inner_w)
        fill = " " * max(0, inner_w - display_width(text))
        rows[y + 1 + i] = f"{pad}\033[38;5;45m│{_RESET}{text}{_RESET}{fill}\033[38;5;45m│{_RESET}"
    rows[y + modal_h - 1] = f"{pad}\033[38;5;45m╰{'─' * inner_w}╯{_RESET}"
    return rows
