"""Syntax highlighting for fenced code blocks.

Pygments is imported lazily on first use; when it is missing or a lexer fails,
code is shown as plain text.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

_PYGMENTS_READY = False
_PYGMENTS_AVAILABLE = False
_PYGMENTS_HIGHLIGHT = None
_PYGMENTS_GET_LEXER_BY_NAME = None
_PYGMENTS_TEXT_LEXER = None
_PYGMENTS_TERMINAL_FORMATTER = None
_PYGMENTS_GET_STYLE_BY_NAME = None
_PYGMENTS_FORMATTERS: dict[str, object] = {}
_PYGMENTS_VALID_STYLES: set[str] = set()
_PYGMENTS_INVALID_STYLES: set[str] = set()
DEFAULT_STYLE = "monokai"


def _ensure_pygments_loaded() -> bool:
    global _PYGMENTS_READY
    global _PYGMENTS_AVAILABLE
    global _PYGMENTS_HIGHLIGHT
    global _PYGMENTS_GET_LEXER_BY_NAME
    global _PYGMENTS_TEXT_LEXER
    global _PYGMENTS_TERMINAL_FORMATTER
    global _PYGMENTS_GET_STYLE_BY_NAME

    if _PYGMENTS_READY:
        return _PYGMENTS_AVAILABLE

    _PYGMENTS_READY = True
    try:
        from pygments import highlight as pygments_highlight
        from pygments.formatters import Terminal256Formatter
        from pygments.lexers import TextLexer, get_lexer_by_name
        from pygments.styles import get_style_by_name
    except ImportError:
        logger.warning("Pygments is not installed; code blocks are shown without highlighting")
        _PYGMENTS_AVAILABLE = False
        return False

    _PYGMENTS_HIGHLIGHT = pygments_highlight
    _PYGMENTS_GET_LEXER_BY_NAME = get_lexer_by_name
    _PYGMENTS_TEXT_LEXER = TextLexer
    _PYGMENTS_TERMINAL_FORMATTER = Terminal256Formatter
    _PYGMENTS_GET_STYLE_BY_NAME = get_style_by_name
    _PYGMENTS_AVAILABLE = True
    return True


def _normalize_style(style: str) -> str:
    if style in _PYGMENTS_VALID_STYLES:
        return style
    if style in _PYGMENTS_INVALID_STYLES:
        return DEFAULT_STYLE

    try:
        assert _PYGMENTS_GET_STYLE_BY_NAME is not None
        _PYGMENTS_GET_STYLE_BY_NAME(style)
        _PYGMENTS_VALID_STYLES.add(style)
        return style
    except Exception:
        logger.warning("Unknown highlight style %r; using %s", style, DEFAULT_STYLE)
        _PYGMENTS_INVALID_STYLES.add(style)
        return DEFAULT_STYLE


def _formatter_for_style(style: str):
    formatter = _PYGMENTS_FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    assert _PYGMENTS_TERMINAL_FORMATTER is not None
    formatter = _PYGMENTS_TERMINAL_FORMATTER(style=style)
    _PYGMENTS_FORMATTERS[style] = formatter
    return formatter


def highlight_code(source: str, language: str, style: str = DEFAULT_STYLE) -> list[str]:
    """Return ``source`` split into highlighted lines, one per input line.

    The result always has as many entries as ``source.splitlines()`` so callers
    can keep one row per source line.
    """
    plain = source.splitlines()
    if not plain or not _ensure_pygments_loaded():
        return plain

    formatter = _formatter_for_style(_normalize_style(style))
    try:
        assert _PYGMENTS_GET_LEXER_BY_NAME is not None
        lexer = _PYGMENTS_GET_LEXER_BY_NAME(language.strip().lower(), stripnl=False) if language.strip() else None
    except Exception:
        lexer = None
    if lexer is None:
        assert _PYGMENTS_TEXT_LEXER is not None
        lexer = _PYGMENTS_TEXT_LEXER(stripnl=False)

    try:
        assert _PYGMENTS_HIGHLIGHT is not None
        rendered = _PYGMENTS_HIGHLIGHT(source, lexer, formatter)
    except Exception:
        logger.debug("Highlighting failed for language %r", language, exc_info=True)
        return plain

    lines = rendered.splitlines()
    if len(lines) != len(plain):
        return plain
    return lines
