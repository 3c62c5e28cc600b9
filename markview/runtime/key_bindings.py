"""Per-mode key bindings translating key tokens into navigation intents."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..navigation import intents as it
from ..navigation.coordinator import FontSettings, Mode, ScrollSettings
from ..navigation.marks import is_named_mark_key

ENTER_KEYS = ("ENTER_CR", "ENTER_LF")
PREFIX_KEYS = ("m", "'", "z")
OUTLINE_PAGE_STEP = 10


@dataclass(frozen=True)
class Quit:
    """Request to leave the viewer; handled by the loop, never dispatched."""


Action = it.Intent | Quit


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action factory."""

    combos: tuple[str, ...]
    handler: Callable[[], Action | None]


class KeyComboRegistry:
    """Small key-dispatch table with optional key normalization strategy."""

    def __init__(self, normalize: Callable[[str], str] | None = None) -> None:
        self._normalize = normalize if normalize is not None else self._identity
        self._handlers: dict[str, Callable[[], Action | None]] = {}

    @staticmethod
    def _identity(key: str) -> str:
        return key

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[self._normalize(combo)] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def dispatch(self, key: str) -> Action | None:
        """Return the action bound to ``key``, or ``None`` when unbound."""
        handler = self._handlers.get(self._normalize(key))
        if handler is None:
            return None
        return handler()


def _scroll_bindings(scroll: ScrollSettings) -> tuple[KeyComboBinding, ...]:
    """Scroll keys shared by normal mode and the help overlay."""
    return (
        KeyComboBinding(("j", "DOWN"), lambda: it.ArrowScroll(1)),
        KeyComboBinding(("k", "UP"), lambda: it.ArrowScroll(-1)),
        KeyComboBinding(("d", "CTRL_D"), lambda: it.HalfPageScroll(1)),
        KeyComboBinding(("u", "CTRL_U"), lambda: it.HalfPageScroll(-1)),
        KeyComboBinding((" ",), lambda: it.PageScroll(1, scroll.space_fraction)),
        KeyComboBinding(("f", "PAGE_DOWN"), lambda: it.PageScroll(1)),
        KeyComboBinding(("b", "PAGE_UP"), lambda: it.PageScroll(-1)),
        KeyComboBinding(("g", "HOME"), lambda: it.ScrollToTop()),
        KeyComboBinding(("G", "END"), lambda: it.ScrollToBottom()),
    )


class KeyBindings:
    """Stateful key interpreter: one registry per mode plus two-key prefixes.

    ``m{key}`` sets a mark, ``'{key}`` jumps to one, and ``zz`` centres the current match.
    The prefix is remembered between calls and dropped on any mode change.
    """

    def __init__(self, scroll: ScrollSettings | None = None, font: FontSettings | None = None) -> None:
        scroll = scroll if scroll is not None else ScrollSettings()
        font = font if font is not None else FontSettings()
        self.pending_prefix = ""
        step = font.font_scale_step

        self.normal = KeyComboRegistry().register_bindings(
            *_scroll_bindings(scroll),
            KeyComboBinding(("/", "CTRL_F"), lambda: it.OpenSearch()),
            KeyComboBinding((":", "CTRL_G"), lambda: it.OpenGotoLine()),
            KeyComboBinding(("n",), lambda: it.NextMatch()),
            KeyComboBinding(("N",), lambda: it.PreviousMatch()),
            KeyComboBinding(("]",), lambda: it.NextHeading()),
            KeyComboBinding(("[",), lambda: it.PreviousHeading()),
            KeyComboBinding(("+", "="), lambda: it.ChangeFontScale(step)),
            KeyComboBinding(("-",), lambda: it.ChangeFontScale(-step)),
            KeyComboBinding(("?",), lambda: it.ToggleHelp()),
            KeyComboBinding(("o",), lambda: it.ToggleOutline()),
            KeyComboBinding(("ESC",), lambda: it.Cancel()),
            KeyComboBinding(("q", "CTRL_C"), lambda: Quit()),
        )
        for digit in range(1, 10):
            self.normal.register_binding(
                KeyComboBinding((str(digit),), lambda index=digit - 1: it.JumpToHeading(index))
            )

        self.searching = KeyComboRegistry().register_bindings(
            KeyComboBinding(("BACKSPACE",), lambda: it.SearchBackspace()),
            KeyComboBinding((*ENTER_KEYS, "CTRL_N"), lambda: it.NextMatch()),
            KeyComboBinding(("CTRL_P",), lambda: it.PreviousMatch()),
            KeyComboBinding(("UP",), lambda: it.SearchHistoryPrevious()),
            KeyComboBinding(("DOWN",), lambda: it.SearchHistoryNext()),
            KeyComboBinding(("ESC",), lambda: it.CloseSearch()),
            KeyComboBinding(("CTRL_C",), lambda: Quit()),
        )

        self.goto_line = KeyComboRegistry().register_bindings(
            KeyComboBinding(("BACKSPACE",), lambda: it.GotoLineBackspace()),
            KeyComboBinding(ENTER_KEYS, lambda: it.SubmitGotoLine()),
            KeyComboBinding(("ESC", "CTRL_G"), lambda: it.Cancel()),
            KeyComboBinding(("CTRL_C",), lambda: Quit()),
        )

        self.help = KeyComboRegistry().register_bindings(
            *_scroll_bindings(scroll),
            KeyComboBinding(("?", "ESC"), lambda: it.ToggleHelp()),
            KeyComboBinding(("q", "CTRL_C"), lambda: Quit()),
        )

        self.outline = KeyComboRegistry().register_bindings(
            KeyComboBinding(("j", "DOWN", "CTRL_N"), lambda: it.MoveOutlineSelection(1)),
            KeyComboBinding(("k", "UP", "CTRL_P"), lambda: it.MoveOutlineSelection(-1)),
            KeyComboBinding(("PAGE_DOWN", "CTRL_D"), lambda: it.MoveOutlineSelection(OUTLINE_PAGE_STEP)),
            KeyComboBinding(("PAGE_UP", "CTRL_U"), lambda: it.MoveOutlineSelection(-OUTLINE_PAGE_STEP)),
            KeyComboBinding(ENTER_KEYS, lambda: it.SubmitOutline()),
            KeyComboBinding(("o", "ESC"), lambda: it.ToggleOutline()),
            KeyComboBinding(("q", "CTRL_C"), lambda: Quit()),
        )

    def _registry_for(self, mode: Mode) -> KeyComboRegistry:
        if mode == Mode.SEARCHING:
            return self.searching
        if mode == Mode.GOTO_LINE:
            return self.goto_line
        if mode == Mode.HELP:
            return self.help
        if mode == Mode.OUTLINE:
            return self.outline
        return self.normal

    def _resolve_prefix(self, prefix: str, key: str) -> Action | None:
        if prefix == "z":
            return it.CenterView() if key == "z" else None
        if not is_named_mark_key(key):
            return None
        if prefix == "m":
            return it.SetMark(key)
        return it.JumpToMark(key)

    def translate(self, key: str, mode: Mode) -> Action | None:
        """Map one key token to an action for ``mode``; ``None`` means ignored."""
        if not key:
            return None

        if mode != Mode.NORMAL:
            self.pending_prefix = ""
        elif self.pending_prefix:
            prefix = self.pending_prefix
            self.pending_prefix = ""
            return self._resolve_prefix(prefix, key)
        elif key in PREFIX_KEYS:
            self.pending_prefix = key
            return None

        action = self._registry_for(mode).dispatch(key)
        if action is not None:
            return action
        if mode == Mode.SEARCHING and len(key) == 1 and key.isprintable():
            return it.SearchInput(key)
        if mode == Mode.GOTO_LINE and len(key) == 1 and key.isdigit():
            return it.GotoLineInput(key)
        return None
