"""Main interactive event loop for the terminal viewer.

``ViewerSession`` holds everything one open document needs and exposes the
per-key and per-tick steps; ``run_viewer`` only wires them to the terminal.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from ..document.summary import DocumentSummary, load_document
from ..navigation import intents as it
from ..navigation.coordinator import NavigationCoordinator
from ..render import RenderedDocument, build_frame_lines, prepare_document, render_document_text, render_frame
from .config import ViewerConfig, save_font_scale
from .key_bindings import KeyBindings, Quit
from .keys import read_key
from .terminal import TerminalController, terminal_size
from .watch import DocumentWatcher

logger = logging.getLogger(__name__)


class ViewerSession:
    """One document, its navigation coordinator, and its styled rows."""

    def __init__(
        self,
        path: Path,
        config: ViewerConfig,
        summary: DocumentSummary,
        rows: int = 24,
        no_color: bool = False,
        persist_font_scale: bool = True,
        config_path: Path | None = None,
    ) -> None:
        self.path = path
        self.config = config
        self.no_color = no_color
        self.persist_font_scale = persist_font_scale
        self.config_path = config_path
        self.coordinator = NavigationCoordinator(
            summary,
            viewport_size=0.0,
            metrics_settings=config.metrics,
            scroll=config.scroll,
            font=config.font,
        )
        self.bindings = KeyBindings(config.scroll, config.font)
        self.document: RenderedDocument = prepare_document(summary, config.style, no_color)
        self.watcher = DocumentWatcher(path, config.watch.poll_seconds) if config.watch.enabled else None
        self.dirty = True
        self.sync_viewport(rows)

    def sync_viewport(self, rows: int) -> None:
        """Resize so the viewport spans the content rows above the status line."""
        content_rows = max(1, rows - 1)
        size = content_rows * self.coordinator.line_height
        if size != self.coordinator.viewport.viewport_size:
            # Resizes are not user actions; keep the message from the last key.
            message = self.coordinator.status_message
            self.coordinator.dispatch(it.Resize(size))
            self.coordinator.status_message = message
            self.dirty = True

    def handle_key(self, key: str) -> bool:
        """Apply one key token; returns False when the viewer should exit."""
        action = self.bindings.translate(key, self.coordinator.mode)
        if action is None:
            return True
        if isinstance(action, Quit):
            return False

        before = self.coordinator.font_scale
        self.coordinator.dispatch(action)
        self.dirty = True
        if self.coordinator.font_scale != before and self.persist_font_scale:
            save_font_scale(self.coordinator.font_scale, self.config_path)
        return True

    def reload(self) -> None:
        """Re-read the document and re-clamp navigation state against it."""
        self.coordinator.invalidate_document()
        try:
            summary = load_document(self.path)
        except OSError as exc:
            logger.warning("Could not reload %s: %s", self.path, exc)
            summary = self.coordinator.summary
        self.document = prepare_document(summary, self.config.style, self.no_color)
        self.coordinator.reload_document(summary)
        self.dirty = True

    def tick(self) -> None:
        """Idle-time work: poll the file watcher."""
        if self.watcher is not None and self.watcher.poll():
            logger.debug("Detected change in %s", self.path)
            self.reload()

    def frame(self, columns: int, rows: int) -> list[str]:
        return build_frame_lines(self.coordinator, self.document, self.path, columns, rows)


def run_viewer(
    path: Path,
    config: ViewerConfig,
    *,
    no_color: bool = False,
    nopager: bool = False,
    config_path: Path | None = None,
) -> None:
    """Open ``path`` interactively, or print it when no terminal is attached."""
    summary = load_document(path)
    if nopager or not os.isatty(sys.stdin.fileno()) or not os.isatty(sys.stdout.fileno()):
        color = not no_color and os.isatty(sys.stdout.fileno())
        sys.stdout.write(render_document_text(prepare_document(summary, config.style, no_color=not color)))
        return

    columns, rows = terminal_size()
    session = ViewerSession(path, config, summary, rows=rows, no_color=no_color, config_path=config_path)

    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    timeout_ms = max(1, int(config.watch.poll_seconds * 1000))
    last_size = (columns, rows)

    with terminal.raw_mode():
        while True:
            columns, rows = terminal_size()
            if (columns, rows) != last_size:
                last_size = (columns, rows)
                session.dirty = True
            session.sync_viewport(rows)

            if session.dirty:
                render_frame(session.frame(columns, rows))
                session.dirty = False

            key = read_key(stdin_fd, timeout_ms=timeout_ms)
            if not key:
                session.tick()
                continue
            if not session.handle_key(key):
                break
