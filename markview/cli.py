"""Command-line front door for markview.

Parses CLI options, loads config and the document, configures logging, then
either prints a non-interactive report or starts the interactive viewer.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .document.summary import load_document
from .log import configure_logging
from .navigation import intents as it
from .runtime.config import LOG_LEVELS, ViewerConfig, load_viewer_config
from .runtime.loop import ViewerSession, run_viewer
from .runtime.terminal import terminal_size


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _report_session(path: Path, config: ViewerConfig) -> ViewerSession:
    _columns, rows = terminal_size()
    summary = load_document(path)
    return ViewerSession(path, config, summary, rows=rows, no_color=True, persist_font_scale=False)


def render_outline_report(session: ViewerSession) -> str:
    """List outline entries with their 1-based line and estimated offset."""
    entries = session.coordinator.outline.entries
    if not entries:
        return "No headings\n"
    out: list[str] = []
    for index, entry in enumerate(entries, start=1):
        indent = "  " * (entry.level - 2)
        out.append(f"{index:>3}. {indent}{entry.title}  (line {entry.line + 1}, offset {entry.position:.0f})\n")
    return "".join(out)


def render_search_report(session: ViewerSession, query: str) -> str:
    """List every match as ``line:column: text`` (both 1-based)."""
    coordinator = session.coordinator
    coordinator.dispatch(it.SetSearchQuery(query))
    if not coordinator.match_count:
        return f"No matches for {query!r}\n"
    lines = coordinator.summary.lines
    out = [f"{coordinator.match_count} matches for {query!r}\n"]
    for match in coordinator.search.matches:
        out.append(f"{match.line + 1}:{match.column + 1}: {lines[match.line].strip()}\n")
    return "".join(out)


def render_goto_report(session: ViewerSession, line: int) -> str:
    """Describe where the viewer would scroll for ``line``; invalid lines exit."""
    coordinator = session.coordinator
    if not coordinator.dispatch(it.GotoLine(line)):
        raise SystemExit(coordinator.status_message)
    return f"Line {line}: offset {coordinator.position:.1f} ({coordinator.percentage() * 100:.1f}%)\n"


def main(default_path: Path | None = None) -> None:
    """Parse CLI arguments and open a Markdown file.

    ``default_path`` is primarily for tests; when omitted a path argument is
    required. Report options print to stdout and return without a terminal.
    """
    parser = argparse.ArgumentParser(description="View Markdown files in the terminal with keyboard navigation.")
    parser.add_argument("path", nargs="?", default=None, help="Markdown file to open.")
    parser.add_argument("--config", metavar="PATH", default=None, help="Config file (default: user config dir).")
    parser.add_argument("--style", default=None, help="Pygments style name for code blocks.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--nopager", action="store_true", help="Print output directly without interactive paging.")
    parser.add_argument("--outline", action="store_true", help="Print the heading outline and exit.")
    parser.add_argument("--search", metavar="QUERY", default=None, help="Print matches for QUERY and exit.")
    parser.add_argument("--goto", metavar="N", type=_positive_int, default=None, help="Print the offset of line N and exit.")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default=None, help="Override the configured log level.")
    args = parser.parse_args()

    raw_path = args.path if args.path is not None else default_path
    if raw_path is None:
        parser.error("a Markdown file path is required")
    path = Path(raw_path)
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    if path.is_dir():
        raise SystemExit(f"Not a file: {path}")

    config_path = Path(args.config).expanduser() if args.config else None
    config = load_viewer_config(config_path)
    if args.style:
        config = ViewerConfig(
            scroll=config.scroll,
            metrics=config.metrics,
            font=config.font,
            style=args.style,
            logging=config.logging,
            watch=config.watch,
        )
    configure_logging(args.log_level or config.logging.level, config.logging.file)

    if args.outline or args.search is not None or args.goto is not None:
        session = _report_session(path, config)
        if args.outline:
            sys.stdout.write(render_outline_report(session))
        if args.search is not None:
            sys.stdout.write(render_search_report(session, args.search))
        if args.goto is not None:
            sys.stdout.write(render_goto_report(session, args.goto))
        return

    run_viewer(path, config, no_color=args.no_color, nopager=args.nopager, config_path=config_path)


if __name__ == "__main__":
    main()
