"""Logging setup for the viewer process.

Stdout belongs to the terminal UI, so records go to a file when one is
configured and otherwise only warnings and above reach stderr.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_HANDLER_ATTR = "_markview_handler"


def _level_number(level: str | int) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.WARNING


def configure_logging(level: str | int = "warning", log_file: str | Path | None = None) -> logging.Handler:
    """Install one handler on the ``markview`` logger, replacing a previous one."""
    logger = logging.getLogger("markview")
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_ATTR, False):
            logger.removeHandler(handler)
            handler.close()

    numeric_level = _level_number(level)
    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(path, encoding="utf-8")
        handler.setLevel(numeric_level)
    else:
        handler = logging.StreamHandler()
        handler.setLevel(max(numeric_level, logging.WARNING))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    setattr(handler, _HANDLER_ATTR, True)

    logger.addHandler(handler)
    logger.setLevel(numeric_level)
    logger.propagate = False
    return handler
