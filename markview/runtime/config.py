"""Persistent JSON config helpers.

Stores scroll steps, height-estimation constants, font scale, highlight style,
logging, and watch settings. Malformed or missing
config falls back to defaults.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

from platformdirs import user_config_dir

from ..errors import ConfigError
from ..navigation.coordinator import FontSettings, ScrollSettings
from ..viewport.metrics import MetricsSettings

logger = logging.getLogger(__name__)

APP_NAME = "markview"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH
LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "warning"
    file: str | None = None


@dataclass(frozen=True)
class WatchSettings:
    enabled: bool = True
    poll_seconds: float = 0.25


@dataclass(frozen=True)
class ViewerConfig:
    scroll: ScrollSettings = field(default_factory=ScrollSettings)
    metrics: MetricsSettings = field(default_factory=MetricsSettings)
    font: FontSettings = field(default_factory=FontSettings)
    style: str = "monokai"
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    watch: WatchSettings = field(default_factory=WatchSettings)

    def validate(self) -> None:
        """Raise ``ConfigError`` for the first out-of-range value."""
        scroll = self.scroll
        if not 0.0 < scroll.page_fraction <= 1.0:
            raise ConfigError("Page scroll fraction must be in (0, 1]")
        if not 0.0 < scroll.space_fraction <= 1.0:
            raise ConfigError("Space scroll fraction must be in (0, 1]")
        if scroll.arrow_increment <= 0:
            raise ConfigError("Arrow key increment must be positive")

        metrics = self.metrics
        if metrics.base_text_size <= 0:
            raise ConfigError("Base text size must be positive")
        if metrics.line_height_multiplier <= 1.0:
            raise ConfigError("Line height multiplier must be greater than 1")
        if metrics.structural_padding < 0 or metrics.image_padding < 0:
            raise ConfigError("Structural and image padding must not be negative")

        font = self.font
        if font.min_font_scale <= 0 or font.min_font_scale > font.max_font_scale:
            raise ConfigError("Font scale range must be positive and ordered")
        if not font.min_font_scale <= font.font_scale <= font.max_font_scale:
            raise ConfigError("Font scale must lie within the configured range")
        if font.font_scale_step <= 0:
            raise ConfigError("Font scale step must be positive")

        if self.logging.level.lower() not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {self.logging.level!r}")
        if self.watch.poll_seconds <= 0:
            raise ConfigError("Watch poll interval must be positive")


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object from ``path`` (default ``CONFIG_PATH``).

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    path = path if path is not None else CONFIG_PATH
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object], path: Path | None = None) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored so that an unwritable
    config never interrupts viewing.
    """
    path = path if path is not None else CONFIG_PATH
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not write config %s: %s", path, exc)


def _coerce_section(section_type, raw: object):
    """Build a settings dataclass from a JSON object, keeping defaults for bad values.

    Numbers must be real ints/floats (booleans rejected) and finite; booleans
    and strings must match the default's type. ``None`` is only accepted where
    the default is ``None``.
    """
    default = section_type()
    if not isinstance(raw, dict):
        return default

    overrides: dict[str, object] = {}
    for item in fields(section_type):
        if item.name not in raw:
            continue
        value = raw[item.name]
        current = getattr(default, item.name)
        if isinstance(current, bool):
            if isinstance(value, bool):
                overrides[item.name] = value
        elif isinstance(current, (int, float)):
            if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
                overrides[item.name] = float(value)
        elif current is None:
            if value is None or isinstance(value, str):
                overrides[item.name] = value
        elif isinstance(current, str):
            if isinstance(value, str) and value.strip():
                overrides[item.name] = value.strip()
    return replace(default, **overrides)


def config_from_dict(data: dict[str, object]) -> ViewerConfig:
    """Translate a raw JSON object into a ``ViewerConfig`` (unvalidated)."""
    style = data.get("style")
    return ViewerConfig(
        scroll=_coerce_section(ScrollSettings, data.get("scroll")),
        metrics=_coerce_section(MetricsSettings, data.get("metrics")),
        font=_coerce_section(FontSettings, data.get("font")),
        style=style.strip() if isinstance(style, str) and style.strip() else "monokai",
        logging=_coerce_section(LoggingSettings, data.get("logging")),
        watch=_coerce_section(WatchSettings, data.get("watch")),
    )


def load_viewer_config(path: Path | None = None) -> ViewerConfig:
    """Load, sanitize, and validate config; invalid combinations fall back to defaults."""
    config = config_from_dict(load_config(path))
    try:
        config.validate()
    except ConfigError as exc:
        logger.warning("Invalid configuration (%s); using defaults", exc)
        return ViewerConfig()
    return config


def save_font_scale(font_scale: float, path: Path | None = None) -> None:
    """Persist the user's font scale choice."""
    if not math.isfinite(font_scale) or font_scale <= 0:
        return
    config = load_config(path)
    font = config.get("font")
    font = dict(font) if isinstance(font, dict) else {}
    font["font_scale"] = round(font_scale, 4)
    config["font"] = font
    save_config(config, path)
