"""Exception types raised by markview.

Both are ``ValueError`` subclasses: they describe bad user-supplied values,
and callers surface their message instead of crashing.
"""

from __future__ import annotations


class LineNumberError(ValueError):
    """Goto-line input that is empty, non-numeric, zero, or past the last line."""


class ConfigError(ValueError):
    """A configuration value outside its allowed range."""
