"""Named scroll-position marks for one document session."""

from __future__ import annotations


def is_named_mark_key(key: str) -> bool:
    """Return whether key is a valid mark identifier: one ASCII letter or digit."""
    return len(key) == 1 and key.isascii() and key.isalnum()


class MarkRegistry:
    """Key -> position map; one position per key, last write wins."""

    def __init__(self) -> None:
        self._marks: dict[str, float] = {}

    def set_mark(self, key: str, position: float) -> bool:
        """Store ``position`` under ``key``; invalid keys are rejected."""
        if not is_named_mark_key(key):
            return False
        self._marks[key] = max(0.0, position)
        return True

    def jump_to_mark(self, key: str) -> float | None:
        """Return the stored position, or ``None`` when ``key`` is unset."""
        return self._marks.get(key)

    def has_mark(self, key: str) -> bool:
        return key in self._marks

    def keys(self) -> list[str]:
        return sorted(self._marks)

    def clear(self) -> None:
        self._marks.clear()

    def rescale(self, factor: float) -> None:
        """Scale every position by ``factor`` when line height changes."""
        if factor <= 0:
            return
        for key, position in self._marks.items():
            self._marks[key] = position * factor

    def clamp_to(self, extent: float) -> None:
        """Pull every stored position into ``[0, extent]`` after a reflow."""
        limit = max(0.0, extent)
        for key, position in self._marks.items():
            self._marks[key] = min(position, limit)

    def __len__(self) -> int:
        return len(self._marks)
