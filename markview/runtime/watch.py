"""Document change detection for poll-based reloads.

The runtime compares successive stat signatures on idle ticks and reloads the
document when the signature changes.
"""

from __future__ import annotations

import time
from pathlib import Path


def path_stat_signature(path: Path) -> tuple[str, int, int, int]:
    """Return a stable stat tuple describing ``path`` existence and metadata."""
    try:
        st = path.stat()
    except FileNotFoundError:
        return ("missing", 0, 0, 0)
    except OSError:
        return ("error", 0, 0, 0)
    return ("ok", st.st_mtime_ns, st.st_size, st.st_mode)


class DocumentWatcher:
    """Rate-limited signature poller for one document path."""

    def __init__(self, path: Path, poll_seconds: float = 0.25, clock=time.monotonic) -> None:
        self.path = path
        self.poll_seconds = max(0.0, poll_seconds)
        self._clock = clock
        self._signature = path_stat_signature(path)
        self._last_poll = clock()

    def poll(self) -> bool:
        """Return True once per observed change; missing files never trigger a reload."""
        now = self._clock()
        if now - self._last_poll < self.poll_seconds:
            return False
        self._last_poll = now
        signature = path_stat_signature(self.path)
        if signature == self._signature:
            return False
        self._signature = signature
        # Editors that save by rename briefly remove the file.
        return signature[0] == "ok"
