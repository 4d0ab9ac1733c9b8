"""Run-event log: one JSON object per line, grouped by UTC day, rotated by size.

Files are laid out as ``<base_dir>/<YYYYMMDD>/<prefix>_NN.jsonl``.  An event
goes to the lowest-numbered file of the day that can take it without growing
past ``max_bytes``; a line larger than ``max_bytes`` gets a file of its own.
"""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Mapping, Optional

__all__ = ["DEFAULT_MAX_BYTES", "EventLog", "find_logs"]

DEFAULT_MAX_BYTES = 100 * 1024 * 1024


class EventLog:
    """Appends run events below ``base_dir``; safe to share between threads."""

    def __init__(self, base_dir: str | Path, *, max_bytes: int = DEFAULT_MAX_BYTES, prefix: str = "steady") -> None:
        if max_bytes <= 0:
            raise ValueError(f"max_bytes must be positive, got {max_bytes!r}")
        self.base_dir = Path(base_dir)
        self.max_bytes = max_bytes
        self.prefix = prefix
        self._lock = threading.Lock()
        self._current: Optional[Path] = None

    @property
    def current_path(self) -> Optional[Path]:
        return self._current

    def _fits(self, path: Path, size: int) -> bool:
        if not path.exists():
            return True
        used = path.stat().st_size
        return used == 0 or used + size <= self.max_bytes

    def _target(self, day: str, size: int) -> Path:
        day_dir = self.base_dir / day
        if self._current is not None and self._current.parent == day_dir and self._fits(self._current, size):
            return self._current
        day_dir.mkdir(parents=True, exist_ok=True)
        counter = 0
        while not self._fits(day_dir / f"{self.prefix}_{counter:02d}.jsonl", size):
            counter += 1
        return day_dir / f"{self.prefix}_{counter:02d}.jsonl"

    def append(self, event: Mapping[str, Any], *, when: Optional[datetime] = None) -> Path:
        """Write ``event`` with a ``ts`` field and return the file it went to."""

        moment = when or datetime.now(timezone.utc)
        payload = dict(event)
        payload.setdefault("ts", moment.isoformat(timespec="milliseconds"))
        line = (json.dumps(payload, sort_keys=True, ensure_ascii=False) + "\n").encode("utf-8")

        with self._lock:
            path = self._target(moment.strftime("%Y%m%d"), len(line))
            with path.open("ab") as handle:
                handle.write(line)
            self._current = path
        return path


def find_logs(base_dir: str | Path) -> List[Path]:
    """Return every ``*.jsonl`` file below ``base_dir`` in name order."""

    return sorted(Path(base_dir).glob("**/*.jsonl"))
