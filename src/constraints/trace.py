"""Search statistics and optional event trace for the steady-state solver."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Tuple

TRACE_LEVELS = ("none", "summary", "full")

# Events recorded at the "summary" level; "full" records everything.
_SUMMARY_EVENTS = frozenset({"solution", "exhausted"})


@dataclass
class SearchStats:
    """Counters accumulated over the lifetime of one solver."""

    nodes: int = 0
    rule_prunes: int = 0
    forward_prunes: int = 0
    values_filtered: int = 0
    solutions: int = 0

    def to_payload(self) -> Dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class SearchTraceEntry:
    """Single search event: what happened, at which level, with which values."""

    event: str
    level: int
    meta: Mapping[str, Any]


@dataclass
class SearchTraceRecorder:
    """In-memory trace accumulator respecting ``trace_level`` semantics."""

    trace_level: str = "none"
    entries: List[SearchTraceEntry] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.trace_level not in TRACE_LEVELS:
            raise ValueError(f"Unsupported trace level: {self.trace_level!r}")

    def record(self, event: str, level: int, **meta: Any) -> None:
        if self.trace_level == "none":
            return
        if self.trace_level == "summary" and event not in _SUMMARY_EVENTS:
            return
        self.entries.append(SearchTraceEntry(event=event, level=level, meta=dict(meta)))

    def snapshot(self) -> Tuple[SearchTraceEntry, ...]:
        return tuple(self.entries)

    def reset(self) -> None:
        self.entries.clear()


__all__ = ["TRACE_LEVELS", "SearchStats", "SearchTraceEntry", "SearchTraceRecorder"]
