"""Aggregation helpers for steady-state run event logs."""

from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping

__all__ = ["aggregate"]

_COMPLETED = "steady_states.completed"


def _load_events(paths: Iterable[Path]) -> Iterable[Mapping[str, Any]]:
    for path in paths:
        for line in path.read_text(encoding="utf-8").splitlines():
            if not line.strip():
                continue
            yield json.loads(line)


def aggregate(paths: Iterable[Path], *, top: int = 5) -> Dict[str, Any]:
    """Summarise completed runs: totals, per-model state counts and search effort."""

    runs = 0
    states_by_model: Counter[str] = Counter()
    runs_by_model: Counter[str] = Counter()
    nodes = 0
    prunes = 0
    empty_runs = 0
    for event in _load_events(paths):
        if event.get("event") != _COMPLETED:
            continue
        runs += 1
        model = str(event.get("model", "unknown"))
        found = int(event.get("steady_states", 0))
        runs_by_model[model] += 1
        states_by_model[model] += found
        if found == 0:
            empty_runs += 1
        stats = event.get("stats") or {}
        nodes += int(stats.get("nodes", 0))
        prunes += int(stats.get("rule_prunes", 0)) + int(stats.get("forward_prunes", 0))

    return {
        "total_runs": runs,
        "runs_without_steady_states": empty_runs,
        "runs_by_model": dict(sorted(runs_by_model.items())),
        "top_models": [list(item) for item in states_by_model.most_common(top)],
        "nodes": nodes,
        "prunes": prunes,
    }
