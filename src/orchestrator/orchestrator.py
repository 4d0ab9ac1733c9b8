"""Steady-state run pipeline (model file -> space -> solver -> CSV)."""

from __future__ import annotations

import logging
import time
import uuid
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from constraints import SpaceSolver, build_space
from network import Model, obtain_model
from results import SteadyStateWriter, output_path

from . import log as event_log
from .settings import RunSettings, resolve_settings

_LOGGER = logging.getLogger(__name__)


def derive_run_id(model: Model, bounds: Mapping[str, int] | None) -> str:
    """Derive a deterministic run identifier from the model digest and bounds."""

    bound_part = ",".join(f"{name}={ceiling}" for name, ceiling in sorted((bounds or {}).items()))
    material = "|".join([model.digest or model.name, bound_part])
    return f"run-{uuid.uuid5(uuid.NAMESPACE_URL, material).hex[:12]}"


def load_model(model_path: str | Path, settings: RunSettings) -> Model:
    """Stage 1: obtain and validate the model under the configured profile."""

    model = obtain_model(model_path, profile=settings.profile)
    _LOGGER.info("loaded model %s with %d species (max value %d)", model.name, len(model), model.max_value)
    return model


def solve_steady_states(
    model: Model,
    *,
    bounds: Mapping[str, int] | None = None,
    trace_level: str = "none",
) -> SpaceSolver:
    """Build the constraint space for ``model`` and return a fresh solver.

    Bound problems surface here, before any search: an override that widens
    a species or names an unknown one raises ``BoundOverrideError`` and a
    bound that empties a domain raises ``InfeasibleModelError``.
    """

    space = build_space(model, bounds)
    return SpaceSolver(space, trace_level=trace_level)


def compute_steady_states(
    model: Model,
    model_path: str | Path,
    settings: RunSettings,
    *,
    bounds: Mapping[str, int] | None = None,
) -> Dict[str, Any]:
    """Stage 2: enumerate the steady states of ``model`` into its CSV file.

    The solver is built before the output file is opened, so an infeasible
    bound never leaves a partial file behind.
    """

    solver = solve_steady_states(model, bounds=bounds, trace_level=settings.trace_level)

    directory = settings.output_dir or str(Path(model_path).resolve().parent)
    target = output_path(model.name, directory, suffix=settings.suffix)
    target.parent.mkdir(parents=True, exist_ok=True)

    start = time.perf_counter()
    with target.open("w", encoding="utf-8", newline="") as handle:
        writer = SteadyStateWriter(handle, model.names, delimiter=settings.delimiter)
        for configuration in solver:
            writer.write(configuration)
    elapsed_ms = int((time.perf_counter() - start) * 1000)
    _LOGGER.info("found %d steady states for %s in %d ms", writer.rows, model.name, elapsed_ms)

    outcome: Dict[str, Any] = {
        "output_path": str(target),
        "steady_states": writer.rows,
        "stats": solver.stats.to_payload(),
        "time_ms": elapsed_ms,
    }
    if settings.trace_level != "none":
        outcome["trace"] = [
            {"event": entry.event, "level": entry.level, **entry.meta} for entry in solver.trace_recorder.snapshot()
        ]
    return outcome


def _summary(model: Model, bounds: Mapping[str, int] | None) -> Dict[str, Any]:
    return {
        "run_id": derive_run_id(model, bounds),
        "model": model.name,
        "model_digest": model.digest,
        "species": list(model.names),
        "bounds": dict(sorted((bounds or {}).items())),
    }


def record_run(results: Mapping[str, Any], settings: RunSettings) -> Optional[Path]:
    """Append the run summary to the event log when events are enabled."""

    if not settings.events_enabled:
        return None
    sink = event_log.EventLog(settings.events_dir, max_bytes=settings.events_max_bytes)
    event: Dict[str, Any] = {"event": "steady_states.completed"}
    event.update({key: value for key, value in results.items() if key != "trace"})
    return sink.append(event)


def run_steady_states(
    model_path: str | Path,
    *,
    bounds: Mapping[str, int] | None = None,
    steady: bool = True,
    settings: Optional[RunSettings] = None,
    env_overrides: Mapping[str, str] | None = None,
) -> Dict[str, Any]:
    """Load ``model_path`` and, when ``steady`` is set, write its steady states.

    Returns a summary with the run identifier, model metadata, the output
    path and the search statistics.  With ``steady`` unset the model is only
    loaded and validated.
    """

    if settings is None:
        settings = resolve_settings(env=env_overrides)

    model = load_model(model_path, settings)
    results = _summary(model, bounds)
    if not steady:
        results["validated_only"] = True
        return results

    results.update(compute_steady_states(model, model_path, settings, bounds=bounds))
    event_path = record_run(results, settings)
    if event_path is not None:
        results["event_path"] = str(event_path)
    return results


__all__ = [
    "compute_steady_states",
    "derive_run_id",
    "load_model",
    "record_run",
    "run_steady_states",
    "solve_steady_states",
]
