"""Run pipeline for steady-state enumeration and its event log."""

from . import log
from .orchestrator import derive_run_id, run_steady_states, solve_steady_states
from .settings import RunSettings, resolve_settings

__all__ = [
    "RunSettings",
    "derive_run_id",
    "log",
    "resolve_settings",
    "run_steady_states",
    "solve_steady_states",
]
