"""Steady-state space engine: bounds, rule predicates and the resumable solver."""

from __future__ import annotations

from .applier import CompiledRule, ConstraintApplier, PartialConfiguration, Verdict
from .bounds import BoundManager, bits_to_values
from .errors import (
    BoundOverrideError,
    InfeasibleModelError,
    RulePreconditionError,
    SpaceStateError,
    SteadySpaceError,
)
from .space_solver import Configuration, Frame, SearchState, SpaceSolver, enumerate_steady_states
from .steady_space import SteadySpace, build_space
from .trace import TRACE_LEVELS, SearchStats, SearchTraceEntry, SearchTraceRecorder

__all__ = [
    "TRACE_LEVELS",
    "BoundManager",
    "BoundOverrideError",
    "CompiledRule",
    "Configuration",
    "ConstraintApplier",
    "Frame",
    "InfeasibleModelError",
    "PartialConfiguration",
    "RulePreconditionError",
    "SearchState",
    "SearchStats",
    "SearchTraceEntry",
    "SearchTraceRecorder",
    "SpaceSolver",
    "SpaceStateError",
    "SteadySpace",
    "SteadySpaceError",
    "Verdict",
    "bits_to_values",
    "build_space",
    "enumerate_steady_states",
]
