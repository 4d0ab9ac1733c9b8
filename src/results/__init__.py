"""Persistence of enumerated steady states."""

from __future__ import annotations

from .writer import SteadyStateWriter, output_path, write_steady_states

__all__ = ["SteadyStateWriter", "output_path", "write_steady_states"]
