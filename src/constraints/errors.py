"""Exceptions raised by the steady-state space engine."""

from __future__ import annotations


class SteadySpaceError(RuntimeError):
    """Base class for steady-state space failures."""


class InfeasibleModelError(SteadySpaceError, ValueError):
    """A bound leaves a species without any admissible value."""

    def __init__(self, index: int, detail: str, *, name: str | None = None) -> None:
        self.index = index
        self.name = name
        self.detail = detail
        label = name if name is not None else f"#{index}"
        super().__init__(f"species {label}: {detail}")


class BoundOverrideError(InfeasibleModelError):
    """An external bound tries to widen a species or names an unknown one."""


class RulePreconditionError(SteadySpaceError):
    """A rule table has no target for a regulator combination."""

    def __init__(self, species: int, condition: tuple[int, ...]) -> None:
        self.species = species
        self.condition = condition
        super().__init__(f"rule of species #{species} has no target for regulator values {list(condition)}")


class SpaceStateError(SteadySpaceError):
    """The space was used out of order (bounded after search, solved without a model)."""


__all__ = [
    "BoundOverrideError",
    "InfeasibleModelError",
    "RulePreconditionError",
    "SpaceStateError",
    "SteadySpaceError",
]
