"""Constraint space whose solutions are the steady states of a model."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from network.species import Model

from .applier import ConstraintApplier
from .bounds import BoundManager
from .errors import BoundOverrideError, SpaceStateError

_LOGGER = logging.getLogger(__name__)


class SteadySpace:
    """Bounds plus compiled fixed-point constraints for one solver run.

    The space is configured in two phases: bounds first (``bound_species``,
    ``restrict_species``), then ``apply_model``.  Once a solver starts
    searching the space is frozen and further configuration raises
    :class:`SpaceStateError`.
    """

    def __init__(self, species_count: int, max_value: int) -> None:
        self.bounds = BoundManager(species_count, max_value)
        self.applier: ConstraintApplier | None = None
        self.model: Model | None = None
        self._frozen = False

    @property
    def species_count(self) -> int:
        return self.bounds.species_count

    def _ensure_open(self) -> None:
        if self._frozen:
            raise SpaceStateError("space is already being searched and can no longer be configured")

    def bound_species(self, index: int, ceiling: int) -> None:
        self._ensure_open()
        self.bounds.bound_species(index, ceiling)

    def restrict_species(self, index: int, values: Iterable[int]) -> None:
        self._ensure_open()
        self.bounds.restrict_species(index, values)

    def apply_model(self, model: Model) -> None:
        """Compile the rules of ``model`` into the space's constraints."""

        self._ensure_open()
        if len(model) != self.species_count:
            raise SpaceStateError(
                f"model has {len(model)} species but the space was built for {self.species_count}"
            )
        self.bounds.name_species(model.names)
        self.applier = ConstraintApplier(model)
        self.model = model
        _LOGGER.debug(
            "applied model %s: %d species, %d candidate configurations",
            model.name,
            self.species_count,
            self.bounds.space_size(),
        )

    def freeze(self) -> ConstraintApplier:
        if self.applier is None:
            raise SpaceStateError("apply_model() must be called before searching the space")
        self._frozen = True
        return self.applier

    @property
    def frozen(self) -> bool:
        return self._frozen


def build_space(model: Model, overrides: Mapping[str, int] | None = None) -> SteadySpace:
    """Create a space for ``model`` with declared bounds and optional overrides.

    Overrides map species names to a ceiling.  They may only tighten a
    species: a ceiling above the declared maximum raises
    :class:`BoundOverrideError`, as does an unknown species name.  A ceiling
    that leaves no value raises :class:`InfeasibleModelError`.
    """

    space = SteadySpace(len(model), model.max_value)
    space.bounds.name_species(model.names)
    for specie in model.species:
        space.bound_species(specie.index, specie.max_value)
    for name, ceiling in sorted((overrides or {}).items()):
        try:
            index = model.index_of(name)
        except KeyError:
            raise BoundOverrideError(-1, "bound names an unknown species", name=name) from None
        declared = model.species[index].max_value
        if ceiling > declared:
            raise BoundOverrideError(
                index,
                f"bound {ceiling} would widen the declared domain [0, {declared}]",
                name=name,
            )
        space.bound_species(index, ceiling)
    space.apply_model(model)
    return space


__all__ = ["SteadySpace", "build_space"]
