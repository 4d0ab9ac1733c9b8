"""Immutable value objects describing a qualitative regulatory network."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence, Tuple

Condition = Tuple[int, ...]


@dataclass(frozen=True, slots=True)
class Species:
    """A regulated quantity with the closed integer domain ``[0, max_value]``."""

    index: int
    name: str
    max_value: int

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"species index must be >= 0, got {self.index!r}")
        if self.max_value < 0:
            raise ValueError(f"species {self.name!r} max_value must be >= 0, got {self.max_value!r}")

    @property
    def domain(self) -> range:
        return range(self.max_value + 1)


@dataclass(frozen=True, slots=True)
class Rule:
    """Lookup table from regulator values to the next value of ``target``.

    ``regulators`` holds species indices in the order used by the keys of
    ``table``.  The loader guarantees the table is total over the regulators'
    domains and that every target lies within the regulated species' domain.
    """

    target: int
    regulators: Tuple[int, ...]
    table: Mapping[Condition, int]

    @property
    def is_constant(self) -> bool:
        return not self.regulators


@dataclass(frozen=True)
class Model:
    """Species, their rules (index-aligned) and the global maximum value."""

    name: str
    species: Tuple[Species, ...]
    rules: Tuple[Rule, ...]
    max_value: int = field(default=-1)
    digest: str = ""

    def __post_init__(self) -> None:
        if len(self.species) != len(self.rules):
            raise ValueError("every species needs exactly one rule")
        for position, specie in enumerate(self.species):
            if specie.index != position:
                raise ValueError(f"species {specie.name!r} has index {specie.index}, expected {position}")
            if self.rules[position].target != position:
                raise ValueError(f"rule at position {position} regulates species {self.rules[position].target}")
        if self.max_value < 0:
            computed = max((specie.max_value for specie in self.species), default=0)
            object.__setattr__(self, "max_value", computed)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(specie.name for specie in self.species)

    def index_of(self, name: str) -> int:
        for specie in self.species:
            if specie.name == name:
                return specie.index
        raise KeyError(f"Unknown species: {name}")

    def __len__(self) -> int:
        return len(self.species)


def build_model(
    name: str,
    species: Sequence[Tuple[str, int]],
    rules: Sequence[Tuple[Sequence[str], Mapping[Condition, int]]],
) -> Model:
    """Assemble a :class:`Model` from names, keeping the given species order.

    Intended for programmatic construction (tests, notebooks).  Regulators are
    given by name and resolved against ``species``.  No semantic control is
    performed; use :func:`network.loader.parse_model` for untrusted input.
    """

    index = {specie_name: position for position, (specie_name, _) in enumerate(species)}
    built_species = tuple(
        Species(index=position, name=specie_name, max_value=int(max_value))
        for position, (specie_name, max_value) in enumerate(species)
    )
    built_rules = tuple(
        Rule(
            target=position,
            regulators=tuple(index[regulator] for regulator in regulators),
            table={tuple(key): int(value) for key, value in table.items()},
        )
        for position, (regulators, table) in enumerate(rules)
    )
    return Model(name=name, species=built_species, rules=built_rules)


__all__ = ["Condition", "Model", "Rule", "Species", "build_model"]
