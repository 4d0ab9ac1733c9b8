"""Compilation of rule tables into three-valued fixed-point predicates."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Mapping, Optional, Sequence, Tuple

from network.species import Condition, Model

from .errors import RulePreconditionError

PartialConfiguration = Sequence[Optional[int]]


class Verdict(str, Enum):
    """Outcome of testing one species' rule against a (partial) configuration."""

    SATISFIED = "SATISFIED"
    VIOLATED = "VIOLATED"
    UNDETERMINED = "UNDETERMINED"


@dataclass(frozen=True, slots=True)
class CompiledRule:
    """Fixed-point predicate of a single species.

    ``completion_level`` is the highest species index the predicate reads
    (the species itself included): once the search has assigned that level
    the verdict is conclusive.  ``determination_level`` is the highest
    regulator index, ``-1`` for a constant rule: from that level on the
    species' target is known even if the species itself is not assigned.
    """

    species: int
    regulators: Tuple[int, ...]
    table: Mapping[Condition, int]
    completion_level: int
    determination_level: int

    def prescribed(self, partial: PartialConfiguration) -> int | None:
        condition = []
        for regulator in self.regulators:
            value = partial[regulator]
            if value is None:
                return None
            condition.append(value)
        key = tuple(condition)
        try:
            return self.table[key]
        except KeyError:
            raise RulePreconditionError(self.species, key) from None

    def evaluate(self, partial: PartialConfiguration) -> Verdict:
        own = partial[self.species]
        if own is None:
            return Verdict.UNDETERMINED
        target = self.prescribed(partial)
        if target is None:
            return Verdict.UNDETERMINED
        return Verdict.SATISFIED if target == own else Verdict.VIOLATED


class ConstraintApplier:
    """Holds the compiled predicate of every species of a model."""

    def __init__(self, model: Model) -> None:
        compiled: List[CompiledRule] = []
        for rule in model.rules:
            determination = -1 if rule.is_constant else max(rule.regulators)
            compiled.append(
                CompiledRule(
                    species=rule.target,
                    regulators=tuple(rule.regulators),
                    table=rule.table,
                    completion_level=max(determination, rule.target),
                    determination_level=determination,
                )
            )
        self.rules: Tuple[CompiledRule, ...] = tuple(compiled)
        self.species_count = len(compiled)

        completing: List[List[int]] = [[] for _ in compiled]
        determined: List[List[int]] = [[] for _ in compiled]
        for rule in compiled:
            completing[rule.completion_level].append(rule.species)
            # Targets of later species that become known at this level.
            if 0 <= rule.determination_level < rule.species:
                determined[rule.determination_level].append(rule.species)
        self._completing = tuple(tuple(items) for items in completing)
        self._determined = tuple(tuple(items) for items in determined)

    def evaluate(self, species: int, partial: PartialConfiguration) -> Verdict:
        """Return the verdict of ``species``' rule on ``partial``."""

        return self.rules[species].evaluate(partial)

    def prescribed(self, species: int, partial: PartialConfiguration) -> int | None:
        """Return the target of ``species`` or ``None`` while a regulator is unassigned."""

        return self.rules[species].prescribed(partial)

    def regulators(self, species: int) -> Tuple[int, ...]:
        return self.rules[species].regulators

    def completion_level(self, species: int) -> int:
        return self.rules[species].completion_level

    def determination_level(self, species: int) -> int:
        return self.rules[species].determination_level

    def completed_at(self, level: int) -> Tuple[int, ...]:
        """Species whose predicate becomes conclusive once ``level`` is assigned."""

        return self._completing[level]

    def determined_at(self, level: int) -> Tuple[int, ...]:
        """Species after ``level`` whose target becomes known at ``level``."""

        return self._determined[level]

    def is_steady(self, configuration: Sequence[int]) -> bool:
        """Check that a full configuration is a fixed point of every rule."""

        return all(rule.evaluate(configuration) is Verdict.SATISFIED for rule in self.rules)


__all__ = ["CompiledRule", "ConstraintApplier", "PartialConfiguration", "Verdict"]
