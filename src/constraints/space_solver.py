"""Resumable backtracking enumerator over a :class:`SteadySpace`.

The solver hands out one steady state per :meth:`SpaceSolver.next` call.  The
backtracking frontier lives in an explicit stack of :class:`Frame` objects so
that a call can return in the middle of the search and the following call
picks up exactly where the previous one stopped.

Species are assigned in index order and values are tried in increasing order,
so configurations come out in lexicographic order.  Two kinds of pruning keep
the search away from most of the product space:

* after assigning level ``k`` every rule whose last read species is ``k`` is
  evaluated, and a ``VIOLATED`` verdict discards the subtree;
* a species whose regulators are all assigned can only take its rule's target,
  so its candidates shrink to that single value, and a target that falls
  outside the species' admissible set discards the subtree as soon as the
  last regulator is assigned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from .applier import ConstraintApplier, Verdict
from .bounds import bits_to_values
from .steady_space import SteadySpace
from .trace import SearchStats, SearchTraceRecorder

_LOGGER = logging.getLogger(__name__)

Configuration = Tuple[int, ...]


class SearchState(str, Enum):
    READY = "READY"
    SEARCHING = "SEARCHING"
    EXHAUSTED = "EXHAUSTED"


@dataclass(slots=True)
class Frame:
    """Choice point of one level: its candidate values and the next one to try."""

    level: int
    candidates: Tuple[int, ...]
    position: int = 0

    def exhausted(self) -> bool:
        return self.position >= len(self.candidates)


class SpaceSolver:
    """Enumerates the steady states of a configured :class:`SteadySpace`."""

    def __init__(
        self,
        space: SteadySpace,
        *,
        trace_level: str = "none",
        trace_recorder: Optional[SearchTraceRecorder] = None,
    ) -> None:
        self.space = space
        self.state = SearchState.READY
        self.stats = SearchStats()
        self.trace_recorder = trace_recorder or SearchTraceRecorder(trace_level=trace_level)
        self._applier: ConstraintApplier | None = None
        self._partial: List[Optional[int]] = [None] * space.species_count
        self._stack: List[Frame] = []

    def __iter__(self) -> Iterator[Configuration]:
        while True:
            configuration = self.next()
            if configuration is None:
                return
            yield configuration

    @property
    def depth(self) -> int:
        return len(self._stack)

    def next(self) -> Configuration | None:
        """Return the next steady state, or ``None`` once the space is exhausted."""

        if self.state is SearchState.EXHAUSTED:
            return None
        if self.state is SearchState.READY:
            self._applier = self.space.freeze()
            self.state = SearchState.SEARCHING
            if self.space.species_count == 0:
                # The empty configuration is vacuously steady.
                self._finish()
                self.stats.solutions += 1
                return ()
            self._stack.append(Frame(0, self._candidates(0)))

        return self._search()

    # Internal helpers -------------------------------------------------

    def _search(self) -> Configuration | None:
        last = self.space.species_count - 1
        partial = self._partial
        stack = self._stack
        while stack:
            frame = stack[-1]
            level = frame.level
            partial[level] = None
            if frame.exhausted():
                stack.pop()
                continue

            value = frame.candidates[frame.position]
            frame.position += 1
            partial[level] = value
            self.stats.nodes += 1
            self.trace_recorder.record("assign", level, value=value)

            if not self._consistent(level):
                continue
            if level == last:
                configuration = tuple(partial)  # type: ignore[arg-type]
                self.stats.solutions += 1
                self.trace_recorder.record("solution", level, configuration=list(configuration))
                return configuration
            stack.append(Frame(level + 1, self._candidates(level + 1)))

        self._finish()
        return None

    def _finish(self) -> None:
        self.state = SearchState.EXHAUSTED
        self._stack.clear()
        self.trace_recorder.record("exhausted", -1, solutions=self.stats.solutions)
        _LOGGER.debug("search exhausted: %s", self.stats.to_payload())

    def _candidates(self, level: int) -> Tuple[int, ...]:
        assert self._applier is not None
        mask = self.space.bounds.mask(level)
        rule = self._applier.rules[level]
        if rule.determination_level < level:
            target = rule.prescribed(self._partial)
            assert target is not None
            forced = mask & (1 << target) if target >= 0 else 0
            self.stats.values_filtered += mask.bit_count() - forced.bit_count()
            mask = forced
        return bits_to_values(mask)

    def _consistent(self, level: int) -> bool:
        applier = self._applier
        assert applier is not None
        partial = self._partial
        for species in applier.completed_at(level):
            if applier.evaluate(species, partial) is Verdict.VIOLATED:
                self.stats.rule_prunes += 1
                self.trace_recorder.record("violated", level, species=species)
                return False
        bounds = self.space.bounds
        for species in applier.determined_at(level):
            target = applier.prescribed(species, partial)
            if target is None or not bounds.contains(species, target):
                self.stats.forward_prunes += 1
                self.trace_recorder.record("wipeout", level, species=species, target=target)
                return False
        return True


def enumerate_steady_states(space: SteadySpace) -> List[Configuration]:
    """Drain a fresh solver over ``space`` and return every steady state."""

    return list(SpaceSolver(space))


__all__ = ["Configuration", "Frame", "SearchState", "SpaceSolver", "enumerate_steady_states"]
