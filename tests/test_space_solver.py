from __future__ import annotations

import itertools
import random

import pytest

from constraints import (
    BoundOverrideError,
    InfeasibleModelError,
    RulePreconditionError,
    SearchState,
    SpaceSolver,
    SpaceStateError,
    SteadySpace,
    build_space,
    enumerate_steady_states,
)
from network import Model, build_model


def _toggle() -> Model:
    return build_model(
        "toggle",
        [("A", 1), ("B", 1)],
        [(["B"], {(0,): 0, (1,): 1}), (["A"], {(0,): 0, (1,): 1})],
    )


def _cycle(size: int, max_value: int) -> Model:
    names = [f"S{i}" for i in range(size)]
    identity = {(value,): value for value in range(max_value + 1)}
    return build_model(
        "cycle",
        [(name, max_value) for name in names],
        [([names[i - 1]], identity) for i in range(size)],
    )


def _random_model(rng: random.Random, name: str) -> Model:
    count = rng.randint(1, 5)
    maxima = [rng.randint(0, 2) for _ in range(count)]
    names = [f"X{i}" for i in range(count)]
    rules = []
    for position in range(count):
        regulators = rng.sample(names, rng.randint(0, min(3, count)))
        domains = [range(maxima[names.index(regulator)] + 1) for regulator in regulators]
        table = {
            condition: rng.randint(0, maxima[position]) for condition in itertools.product(*domains)
        }
        rules.append((regulators, table))
    return build_model(name, list(zip(names, maxima)), rules)


def _brute_force(model: Model, ceilings: dict[str, int] | None = None) -> list[tuple[int, ...]]:
    ceilings = ceilings or {}
    domains = [
        range(min(specie.max_value, ceilings.get(specie.name, specie.max_value)) + 1) for specie in model.species
    ]
    found = []
    for configuration in itertools.product(*domains):
        steady = all(
            rule.table[tuple(configuration[regulator] for regulator in rule.regulators)] == configuration[rule.target]
            for rule in model.rules
        )
        if steady:
            found.append(configuration)
    return found


def test_toggle_has_two_steady_states() -> None:
    solver = SpaceSolver(build_space(_toggle()))

    assert solver.next() == (0, 0)
    assert solver.next() == (1, 1)
    assert solver.next() is None
    assert solver.state is SearchState.EXHAUSTED


def test_exhaustion_is_idempotent() -> None:
    solver = SpaceSolver(build_space(_toggle()))
    list(solver)

    for _ in range(3):
        assert solver.next() is None
    assert solver.stats.solutions == 2


def test_bound_removes_high_state() -> None:
    states = enumerate_steady_states(build_space(_toggle(), {"A": 0}))
    assert states == [(0, 0)]


def test_matches_brute_force_on_random_models() -> None:
    rng = random.Random(20240611)
    for round_number in range(60):
        model = _random_model(rng, f"random-{round_number}")
        assert enumerate_steady_states(build_space(model)) == _brute_force(model)


def test_bounds_match_brute_force_and_never_add_states() -> None:
    rng = random.Random(7)
    for round_number in range(40):
        model = _random_model(rng, f"bounded-{round_number}")
        unbounded = enumerate_steady_states(build_space(model))
        specie = rng.choice(model.species)
        ceilings = {specie.name: rng.randint(0, specie.max_value)}

        bounded = enumerate_steady_states(build_space(model, ceilings))

        assert bounded == _brute_force(model, ceilings)
        assert set(bounded) <= set(unbounded)


def test_output_is_lexicographic() -> None:
    states = enumerate_steady_states(build_space(_cycle(3, 2)))
    assert states == [(0, 0, 0), (1, 1, 1), (2, 2, 2)]
    assert states == sorted(states)


def test_forced_values_keep_search_small() -> None:
    solver = SpaceSolver(build_space(_cycle(6, 2)))
    states = list(solver)

    assert len(states) == 3
    # Only the first species branches; every later one is forced by its regulator.
    assert solver.stats.nodes == 18
    assert solver.stats.solutions == 3


def test_constant_rule_outside_bound_gives_no_states() -> None:
    model = build_model("const", [("A", 1), ("B", 1)], [([], {(): 1}), (["A"], {(0,): 0, (1,): 1})])
    solver = SpaceSolver(build_space(model, {"A": 0}))

    assert solver.next() is None
    assert solver.state is SearchState.EXHAUSTED
    assert solver.stats.nodes == 0


def test_contradictory_model_has_no_steady_state() -> None:
    negation = build_model("oscillator", [("A", 1)], [(["A"], {(0,): 1, (1,): 0})])
    solver = SpaceSolver(build_space(negation))

    assert list(solver) == []
    assert solver.stats.rule_prunes == 2


def test_forward_prune_on_determined_target() -> None:
    # B must equal 1 - A but B is bounded to 0, so A = 0 is wiped out early.
    model = build_model("wipe", [("A", 1), ("B", 1)], [([], {(): 0}), (["A"], {(0,): 1, (1,): 0})])
    solver = SpaceSolver(build_space(model, {"B": 0}))

    assert list(solver) == []
    assert solver.stats.forward_prunes == 1


def test_solver_is_resumable() -> None:
    model = _cycle(4, 3)
    first = SpaceSolver(build_space(model))
    second = SpaceSolver(build_space(model))

    assert first.next() == (0, 0, 0, 0)
    assert first.depth == 4
    assert first.state is SearchState.SEARCHING
    assert second.next() == (0, 0, 0, 0)
    assert first.next() == (1, 1, 1, 1)
    assert second.next() == (1, 1, 1, 1)
    assert list(first) == [(2, 2, 2, 2), (3, 3, 3, 3)]
    assert first.depth == 0


def test_empty_model_yields_empty_configuration_once() -> None:
    solver = SpaceSolver(build_space(build_model("empty", [], [])))

    assert solver.next() == ()
    assert solver.next() is None


def test_space_cannot_be_bounded_during_search() -> None:
    space = build_space(_toggle())
    solver = SpaceSolver(space)
    solver.next()

    assert space.frozen
    with pytest.raises(SpaceStateError):
        space.bound_species(0, 0)
    with pytest.raises(SpaceStateError):
        space.restrict_species(0, [0])


def test_space_without_model_cannot_be_searched() -> None:
    solver = SpaceSolver(SteadySpace(2, 1))
    with pytest.raises(SpaceStateError):
        solver.next()


def test_apply_model_checks_species_count() -> None:
    space = SteadySpace(3, 1)
    with pytest.raises(SpaceStateError):
        space.apply_model(_toggle())


def test_override_cannot_widen_or_name_unknown_species() -> None:
    with pytest.raises(BoundOverrideError) as excinfo:
        build_space(_toggle(), {"A": 2})
    assert excinfo.value.name == "A"

    with pytest.raises(BoundOverrideError):
        build_space(_toggle(), {"Z": 0})


def test_negative_override_is_infeasible() -> None:
    with pytest.raises(InfeasibleModelError) as excinfo:
        build_space(_toggle(), {"B": -1})
    assert not isinstance(excinfo.value, BoundOverrideError)


def test_incomplete_table_surfaces_during_search() -> None:
    model = build_model("partial", [("A", 1), ("B", 1)], [(["B"], {(0,): 0}), ([], {(): 1})])
    solver = SpaceSolver(build_space(model))

    with pytest.raises(RulePreconditionError):
        solver.next()


def test_trace_levels() -> None:
    summary = SpaceSolver(build_space(_toggle()), trace_level="summary")
    list(summary)
    events = [entry.event for entry in summary.trace_recorder.snapshot()]
    assert events == ["solution", "solution", "exhausted"]

    full = SpaceSolver(build_space(_toggle()), trace_level="full")
    list(full)
    full_events = [entry.event for entry in full.trace_recorder.snapshot()]
    assert full_events.count("assign") == full.stats.nodes
    assert full_events[-1] == "exhausted"

    silent = SpaceSolver(build_space(_toggle()))
    list(silent)
    assert silent.trace_recorder.snapshot() == ()

    with pytest.raises(ValueError):
        SpaceSolver(build_space(_toggle()), trace_level="verbose")
