from __future__ import annotations

import random

import pytest

from scpgrasp.errors import InfeasibleError
from scpgrasp.grasp import construct
from scpgrasp.repair import repair


@pytest.mark.parametrize("alpha", [0.0, 0.5, 1.0])
@pytest.mark.parametrize("seed", [0, 3, 11])
def test_empty_seed_matches_construction(random_model, alpha, seed):
    built = construct(random_model, alpha=alpha, epsilon=1e-9, rng=random.Random(seed))
    repaired = repair(random_model, [], alpha=alpha, epsilon=1e-9, rng=random.Random(seed))
    assert repaired.items == built.items
    assert repaired.cost == built.cost


def test_seed_items_are_kept(scenario_model):
    sol = repair(scenario_model, [0], alpha=1.0, rng=random.Random(0))
    assert sol.items == [0, 1]
    assert sol.cost == pytest.approx(2.0)


def test_feasible_seed_is_returned_without_random_draws(scenario_model):
    rng = random.Random(5)
    sol = repair(scenario_model, [2], rng=rng)
    assert sol.items == [2]
    assert sol.cost == pytest.approx(3.0)
    assert rng.random() == random.Random(5).random()


def test_redundant_seed_is_not_pruned(scenario_model):
    sol = repair(scenario_model, [2, 0, 0], rng=random.Random(0))
    assert sol.items == [0, 2]
    assert sol.cost == pytest.approx(4.0)


@pytest.mark.parametrize("seed", range(5))
def test_partial_seed_completed(random_model, seed):
    partial = construct(random_model, alpha=0.5, rng=random.Random(seed)).items[:2]
    sol = repair(random_model, partial, alpha=0.7, rng=random.Random(seed))
    assert set(partial) <= set(sol.items)
    assert random_model.is_cover(sol.items)
    assert abs(sol.cost - random_model.cost_of(sol.items)) <= 1e-9


def test_infeasible_instance_raises(infeasible_model):
    with pytest.raises(InfeasibleError):
        repair(infeasible_model, [], rng=random.Random(0))
    with pytest.raises(InfeasibleError):
        repair(infeasible_model, [0, 1], rng=random.Random(0))


def test_out_of_range_seed_rejected(scenario_model):
    with pytest.raises(ValueError):
        repair(scenario_model, [3], rng=random.Random(0))
