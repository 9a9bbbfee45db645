from __future__ import annotations

import random

import pytest

from scpgrasp.errors import InfeasibleError
from scpgrasp.grasp import _GreedyCover, construct
from scpgrasp.model import IncidenceModel


@pytest.mark.parametrize("seed", range(10))
def test_greedy_picks_two_cheap_items_over_expensive_one(scenario_model, seed):
    sol = construct(scenario_model, alpha=1.0, epsilon=1e-9, rng=random.Random(seed))
    assert sol.items == [0, 1]
    assert sol.cost == pytest.approx(2.0)


@pytest.mark.parametrize("alpha", [0.0, 0.3, 0.9, 1.0])
@pytest.mark.parametrize("seed", [0, 1, 2])
def test_construction_is_feasible_and_cost_consistent(random_model, alpha, seed):
    sol = construct(random_model, alpha=alpha, epsilon=1e-9, rng=random.Random(seed))
    assert random_model.is_cover(sol.items)
    assert abs(sol.cost - random_model.cost_of(sol.items)) <= 1e-9


def test_rcl_alpha_one_keeps_only_best_scores(scenario_model):
    cover = _GreedyCover(scenario_model)
    # scores: item0 = 2/1, item1 = 2/1, item2 = 3/3
    assert cover.restricted_candidates(1.0, 1e-9).tolist() == [0, 1]
    cover.apply(0)
    assert cover.u.tolist() == [0, 1, 1]
    assert cover.restricted_candidates(1.0, 1e-9).tolist() == [1]


def test_rcl_alpha_zero_keeps_every_useful_item(scenario_model):
    cover = _GreedyCover(scenario_model)
    assert cover.restricted_candidates(0.0, 1e-9).tolist() == [0, 1, 2]
    cover.apply(0)
    assert cover.restricted_candidates(0.0, 1e-9).tolist() == [1, 2]


def test_apply_updates_counters(scenario_model):
    cover = _GreedyCover(scenario_model)
    assert cover.apply(2) == 3
    assert cover.v.tolist() == [1, 1, 1]
    assert cover.u.tolist() == [0, 0, 0]
    assert cover.num_covered == 3
    assert cover.solution.cost == 3.0


def test_alpha_zero_reaches_non_greedy_choices(scenario_model):
    picked = {tuple(construct(scenario_model, alpha=0.0, rng=random.Random(seed)).items) for seed in range(60)}
    assert (2,) in picked
    assert (0, 1) in picked


def test_same_seed_same_solution(random_model):
    a = construct(random_model, alpha=0.5, rng=random.Random(42))
    b = construct(random_model, alpha=0.5, rng=random.Random(42))
    assert a.items == b.items
    assert a.cost == b.cost


def test_non_positive_costs_are_scored():
    model = IncidenceModel.build([0, -5, 2], [[0, 2], [1], [1, 2]])
    sol = construct(model, alpha=1.0, rng=random.Random(0))
    assert model.is_cover(sol.items)
    assert 1 in sol.items
    assert sol.cost == pytest.approx(model.cost_of(sol.items))


def test_infeasible_instance_raises(infeasible_model):
    for seed in range(5):
        with pytest.raises(InfeasibleError) as excinfo:
            construct(infeasible_model, alpha=0.5, rng=random.Random(seed))
        assert excinfo.value.uncovered == 1


def test_no_requirements_gives_empty_solution():
    model = IncidenceModel.build([1.0, 2.0], [])
    sol = construct(model, rng=random.Random(0))
    assert sol.items == []
    assert sol.cost == 0.0


@pytest.mark.parametrize("alpha,epsilon", [(-0.1, 1e-9), (1.5, 1e-9), (0.5, -1.0), (0.5, 0.0)])
def test_bad_parameters_rejected(scenario_model, alpha, epsilon):
    with pytest.raises(ValueError):
        construct(scenario_model, alpha=alpha, epsilon=epsilon, rng=random.Random(0))
