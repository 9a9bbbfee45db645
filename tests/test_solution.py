from __future__ import annotations

import pytest

from scpgrasp.solution import Solution


def test_add_and_remove_track_cost_and_order(scenario_model):
    sol = Solution(scenario_model)
    sol.add(2)
    sol.add(0)
    sol.add(0)
    assert sol.items == [0, 2]
    assert sol.cost == pytest.approx(4.0)
    assert 2 in sol and 1 not in sol
    sol.remove(2)
    sol.remove(1)
    assert sol.items == [0]
    assert sol.cost == pytest.approx(1.0)
    assert sol.selected.tolist() == [True, False, False]


def test_feasibility_and_set_view(scenario_model):
    sol = Solution(scenario_model, [1, 0])
    assert sol.is_feasible()
    assert sol.as_set() == frozenset({0, 1})
    assert len(sol) == 2
    assert not Solution(scenario_model, [0]).is_feasible()


def test_copy_is_independent(scenario_model):
    sol = Solution(scenario_model, [0, 1])
    other = sol.copy()
    other.remove(0)
    assert sol.items == [0, 1]
    assert other.items == [1]
    assert sol.cost == pytest.approx(2.0)


def test_iteration_is_a_snapshot(scenario_model):
    sol = Solution(scenario_model, [0, 1, 2])
    for i in sol:
        sol.remove(i)
    assert sol.items == []
    assert sol.cost == pytest.approx(0.0)


def test_out_of_range_item_rejected(scenario_model):
    with pytest.raises(ValueError):
        Solution(scenario_model, [5])
