from __future__ import annotations

import enum
import logging
from typing import Iterable

import numpy as np

from scpgrasp.model import IncidenceModel
from scpgrasp.solution import Solution

logger = logging.getLogger(__name__)


class Move(enum.IntFlag):
    DROP = 1 << 0  # 1-for-0
    SWAP_ONE_ONE = 1 << 1  # 1-for-1
    SWAP_TWO_ONE = 1 << 2  # 2-for-1
    ALL = DROP | SWAP_ONE_ONE | SWAP_TWO_ONE


MOVE_NAMES: dict[str, Move] = {
    "drop": Move.DROP,
    "swap_1_1": Move.SWAP_ONE_ONE,
    "swap_2_1": Move.SWAP_TWO_ONE,
}


def parse_moves(names: Iterable[str]) -> Move:
    moves = Move(0)
    for name in names:
        key = str(name).strip().lower()
        if key == "all":
            moves |= Move.ALL
            continue
        if key not in MOVE_NAMES:
            raise ValueError(f"Unknown local search move: {name!r}; expected one of {sorted(MOVE_NAMES)}")
        moves |= MOVE_NAMES[key]
    return moves


def _first_cover(
    model: IncidenceModel,
    sol: Solution,
    max_cost: float,
    critical: list[int],
) -> int | None:
    """Lowest-index unselected item cheaper than ``max_cost`` covering ``critical``."""
    cheaper = np.flatnonzero((model.costs < max_cost) & ~sol.selected)
    for i in cheaper:
        if model.covers(int(i), critical):
            return int(i)
    return None


def _drop(model: IncidenceModel, sol: Solution, v: np.ndarray) -> int:
    # One ascending sweep. Removals only lower v, so an item kept here can
    # never become removable later in the same sweep.
    dropped = 0
    for s in list(sol.items):
        sat = model.satisfies_index(s)
        if np.all(v[sat] >= 2):
            v[sat] -= 1
            sol.remove(s)
            dropped += 1
    return dropped


def _swap_one_one(model: IncidenceModel, sol: Solution, v: np.ndarray) -> int:
    swaps = 0
    improved = True
    while improved:
        improved = False
        for s in list(sol.items):
            sat = model.satisfies_index(s)
            critical = sat[v[sat] <= 1].tolist()
            i = _first_cover(model, sol, model.cost(s), critical)
            if i is None:
                continue
            v[sat] -= 1
            v[model.satisfies_index(i)] += 1
            sol.remove(s)
            sol.add(i)
            swaps += 1
            improved = True
            break
    return swaps


def _swap_two_one(model: IncidenceModel, sol: Solution, v: np.ndarray) -> int:
    swaps = 0
    improved = True
    while improved:
        improved = False
        items = list(sol.items)
        for a, s1 in enumerate(items):
            sat1 = model.satisfies_index(s1)
            for s2 in items[a + 1:]:
                sat2 = model.satisfies_index(s2)
                v_pair = v.copy()
                v_pair[sat1] -= 1
                v_pair[sat2] -= 1
                touched = np.union1d(sat1, sat2)
                critical = touched[v_pair[touched] <= 0].tolist()
                i = _first_cover(model, sol, model.cost(s1) + model.cost(s2), critical)
                if i is None:
                    continue
                v_pair[model.satisfies_index(i)] += 1
                v[:] = v_pair
                sol.remove(s1)
                sol.remove(s2)
                sol.add(i)
                swaps += 1
                improved = True
                break
            if improved:
                break
    return swaps


def improve(
    model: IncidenceModel,
    x0: Solution | Iterable[int],
    moves: Move = Move.ALL,
) -> Solution:
    """Local search over the Drop, Swap 1-for-1 and Swap 2-for-1 neighbourhoods.

    Enabled neighbourhoods run once each in that fixed order: Drop is a single
    ascending pass, the two swaps iterate first-improvement to their own
    fixpoint. Nothing is re-interleaved afterwards; callers wanting a full
    variable neighbourhood descent loop over ``improve`` until the cost stops
    decreasing.

    A ``Solution`` argument is modified in place and returned; any other
    iterable of item indices yields a new ``Solution``. Every move keeps all
    covered requirements covered, so a feasible input stays feasible.
    """

    if isinstance(x0, Solution):
        sol = x0
        # Start from the exact sum, not the incrementally maintained total.
        sol.cost = model.cost_of(sol.items)
    else:
        sol = Solution(model, x0)

    v = model.coverage_counts(sol.items)
    moves = Move(moves)
    start_cost = sol.cost

    dropped = _drop(model, sol, v) if moves & Move.DROP else 0
    swaps_1_1 = _swap_one_one(model, sol, v) if moves & Move.SWAP_ONE_ONE else 0
    swaps_2_1 = _swap_two_one(model, sol, v) if moves & Move.SWAP_TWO_ONE else 0

    logger.debug(
        "local search: cost %g -> %g (drop=%d, 1-1=%d, 2-1=%d)",
        start_cost,
        sol.cost,
        dropped,
        swaps_1_1,
        swaps_2_1,
    )
    return sol
