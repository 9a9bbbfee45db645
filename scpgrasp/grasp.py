from __future__ import annotations

import logging
import random

import numpy as np

from scpgrasp.errors import InfeasibleError
from scpgrasp.model import IncidenceModel
from scpgrasp.solution import Solution

logger = logging.getLogger(__name__)


def _check_params(alpha: float, epsilon: float) -> None:
    if not 0.0 <= alpha <= 1.0:
        raise ValueError(f"alpha must be in [0, 1], got {alpha}")
    if epsilon <= 0.0:
        raise ValueError(f"epsilon must be > 0, got {epsilon}")


class _GreedyCover:
    """Incremental coverage bookkeeping shared by construction and repair.

    ``u[i]`` counts the still uncovered requirements item ``i`` would cover,
    ``v[j]`` counts the selected items covering requirement ``j``.
    """

    def __init__(self, model: IncidenceModel) -> None:
        self.model = model
        self.solution = Solution(model)
        self.u = np.array([len(model.item_satisfies(i)) for i in range(model.n_items)], dtype=np.int64)
        self.v = np.zeros(model.n_requirements, dtype=np.int64)
        self.num_covered = 0
        self._denominator = 1.0 + model.costs - model.cost_min

    def apply(self, item: int) -> int:
        """Select ``item`` and return how many requirements it newly covers."""
        model = self.model
        self.solution.add(item)
        sat = model.satisfies_index(item)
        fresh = sat[self.v[sat] == 0]
        for j in fresh:
            self.u[model.covering_index(int(j))] -= 1
        self.v[sat] += 1
        self.num_covered += int(fresh.size)
        return int(fresh.size)

    def restricted_candidates(self, alpha: float, epsilon: float) -> np.ndarray:
        candidates = np.flatnonzero(self.u > 0)
        if candidates.size == 0:
            return candidates
        e = self.u[candidates] / self._denominator[candidates]
        e_min = float(e.min())
        e_max = float(e.max())
        e_limit = e_min + alpha * (e_max - e_min)
        return candidates[e + epsilon >= e_limit]

    def complete(self, alpha: float, epsilon: float, rng: random.Random) -> Solution:
        n_requirements = self.model.n_requirements
        steps = 0
        while self.num_covered < n_requirements:
            rcl = self.restricted_candidates(alpha, epsilon)
            if rcl.size == 0:
                raise InfeasibleError(n_requirements - self.num_covered)
            chosen = int(rcl[rng.randrange(int(rcl.size))])
            self.apply(chosen)
            steps += 1
        logger.debug("greedy cover done: steps=%d items=%d cost=%g", steps, len(self.solution), self.solution.cost)
        return self.solution


def construct(
    model: IncidenceModel,
    alpha: float = 0.9,
    epsilon: float = 1e-9,
    rng: random.Random | None = None,
) -> Solution:
    """Semi-greedy randomized construction of a feasible cover.

    At each step every item with positive residual benefit ``u`` is scored by
    ``u / (1 + cost - cost_min)``; one item is drawn uniformly from those
    scoring within ``alpha`` of the best (``alpha=1`` is greedy up to ties,
    ``alpha=0`` is a uniform choice among all useful items).

    Raises ``InfeasibleError`` when some requirement has no covering item.
    """

    _check_params(alpha, epsilon)
    if rng is None:
        rng = random.Random()
    return _GreedyCover(model).complete(alpha, epsilon, rng)
