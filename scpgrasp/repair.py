from __future__ import annotations

import random
from typing import Iterable

from scpgrasp.grasp import _check_params, _GreedyCover
from scpgrasp.model import IncidenceModel
from scpgrasp.solution import Solution


def repair(
    model: IncidenceModel,
    x0: Iterable[int],
    alpha: float = 1.0,
    epsilon: float = 1e-9,
    rng: random.Random | None = None,
) -> Solution:
    """Complete a partial selection to a cover, keeping every item of ``x0``.

    Items of ``x0`` are applied first, in ascending order, with the same
    bookkeeping as a construction step; the restricted-candidate loop then
    runs over the requirements still uncovered. With an empty seed this is
    exactly ``construct`` and consumes the same random draws.
    """

    _check_params(alpha, epsilon)
    if rng is None:
        rng = random.Random()

    cover = _GreedyCover(model)
    for item in sorted({int(i) for i in x0}):
        if item < 0 or item >= model.n_items:
            raise ValueError(f"Item index out of range: {item}")
        cover.apply(item)
    return cover.complete(alpha, epsilon, rng)
