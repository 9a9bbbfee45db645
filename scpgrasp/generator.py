from __future__ import annotations

import random

from scpgrasp.model import IncidenceModel


def _build_covering(
    n_requirements: int,
    n_items: int,
    target_density: float,
    rng: random.Random,
) -> list[set[int]]:
    total_pairs = n_requirements * n_items
    target_nonzeros = int(round(total_pairs * target_density))
    target_nonzeros = max(n_requirements, min(total_pairs, target_nonzeros))

    covering = [{rng.randrange(n_items)} for _ in range(n_requirements)]
    used = n_requirements

    # Each item covers at least one requirement.
    assigned = set().union(*covering)
    for item in range(n_items):
        if item in assigned:
            continue
        covering[rng.randrange(n_requirements)].add(item)
        used += 1

    attempts = 0
    max_attempts = max(10_000, target_nonzeros * 40)
    while used < target_nonzeros and attempts < max_attempts:
        j = rng.randrange(n_requirements)
        item = rng.randrange(n_items)
        if item not in covering[j]:
            covering[j].add(item)
            used += 1
        attempts += 1
    return covering


def generate_instance(
    n_requirements: int,
    n_items: int,
    density: float = 0.05,
    seed: int = 2026,
    cost_range: tuple[int, int] = (1, 100),
) -> IncidenceModel:
    """Random coverable instance with integer costs drawn uniformly from ``cost_range``."""

    if n_requirements < 1 or n_items < 1:
        raise ValueError("n_requirements and n_items must be >= 1")
    if not 0.0 < density <= 1.0:
        raise ValueError(f"density must be in (0, 1], got {density}")
    lo, hi = int(cost_range[0]), int(cost_range[1])
    if lo > hi:
        raise ValueError(f"Empty cost range: {cost_range}")

    rng = random.Random(seed)
    covering = _build_covering(n_requirements, n_items, float(density), rng)
    costs = [rng.randint(lo, hi) for _ in range(n_items)]
    return IncidenceModel.build(costs, covering)
