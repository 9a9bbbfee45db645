from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np


class IncidenceModel:
    """Read-only item/requirement incidence of a Set Covering instance.

    Items are the selectable columns (each with a cost), requirements are the
    rows that must each be covered by at least one selected item. Both
    directions of the membership relation are stored, in ascending index
    order, together with numpy index arrays for vectorized counter updates.
    """

    def __init__(self, costs: Sequence[float], covering_items: Sequence[Iterable[int]]) -> None:
        self._costs = np.asarray([float(c) for c in costs], dtype=float)
        self._costs.setflags(write=False)
        n_items = int(self._costs.size)

        covering: list[tuple[int, ...]] = []
        satisfies: list[list[int]] = [[] for _ in range(n_items)]
        for j, members in enumerate(covering_items):
            row = tuple(sorted({int(i) for i in members}))
            for i in row:
                if i < 0 or i >= n_items:
                    raise ValueError(f"Item index out of range, requirement={j}, item={i}, n_items={n_items}")
                satisfies[i].append(j)
            covering.append(row)

        self._covering = tuple(covering)
        self._satisfies = tuple(tuple(col) for col in satisfies)
        self._satisfies_sets = tuple(frozenset(col) for col in self._satisfies)
        self._covering_idx = tuple(np.asarray(row, dtype=np.intp) for row in self._covering)
        self._satisfies_idx = tuple(np.asarray(col, dtype=np.intp) for col in self._satisfies)

    @classmethod
    def build(
        cls,
        item_costs: Sequence[float],
        requirement_membership: Sequence[Iterable[int]],
    ) -> "IncidenceModel":
        """Build from costs and, per requirement, the items able to cover it."""
        return cls(item_costs, requirement_membership)

    @classmethod
    def from_item_coverage(
        cls,
        item_costs: Sequence[float],
        item_satisfies: Sequence[Iterable[int]],
        n_requirements: int,
    ) -> "IncidenceModel":
        """Build from the other direction: per item, the requirements it covers."""
        if len(item_satisfies) != len(item_costs):
            raise ValueError(f"Expected {len(item_costs)} coverage rows, got {len(item_satisfies)}")
        covering: list[list[int]] = [[] for _ in range(int(n_requirements))]
        for i, members in enumerate(item_satisfies):
            for j in members:
                j = int(j)
                if j < 0 or j >= n_requirements:
                    raise ValueError(
                        f"Requirement index out of range, item={i}, requirement={j}, n_requirements={n_requirements}"
                    )
                covering[j].append(i)
        return cls(item_costs, covering)

    @property
    def n_items(self) -> int:
        return int(self._costs.size)

    @property
    def n_requirements(self) -> int:
        return len(self._covering)

    @property
    def costs(self) -> np.ndarray:
        return self._costs

    @property
    def cost_min(self) -> float:
        # Lets the GRASP score stay finite with null or negative costs.
        return float(self._costs.min()) if self._costs.size else 0.0

    @property
    def nonzeros(self) -> int:
        return sum(len(row) for row in self._covering)

    def cost(self, item: int) -> float:
        return float(self._costs[item])

    def covering_items(self, requirement: int) -> tuple[int, ...]:
        return self._covering[requirement]

    def item_satisfies(self, item: int) -> tuple[int, ...]:
        return self._satisfies[item]

    def covering_index(self, requirement: int) -> np.ndarray:
        return self._covering_idx[requirement]

    def satisfies_index(self, item: int) -> np.ndarray:
        return self._satisfies_idx[item]

    def covers(self, item: int, requirements: Iterable[int]) -> bool:
        """True if ``item`` covers every requirement in ``requirements``."""
        return self._satisfies_sets[item].issuperset(requirements)

    def coverage_counts(self, selection: Iterable[int]) -> np.ndarray:
        counts = np.zeros(self.n_requirements, dtype=np.int64)
        for i in selection:
            counts[self._satisfies_idx[i]] += 1
        return counts

    def cost_of(self, selection: Iterable[int]) -> float:
        return float(sum(self._costs[i] for i in set(selection)))

    def is_coverable(self) -> bool:
        return all(self._covering)

    def is_cover(self, selection: Iterable[int]) -> bool:
        chosen = set(selection)
        return bool(np.all(self.coverage_counts(chosen) > 0))

    def verify(self, selection: Iterable[int], objective: float, epsilon: float = 1e-9) -> bool:
        chosen = set(selection)
        diff = self.cost_of(chosen) - float(objective)
        return -epsilon <= diff <= epsilon and self.is_cover(chosen)

    def __repr__(self) -> str:
        return f"IncidenceModel(n_items={self.n_items}, n_requirements={self.n_requirements}, nonzeros={self.nonzeros})"
