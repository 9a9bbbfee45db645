from __future__ import annotations

import bisect
from typing import Iterable, Iterator

import numpy as np

from scpgrasp.model import IncidenceModel


class Solution:
    """Selected items of one instance plus their running total cost.

    Membership is a boolean flag per item; ``items`` keeps the selected
    indices in ascending order so neighbourhood scans can iterate over a
    snapshot while the selection changes underneath.
    """

    def __init__(self, model: IncidenceModel, items: Iterable[int] = ()) -> None:
        self.model = model
        self.selected = np.zeros(model.n_items, dtype=bool)
        self.items: list[int] = []
        self.cost = 0.0
        for i in sorted({int(x) for x in items}):
            self.add(i)

    def add(self, item: int) -> None:
        if item < 0 or item >= self.model.n_items:
            raise ValueError(f"Item index out of range: {item}")
        if self.selected[item]:
            return
        self.selected[item] = True
        bisect.insort(self.items, item)
        self.cost += self.model.cost(item)

    def remove(self, item: int) -> None:
        if not self.selected[item]:
            return
        self.selected[item] = False
        del self.items[bisect.bisect_left(self.items, item)]
        self.cost -= self.model.cost(item)

    def as_set(self) -> frozenset[int]:
        return frozenset(self.items)

    def is_feasible(self) -> bool:
        return self.model.is_cover(self.items)

    def copy(self) -> "Solution":
        new_sol = Solution.__new__(Solution)
        new_sol.model = self.model
        new_sol.selected = self.selected.copy()
        new_sol.items = list(self.items)
        new_sol.cost = self.cost
        return new_sol

    def __contains__(self, item: object) -> bool:
        return isinstance(item, (int, np.integer)) and 0 <= item < self.selected.size and bool(self.selected[item])

    def __iter__(self) -> Iterator[int]:
        return iter(list(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        return f"Solution(cost={self.cost:g}, items={self.items})"
