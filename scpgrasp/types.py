from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class SolveResult:
    objective: float
    runtime_sec: float
    is_feasible: bool
    selected_items: tuple[int, ...]
    meta: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ExperimentReport:
    instance_path: str
    n_items: int
    n_requirements: int
    reference: float | None
    summary: dict[str, float]
    runs: Any  # pandas.DataFrame
    run_dir: Path | None = None
    baseline: SolveResult | None = None

    @property
    def has_optimum(self) -> bool:
        return self.reference is not None
