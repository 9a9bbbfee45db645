from __future__ import annotations

import json
import logging
import random
import time
from pathlib import Path
from typing import Any, Callable

import pandas as pd

from scpgrasp.config import load_config
from scpgrasp.errors import SolutionCheckError
from scpgrasp.grasp import construct
from scpgrasp.io_dataset import read_instance
from scpgrasp.local_search import Move, improve, parse_moves
from scpgrasp.metrics import add_gap_columns, relative_gap, summarize_runs
from scpgrasp.model import IncidenceModel
from scpgrasp.types import ExperimentReport, SolveResult
from scpgrasp.utils import ensure_dir, time_seed, timestamp_id

logger = logging.getLogger(__name__)

TrialCallback = Callable[[dict[str, Any]], None]


def run_trials(
    model: IncidenceModel,
    alpha: float,
    epsilon: float,
    runs: int,
    seed: int,
    moves: Move = Move.ALL,
    reference: float | None = None,
    on_trial: TrialCallback | None = None,
) -> pd.DataFrame:
    """GRASP construction followed by local search, ``runs`` independent times.

    Trial ``k`` draws from its own ``random.Random(seed + k)``. Both the
    constructed and the improved selections are checked against the model;
    a mismatch raises ``SolutionCheckError``.
    """

    rows: list[dict[str, Any]] = []
    for k in range(int(runs)):
        trial_seed = int(seed) + k
        rng = random.Random(trial_seed)

        start = time.perf_counter()
        sol = construct(model, alpha=alpha, epsilon=epsilon, rng=rng)
        grasp_cost = sol.cost
        grasp_size = len(sol)
        if not model.verify(sol.items, grasp_cost, epsilon):
            raise SolutionCheckError(f"GRASP check fail (run {k + 1})")

        improve(model, sol, moves)
        if not model.verify(sol.items, sol.cost, epsilon):
            raise SolutionCheckError(f"Local search check fail (run {k + 1})")
        elapsed = time.perf_counter() - start

        row = {
            "run_idx": k + 1,
            "seed": trial_seed,
            "grasp_cost": float(grasp_cost),
            "ls_cost": float(sol.cost),
            "grasp_size": int(grasp_size),
            "ls_size": int(len(sol)),
            "runtime_sec": float(elapsed),
            "selected_items_json": json.dumps(sol.items),
        }
        rows.append(row)
        if on_trial is not None:
            on_trial({**row, "gap": relative_gap(row["ls_cost"], reference)})

    runs_df = pd.DataFrame(
        rows,
        columns=[
            "run_idx",
            "seed",
            "grasp_cost",
            "ls_cost",
            "grasp_size",
            "ls_size",
            "runtime_sec",
            "selected_items_json",
        ],
    )
    return add_gap_columns(runs_df, reference)


def baseline_reference(baseline: SolveResult | None) -> float | None:
    """Objective of a proven-optimal baseline; a time-limited incumbent is only an upper bound."""
    if baseline is None or not baseline.is_feasible:
        return None
    if not baseline.meta.get("proven_optimal", False):
        return None
    return float(baseline.objective)


def _write_results(
    run_dir: Path,
    runs_df: pd.DataFrame,
    summary: dict[str, Any],
    meta: dict[str, Any],
) -> None:
    results_dir = ensure_dir(run_dir / "results")
    runs_df.to_csv(results_dir / "runs.csv", index=False)
    pd.DataFrame([summary]).to_csv(results_dir / "summary.csv", index=False)
    pd.DataFrame([{"key": k, "value": v} for k, v in meta.items()]).to_csv(results_dir / "run_meta.csv", index=False)


def run_experiment(
    instance_path: str | Path,
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
    on_trial: TrialCallback | None = None,
    on_model: Callable[[IncidenceModel, SolveResult | None, float | None], None] | None = None,
) -> ExperimentReport:
    cfg = load_config(config_path, overrides)

    model = read_instance(instance_path, fmt=cfg["instance"]["format"])
    logger.info("loaded %s: %r", instance_path, model)

    baseline: SolveResult | None = None
    if bool(cfg["baseline"]["enabled"]):
        from scpgrasp.alg_ilp_pulp import solve_optimal

        baseline = solve_optimal(
            model,
            time_limit_sec=int(cfg["baseline"]["time_limit_sec"]),
            msg=int(cfg["baseline"]["msg"]),
        )
        logger.info("baseline: %s z=%g", baseline.meta.get("solver_status"), baseline.objective)
    reference = baseline_reference(baseline)

    if on_model is not None:
        on_model(model, baseline, reference)

    seed = cfg["grasp"]["seed"]
    if seed is None:
        seed = time_seed()
        cfg["grasp"]["seed"] = seed

    runs_df = run_trials(
        model,
        alpha=cfg["grasp"]["alpha"],
        epsilon=cfg["grasp"]["epsilon"],
        runs=cfg["grasp"]["runs"],
        seed=seed,
        moves=parse_moves(cfg["local_search"]["moves"]),
        reference=reference,
        on_trial=on_trial,
    )
    summary = summarize_runs(runs_df)

    run_dir: Path | None = None
    if bool(cfg["output"]["save_results"]):
        run_dir = ensure_dir(Path(cfg["output"]["root"]) / timestamp_id(str(cfg["output"]["run_id_prefix"])))
        meta = {
            "instance_path": str(instance_path),
            "format": cfg["instance"]["format"],
            "n_items": model.n_items,
            "n_requirements": model.n_requirements,
            "alpha": cfg["grasp"]["alpha"],
            "epsilon": cfg["grasp"]["epsilon"],
            "runs": cfg["grasp"]["runs"],
            "seed": seed,
            "moves": ",".join(cfg["local_search"]["moves"]),
            "reference": reference,
            "baseline_status": baseline.meta.get("solver_status") if baseline is not None else "disabled",
        }
        _write_results(run_dir, runs_df, summary, meta)

        if bool(cfg["output"]["generate_plots"]):
            from scpgrasp.visualize import plot_trials

            plot_trials(runs_df, run_dir / "figures", reference=reference)

    return ExperimentReport(
        instance_path=str(instance_path),
        n_items=model.n_items,
        n_requirements=model.n_requirements,
        reference=reference,
        summary=summary,
        runs=runs_df,
        run_dir=run_dir,
        baseline=baseline,
    )
