from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd


def _maybe_save(fig, path: Path) -> str:
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return str(path)


def plot_trials(runs_df: pd.DataFrame, out_dir: str | Path, reference: float | None = None) -> list[str]:
    """Per-trial GRASP vs GRASP+LS cost, and the distribution of gaps."""
    if runs_df.empty:
        return []

    out = Path(out_dir)
    figures: list[str] = []

    fig, ax = plt.subplots(figsize=(8, 4))
    x = runs_df["run_idx"].to_numpy(dtype=int)
    ax.plot(x, runs_df["grasp_cost"].to_numpy(dtype=float), marker=".", linestyle="none", label="GRASP")
    ax.plot(x, runs_df["ls_cost"].to_numpy(dtype=float), marker="o", linestyle="none", label="GRASP+LS")
    if reference is not None and np.isfinite(reference):
        ax.axhline(float(reference), color="black", linestyle="--", linewidth=1, label="reference")
    ax.set_title("Cost per trial")
    ax.set_xlabel("trial")
    ax.set_ylabel("cost")
    ax.grid(alpha=0.25)
    ax.legend()
    figures.append(_maybe_save(fig, out / "cost_per_trial.png"))

    gaps = runs_df["gap"].to_numpy(dtype=float) if "gap" in runs_df.columns else np.array([])
    gaps = gaps[np.isfinite(gaps)]
    if gaps.size:
        fig, ax = plt.subplots(figsize=(6, 4))
        ax.hist(100.0 * gaps, bins=min(20, max(1, int(np.unique(gaps).size))), alpha=0.8)
        ax.set_title("GRASP+LS gap distribution")
        ax.set_xlabel("gap (%)")
        ax.set_ylabel("trials")
        ax.grid(alpha=0.25)
        figures.append(_maybe_save(fig, out / "gap_hist.png"))

    return figures


def plot_from_experiment_dir(experiment_dir: str | Path) -> list[str]:
    exp_dir = Path(experiment_dir)
    runs_csv = exp_dir / "results" / "runs.csv"
    if not runs_csv.exists():
        raise FileNotFoundError(f"runs.csv not found: {runs_csv}")

    runs_df = pd.read_csv(runs_csv)
    reference = None
    if "reference" in runs_df.columns and runs_df["reference"].notna().any():
        reference = float(runs_df["reference"].dropna().iloc[0])
    return plot_trials(runs_df, exp_dir / "figures", reference=reference)
