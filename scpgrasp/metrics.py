from __future__ import annotations

import math
from typing import Any

import numpy as np
import pandas as pd


def relative_gap(value: float, reference: float | None) -> float:
    """``(value - reference) / reference``; 0 when both are 0, NaN without a usable reference."""
    if reference is None or not math.isfinite(reference) or not math.isfinite(value):
        return math.nan
    if reference == 0:
        return 0.0 if value == 0 else math.nan
    return (value - reference) / reference


def add_gap_columns(runs_df: pd.DataFrame, reference: float | None = None) -> pd.DataFrame:
    """Gap of GRASP and GRASP+LS costs to ``reference`` (default: best LS cost seen)."""
    df = runs_df.copy()
    if df.empty:
        df["gap"] = pd.Series(dtype=float)
        df["grasp_gap"] = pd.Series(dtype=float)
        return df

    ref = float(reference) if reference is not None else float(df["ls_cost"].min())
    df["reference"] = ref
    df["grasp_gap"] = [relative_gap(float(z), ref) for z in df["grasp_cost"]]
    df["gap"] = [relative_gap(float(z), ref) for z in df["ls_cost"]]
    return df


def summarize_runs(runs_df: pd.DataFrame) -> dict[str, Any]:
    if runs_df.empty:
        return {
            "runs": 0,
            "gap_min": math.nan,
            "gap_avg": math.nan,
            "gap_max": math.nan,
            "grasp_cost_mean": math.nan,
            "ls_cost_mean": math.nan,
            "ls_cost_best": math.nan,
            "time_avg_ms": math.nan,
            "improved_rate": math.nan,
        }

    gaps = runs_df["gap"].to_numpy(dtype=float)
    finite = gaps[np.isfinite(gaps)]
    improved = runs_df["ls_cost"].to_numpy(dtype=float) < runs_df["grasp_cost"].to_numpy(dtype=float)

    return {
        "runs": int(len(runs_df)),
        "gap_min": float(finite.min()) if finite.size else math.nan,
        "gap_avg": float(finite.mean()) if finite.size else math.nan,
        "gap_max": float(finite.max()) if finite.size else math.nan,
        "grasp_cost_mean": float(runs_df["grasp_cost"].mean()),
        "ls_cost_mean": float(runs_df["ls_cost"].mean()),
        "ls_cost_best": float(runs_df["ls_cost"].min()),
        "time_avg_ms": float(runs_df["runtime_sec"].mean() * 1000.0),
        "improved_rate": float(improved.mean()),
    }
