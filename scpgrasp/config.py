from __future__ import annotations

from pathlib import Path
from typing import Any

from omegaconf import OmegaConf

from scpgrasp.io_dataset import INSTANCE_FORMATS
from scpgrasp.local_search import MOVE_NAMES, parse_moves

DEFAULT_CONFIG: dict[str, Any] = {
    "instance": {
        "format": "scp",
    },
    "grasp": {
        "alpha": 0.9,
        "epsilon": 1e-9,
        "runs": 100,
        "seed": None,
    },
    "local_search": {
        "moves": list(MOVE_NAMES),
    },
    "baseline": {
        "enabled": True,
        "time_limit_sec": 60,
        "msg": 0,
    },
    "output": {
        "root": "outputs/experiments",
        "run_id_prefix": "grasp",
        "save_results": False,
        "generate_plots": False,
    },
}


def _set_nested(config: dict[str, Any], dotted_key: str, value: Any) -> None:
    parts = dotted_key.split(".")
    cur = config
    for part in parts[:-1]:
        node = cur.get(part)
        if not isinstance(node, dict):
            node = {}
            cur[part] = node
        cur = node
    cur[parts[-1]] = value


def _apply_overrides(config: dict[str, Any], overrides: dict[str, Any] | None) -> dict[str, Any]:
    if not overrides:
        return config
    for key, value in overrides.items():
        if value is None:
            continue
        _set_nested(config, key, value)
    return config


def validate_config(cfg: dict[str, Any]) -> dict[str, Any]:
    fmt = str(cfg["instance"]["format"]).lower()
    if fmt not in INSTANCE_FORMATS:
        raise ValueError(f"instance.format must be one of {list(INSTANCE_FORMATS)}, got {fmt!r}")
    cfg["instance"]["format"] = fmt

    alpha = float(cfg["grasp"]["alpha"])
    if not 0.0 <= alpha <= 1.0:
        raise ValueError(f"grasp.alpha must be in [0, 1], got {alpha}")
    epsilon = float(cfg["grasp"]["epsilon"])
    if epsilon <= 0.0:
        raise ValueError(f"grasp.epsilon must be > 0, got {epsilon}")
    runs = int(cfg["grasp"]["runs"])
    if runs < 1:
        raise ValueError("grasp.runs must be >= 1")
    cfg["grasp"].update(alpha=alpha, epsilon=epsilon, runs=runs)
    if cfg["grasp"].get("seed") is not None:
        cfg["grasp"]["seed"] = int(cfg["grasp"]["seed"])

    moves = cfg["local_search"]["moves"]
    if isinstance(moves, str):
        moves = [token.strip() for token in moves.split(",") if token.strip()]
    parse_moves(moves)
    cfg["local_search"]["moves"] = [str(m).strip().lower() for m in moves]
    return cfg


def load_config(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Defaults, then an optional YAML file, then dotted-key overrides."""
    cfg_obj = OmegaConf.create(DEFAULT_CONFIG)
    if config_path is not None:
        cfg_obj = OmegaConf.merge(cfg_obj, OmegaConf.load(str(config_path)))
    cfg = OmegaConf.to_container(cfg_obj, resolve=True)
    assert isinstance(cfg, dict)
    cfg = _apply_overrides(cfg, overrides)
    return validate_config(cfg)
