from __future__ import annotations

import time
from datetime import datetime
from pathlib import Path
from typing import Any


def timestamp_id(prefix: str = "run") -> str:
    return f"{prefix}_{datetime.now().strftime('%Y%m%d_%H%M%S_%f')}"


def time_seed() -> int:
    """Seed from the wall clock, for runs where no seed was given."""
    return int(time.time())


def ensure_dir(path: str | Path) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def parse_csv_list(text: str, cast: type = str, lower: bool = False) -> list[Any]:
    values = [x.strip() for x in text.split(",") if x.strip()]
    if lower:
        values = [x.lower() for x in values]
    if cast is str:
        return values
    return [cast(v) for v in values]


def format_pct(value: float, digits: int = 4) -> str:
    return f"{100.0 * value:.{digits}g}%"
