from __future__ import annotations

import gzip
import sys
from pathlib import Path
from typing import Callable, Iterator

from scpgrasp.errors import InstanceFormatError
from scpgrasp.model import IncidenceModel


class _Tokens:
    def __init__(self, text: str, source: str) -> None:
        self._it: Iterator[str] = iter(text.split())
        self.source = source
        self.consumed = 0

    def _next(self) -> str:
        try:
            token = next(self._it)
        except StopIteration:
            raise InstanceFormatError(f"Unexpected end of data after {self.consumed} tokens: {self.source}") from None
        self.consumed += 1
        return token

    def next_int(self) -> int:
        token = self._next()
        try:
            return int(token)
        except ValueError:
            raise InstanceFormatError(f"Expected an integer, got {token!r} (token {self.consumed}): {self.source}") from None

    def next_float(self) -> float:
        token = self._next()
        try:
            return float(token)
        except ValueError:
            raise InstanceFormatError(f"Expected a number, got {token!r} (token {self.consumed}): {self.source}") from None

    def index(self, upper: int, what: str) -> int:
        value = self.next_int()
        if value < 1 or value > upper:
            raise InstanceFormatError(f"{what} index {value} outside 1..{upper}: {self.source}")
        return value - 1


def _parse_scp(tokens: _Tokens) -> IncidenceModel:
    # OR-Library: "<rows> <columns>", column costs, then per row its columns.
    n_requirements = tokens.next_int()
    n_items = tokens.next_int()
    costs = [tokens.next_float() for _ in range(n_items)]
    covering: list[list[int]] = []
    for _ in range(n_requirements):
        count = tokens.next_int()
        covering.append([tokens.index(n_items, "Item") for _ in range(count)])
    return IncidenceModel.build(costs, covering)


def _parse_rail(tokens: _Tokens) -> IncidenceModel:
    # Rail: "<rows> <columns>", then per column its cost and the rows it covers.
    n_requirements = tokens.next_int()
    n_items = tokens.next_int()
    costs: list[float] = []
    satisfies: list[list[int]] = []
    for _ in range(n_items):
        costs.append(tokens.next_float())
        count = tokens.next_int()
        satisfies.append([tokens.index(n_requirements, "Requirement") for _ in range(count)])
    return IncidenceModel.from_item_coverage(costs, satisfies, n_requirements)


def _parse_stn(tokens: _Tokens) -> IncidenceModel:
    # Steiner triple: "<columns> <rows>", unit costs, three columns per row.
    n_items = tokens.next_int()
    n_requirements = tokens.next_int()
    covering = [[tokens.index(n_items, "Item") for _ in range(3)] for _ in range(n_requirements)]
    return IncidenceModel.build([1.0] * n_items, covering)


_PARSERS: dict[str, Callable[[_Tokens], IncidenceModel]] = {
    "scp": _parse_scp,
    "rail": _parse_rail,
    "stn": _parse_stn,
}

INSTANCE_FORMATS: tuple[str, ...] = tuple(_PARSERS)


def parse_instance(text: str, fmt: str = "scp", source: str = "<string>") -> IncidenceModel:
    key = str(fmt).strip().lower()
    if key not in _PARSERS:
        raise InstanceFormatError(f"Unknown instance format {fmt!r}; expected one of {list(INSTANCE_FORMATS)}")
    return _PARSERS[key](_Tokens(text, source))


def read_text(path: str | Path) -> str:
    """Read a file, a gzip file (``*.gz``) or stdin (``-``)."""
    if str(path) == "-":
        return sys.stdin.read()
    p = Path(path)
    if p.suffix == ".gz":
        with gzip.open(p, "rt", encoding="utf-8") as f:
            return f.read()
    return p.read_text(encoding="utf-8")


def read_instance(path: str | Path, fmt: str = "scp") -> IncidenceModel:
    return parse_instance(read_text(path), fmt=fmt, source=str(path))


def _format_cost(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else repr(float(value))


def format_instance(model: IncidenceModel) -> str:
    lines = [f"{model.n_requirements} {model.n_items}"]
    lines.append(" ".join(_format_cost(c) for c in model.costs.tolist()))
    for j in range(model.n_requirements):
        row = model.covering_items(j)
        lines.append(str(len(row)))
        if row:
            lines.append(" " + " ".join(str(i + 1) for i in row))
    return "\n".join(lines) + "\n"


def write_instance_file(path: str | Path, model: IncidenceModel) -> Path:
    """Write ``model`` in the ``scp`` layout, gzip-compressed for ``*.gz``."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    text = format_instance(model)
    if p.suffix == ".gz":
        with gzip.open(p, "wt", encoding="utf-8") as f:
            f.write(text)
    else:
        p.write_text(text, encoding="utf-8")
    return p
