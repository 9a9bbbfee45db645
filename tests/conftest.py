"""Shared fixtures: small hand-checked instances and a generated one."""

from __future__ import annotations

import pytest

from scpgrasp.generator import generate_instance
from scpgrasp.model import IncidenceModel


@pytest.fixture
def scenario_model() -> IncidenceModel:
    """R0..R2; item0 (1) covers R0,R1; item1 (1) covers R1,R2; item2 (3) covers all."""
    return IncidenceModel.build([1, 1, 3], [[0, 2], [0, 1, 2], [1, 2]])


@pytest.fixture
def chain_model() -> IncidenceModel:
    """R0,R1; A covers R0, B covers R0,R1, C covers R1, all unit cost."""
    return IncidenceModel.build([1, 1, 1], [[0, 1], [1, 2]])


@pytest.fixture
def infeasible_model() -> IncidenceModel:
    """R1 has no covering item."""
    return IncidenceModel.build([1, 2], [[0], [], [1]])


@pytest.fixture
def random_model() -> IncidenceModel:
    return generate_instance(n_requirements=40, n_items=60, density=0.08, seed=7, cost_range=(1, 20))


@pytest.fixture
def scenario_text() -> str:
    return "3 3\n1 1 3\n2\n 1 3\n3\n 1 2 3\n2\n 2 3\n"
