"""GRASP construction, greedy repair and local search for the Set Covering Problem."""

from scpgrasp.errors import InfeasibleError
from scpgrasp.grasp import construct
from scpgrasp.local_search import Move, improve
from scpgrasp.model import IncidenceModel
from scpgrasp.repair import repair
from scpgrasp.solution import Solution

__all__ = [
    "IncidenceModel",
    "InfeasibleError",
    "Move",
    "Solution",
    "construct",
    "improve",
    "repair",
]
