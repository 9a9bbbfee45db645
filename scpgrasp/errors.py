from __future__ import annotations


class InfeasibleError(ValueError):
    """No remaining item can cover any of the still uncovered requirements."""

    def __init__(self, uncovered: int) -> None:
        super().__init__(f"Infeasible instance: {uncovered} requirement(s) cannot be covered")
        self.uncovered = uncovered


class SolutionCheckError(RuntimeError):
    """A heuristic returned a selection that is not a cover or whose cost is off."""


class InstanceFormatError(ValueError):
    """Instance text does not match the declared format."""
