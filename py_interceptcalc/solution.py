"""Intercept solution record."""
from __future__ import annotations

from enum import Enum

from typing_extensions import NamedTuple

from py_interceptcalc.vector import Vector

__all__ = ('SolveMethod', 'InterceptSolution')


class SolveMethod(str, Enum):
    """Which stage of a solver produced the solution."""

    SCAN = 'scan'  # integer flight time met the tolerance
    REFINED = 'refined'  # bisection midpoint met the tolerance
    BEST_SAMPLE = 'best_sample'  # refinement exhausted, best integer sample used
    QUADRATIC = 'quadratic'  # closed-form root, drag ignored


class InterceptSolution(NamedTuple):
    """Flight time and launch direction of an intercept.

    Attributes:
        time: Flight time in steps, always > 0.
        direction: Unit launch direction.
        residual: |length - 1| of the raw candidate direction before normalization
                  (0.0 for the quadratic model, which has no length condition).
        method: Solver stage that produced the solution.
    """

    time: float
    direction: Vector
    residual: float
    method: SolveMethod
