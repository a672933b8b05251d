"""py_interceptcalc exception types.

Exception Hierarchy
-------------------

Exception (built-in Python)
└── RuntimeError
    └── InterceptError
        ├── InvalidInputError
        ├── DegenerateModelError
        └── NoInterceptError

Engines raise these from `find_intercept()`. The public `solve()` methods and the
module-level `solve_*_intercept()` functions collapse every `InterceptError` into `None`,
so callers of the functional interface only learn *that* interception failed.

- InvalidInputError: A vector component or the launch speed is not a finite number,
  the launch speed is not positive, or the target coincides with the shooter and is stationary.

- DegenerateModelError: The physics profile makes the model singular: a drag ratio within
  epsilon of 1 for the drag model, or zero gravity for the quadratic model.

- NoInterceptError: The search finished without a usable candidate. Contains:
  - reason: Specific reason for failure.  Enumerated reasons:
    - NO_REAL_ROOT: Quadratic discriminant negative or not finite
    - NO_POSITIVE_ROOT: No root with positive flight time in the accepted range
    - DEGENERATE_DIRECTION: Best candidate is too short or not finite
  - best_time: Flight time of the best candidate, if any
  - residual: |length - 1| of the best candidate, if any
  - iterations_count: Number of evaluations performed
"""
from __future__ import annotations

from typing import Optional

__all__ = (
    'InterceptError',
    'InvalidInputError',
    'DegenerateModelError',
    'NoInterceptError',
)


class InterceptError(RuntimeError):
    """Intercept solver error."""


class InvalidInputError(InterceptError):
    """Inputs rejected before any physics runs."""


class DegenerateModelError(InterceptError):
    """Physics profile makes the intercept model singular."""

    def __init__(self, parameter: str, value: float):
        self.parameter: str = parameter
        self.value: float = value
        super().__init__(f'Degenerate {parameter}={value!r} for this model')


class NoInterceptError(InterceptError):
    """Exception for searches that end without a usable intercept."""

    NO_REAL_ROOT = "No real root"
    NO_POSITIVE_ROOT = "No positive root"
    DEGENERATE_DIRECTION = "Degenerate direction"

    def __init__(self,
                 reason: str,
                 best_time: Optional[float] = None,
                 residual: Optional[float] = None,
                 iterations_count: int = 0):
        """
        Parameters:
        - reason: The failure reason
        - best_time: Flight time of the best candidate seen
        - residual: Length residual of the best candidate
        - iterations_count: The number of evaluations performed
        """
        self.reason: str = reason
        self.best_time: Optional[float] = best_time
        self.residual: Optional[float] = residual
        self.iterations_count: int = iterations_count
        msg = f'{reason}'
        if best_time is not None:
            msg += f', best flight time {best_time}'
            if residual is not None:
                msg += f' with residual {residual}'
        msg += f', after {iterations_count} evaluations.'
        super().__init__(msg)
