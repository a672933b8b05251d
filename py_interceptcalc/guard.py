"""Input Guard and numeric-safety helpers shared by the intercept engines.

Every predicate here is pure: it inspects its arguments and returns a verdict,
nothing is raised or logged. Engines translate a negative verdict into
InvalidInputError or DegenerateModelError.
"""
from __future__ import annotations

import math
from typing import Any

from typing_extensions import Optional

from py_interceptcalc.vector import Vector

__all__ = (
    'finite',
    'is_finite_vector',
    'inputs_valid',
    'drag_ratio_valid',
    'geometry_degenerate',
    'accept_direction',
)


def finite(*values: Any) -> bool:
    """True when every value is a real number that is neither infinite nor NaN."""
    for value in values:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        if not math.isfinite(value):
            return False
    return True


def is_finite_vector(v: Any) -> bool:
    """True for a 3-component vector with finite real components."""
    try:
        x, y, z = v.x, v.y, v.z
    except AttributeError:
        return False
    return finite(x, y, z)


def inputs_valid(shooter_pos: Vector, target_pos: Vector, target_velocity: Vector,
                 launch_speed: float) -> bool:
    """Validity verdict for the inputs of both solvers.

    Rejects a non-finite component among the nine vector components, a non-finite
    launch speed, and a launch speed that is not strictly positive.
    """
    if not (is_finite_vector(shooter_pos)
            and is_finite_vector(target_pos)
            and is_finite_vector(target_velocity)):
        return False
    return finite(launch_speed) and launch_speed > 0


def drag_ratio_valid(drag_ratio: float, epsilon: float) -> bool:
    """False when `drag_ratio - 1` is not finite or closer to zero than `epsilon`.

    Only the drag model divides by `drag_ratio - 1`.
    """
    if not finite(drag_ratio):
        return False
    r_minus_1 = drag_ratio - 1
    return math.isfinite(r_minus_1) and abs(r_minus_1) >= epsilon


def geometry_degenerate(rel_pos: Vector, target_velocity: Vector, min_length: float) -> bool:
    """True for a stationary target sitting on the shooter (no intercept for either model)."""
    return rel_pos.magnitude() <= min_length and target_velocity.magnitude() <= min_length


def accept_direction(candidate: Optional[Vector], min_length: float) -> Optional[Vector]:
    """Normalized candidate, or None when it is missing, not finite or too short."""
    if candidate is None or not candidate.is_finite():
        return None
    length = candidate.magnitude()
    if not math.isfinite(length) or length <= min_length:
        return None
    return candidate.normalize()
