"""Drag-Model Solver.

The projectile keeps a fraction `r` (drag ratio) of its velocity every step and
loses `g` of vertical velocity to gravity. After `t` steps a launch velocity `u`
has moved the projectile by

    x(t) = u.x · (r^t − 1) / (r − 1)
    y(t) = u.y · (r^t − 1) / (r − 1) − g · (r^t − r·t + t − 1) / (r − 1)²
    z(t) = u.z · (r^t − 1) / (r − 1)

which is exact for integer `t` (see `drag_displacement`). Inverting these for the
target's position at `t` gives the launch direction the shot would need, already
divided by the launch speed `s`:

    horizFactor = (r − 1) / (s · (r^t − 1))
    gravTerm    = g · (r^t − r·t + t − 1) / (r − 1) / (s · (r^t − 1))
    d(t)        = (rel + v·t) · horizFactor + (0, gravTerm, 0)

A launch at speed `s` is only possible when ‖d(t)‖ = 1, so the solver looks for the
smallest such `t`:

1. Coarse scan over t = 1..max_flight_time, accepting the first sample whose residual
   |‖d(t)‖ − 1| is below tolerance and remembering the best one. When ‖d‖ − 1
   changes sign between two consecutive samples, the crossing is bisected
   before the scan goes on, so a direct shot wins over a later lob.
2. Heuristic bisection in a window around the best sample. It assumes ‖d(t)‖ is
   monotone near the best sample, which is not proven: it may converge to a
   non-optimal root or not converge at all.
3. The best sample itself, if it is long enough to normalize.

Evaluations are bounded by the scan length and the bisection budgets.
"""
from __future__ import annotations

import math

from typing_extensions import Optional

from py_interceptcalc.config import PhysicsProfile, cDragRatioEpsilon
from py_interceptcalc.engines.base_engine import BaseInterceptEngine
from py_interceptcalc.exceptions import DegenerateModelError, NoInterceptError
from py_interceptcalc.guard import accept_direction, drag_ratio_valid, finite
from py_interceptcalc.logger import logger
from py_interceptcalc.solution import InterceptSolution, SolveMethod
from py_interceptcalc.vector import Vector

__all__ = (
    'DragInterceptEngine',
    'direction_at',
    'drag_displacement',
)


def _decay(drag_ratio: float, t: float, epsilon: float) -> Optional[float]:
    """r^t, or None when it is not representable or r^t − 1 is closer to zero than `epsilon`."""
    try:
        rt = math.pow(drag_ratio, t)
    except (OverflowError, ValueError):  # overflow, negative base with fractional t
        return None
    rt_minus_1 = rt - 1
    if not math.isfinite(rt_minus_1) or rt_minus_1 == 0 or abs(rt_minus_1) < epsilon:
        return None
    return rt


def direction_at(t: float, rel_pos: Vector, target_velocity: Vector, profile: PhysicsProfile,
                 epsilon: float = cDragRatioEpsilon) -> Optional[Vector]:
    """Required launch direction (scaled by 1/launch_speed) for flight time `t`.

    Args:
        t: Flight time in steps.
        rel_pos: Target position relative to the shooter.
        target_velocity: Target velocity.
        profile: Physics profile.
        epsilon: Smallest accepted |r^t − 1|.

    Returns:
        The candidate vector, or None for t <= 0 and whenever an intermediate is not finite.
    """
    if not finite(t) or t <= 0:
        return None
    r = profile.drag_ratio
    g = profile.gravity
    rt = _decay(r, t, epsilon)
    if rt is None:
        return None
    rt_minus_1 = rt - 1
    r_minus_1 = r - 1
    denom = profile.launch_speed * rt_minus_1
    if not math.isfinite(denom) or denom == 0:
        return None

    horiz_factor = r_minus_1 / denom
    grav_term = g * (rt - r * t + t - 1) / r_minus_1 / denom

    candidate = Vector((rel_pos.x + target_velocity.x * t) * horiz_factor,
                       (rel_pos.y + target_velocity.y * t) * horiz_factor + grav_term,
                       (rel_pos.z + target_velocity.z * t) * horiz_factor)
    if not candidate.is_finite():
        return None
    return candidate


def drag_displacement(launch_velocity: Vector, t: float, profile: PhysicsProfile,
                      epsilon: float = cDragRatioEpsilon) -> Optional[Vector]:
    """Closed-form displacement after `t` steps for a projectile launched with `launch_velocity`.

    Matches stepping `position += velocity; velocity *= r; velocity.y -= g` for integer `t`.
    Returns None where `direction_at` would (degenerate decay, non-finite result).
    """
    if not finite(t) or t <= 0:
        return None
    r = profile.drag_ratio
    rt = _decay(r, t, epsilon)
    if rt is None:
        return None
    rt_minus_1 = rt - 1
    r_minus_1 = r - 1
    travel = rt_minus_1 / r_minus_1
    drop = profile.gravity * (rt - r * t + t - 1) / (r_minus_1 * r_minus_1)
    displacement = Vector(launch_velocity.x * travel,
                          launch_velocity.y * travel - drop,
                          launch_velocity.z * travel)
    if not displacement.is_finite():
        return None
    return displacement


class DragInterceptEngine(BaseInterceptEngine):
    """Intercept solver for the exponential-drag projectile model.

    Examples:
        >>> engine = DragInterceptEngine()
        >>> direction = engine.solve(Vector(0, 0, 0), Vector(0, 0, 20), Vector(0, 0, 0))
    """

    def _find(self, rel_pos: Vector, target_velocity: Vector, profile: PhysicsProfile) -> InterceptSolution:
        config = self._config
        epsilon = config.drag_ratio_epsilon
        if not drag_ratio_valid(profile.drag_ratio, epsilon):
            raise DegenerateModelError('drag_ratio', profile.drag_ratio)

        tolerance = config.tolerance
        max_t = int(config.max_flight_time)
        evaluations = 0

        def candidate(t: float) -> Optional[Vector]:
            nonlocal evaluations
            evaluations += 1
            return direction_at(t, rel_pos, target_velocity, profile, epsilon)

        def magnitude_at(t: float) -> float:
            """Candidate length; a missing candidate counts as zero length."""
            d = candidate(t)
            return 0.0 if d is None else d.magnitude()

        def accept(t: float, residual: float, method: SolveMethod) -> InterceptSolution:
            direction = accept_direction(candidate(t), config.min_direction_length)
            if direction is None:
                raise NoInterceptError(NoInterceptError.DEGENERATE_DIRECTION, t, residual, evaluations)
            logger.debug(f"Drag intercept at t={t} ({method.value}) after {evaluations} evaluations")
            return InterceptSolution(t, direction, residual, method)

        def bracketed(low: float, high: float, low_above: bool) -> Optional[InterceptSolution]:
            """Bisection on a sign change of length - 1 between two valid samples."""
            for _ in range(int(config.refine_iterations)):
                mid = (low + high) * 0.5
                d = candidate(mid)
                if d is None:
                    return None
                mag = d.magnitude()
                residual = abs(mag - 1.0)
                if residual < tolerance:
                    return accept(mid, residual, SolveMethod.REFINED)
                if (mag > 1.0) == low_above:
                    low = mid
                else:
                    high = mid
            return None

        # 1. Coarse scan over integer flight times, stopping at the first crossing of unit length
        best_t: Optional[int] = None
        best_diff = math.inf
        prev_above: Optional[bool] = None
        for t in range(1, max_t + 1):
            d = candidate(t)
            mag = 0.0 if d is None else d.magnitude()
            diff = abs(mag - 1.0)
            if diff < best_diff:
                best_diff, best_t = diff, t
            if diff < tolerance:
                return accept(t, diff, SolveMethod.SCAN)

            above = None if d is None else mag > 1.0
            if prev_above is not None and above is not None and above != prev_above:
                if (solution := bracketed(t - 1, t, prev_above)) is not None:
                    return solution
            prev_above = above

        if best_t is None or best_diff <= tolerance:
            raise NoInterceptError(NoInterceptError.NO_POSITIVE_ROOT, best_t, best_diff, evaluations)

        # 2. Heuristic bisection around the best sample
        low = float(max(1, best_t - config.refine_window))
        high = float(min(max_t, best_t + config.refine_window))
        for _ in range(int(config.refine_iterations)):
            mid = (low + high) * 0.5
            mag = magnitude_at(mid)
            if not math.isfinite(mag):
                break
            residual = abs(mag - 1.0)
            if residual < tolerance:
                return accept(mid, residual, SolveMethod.REFINED)

            mag_low = magnitude_at(low)
            mag_high = magnitude_at(high)
            if not (math.isfinite(mag_low) and math.isfinite(mag_high)):
                break
            if mag > 1.0:
                if mag_low < mag:
                    high = mid
                else:
                    low = mid
            else:
                if mag_high > mag:
                    low = mid
                else:
                    high = mid

        # 3. Best integer sample
        logger.debug(f"Refinement did not meet tolerance {tolerance}, "
                     f"falling back to t={best_t} with residual {best_diff}")
        return accept(best_t, best_diff, SolveMethod.BEST_SAMPLE)
