"""Quadratic Fallback Solver.

Closed-form backup that ignores drag: the flight time is a root of

    a·t² + b·t + c = 0,  a = g/2,  b = −(s·v.y + g/2·rel.y),  c = s·(rel · v)

and the launch direction points at the target's position at that time, lowered by
its own gravity drop g·t²/2. No iteration, so it is cheaper and less accurate than
the drag model. The drag ratio is not used.
"""
from __future__ import annotations

import math

from py_interceptcalc.config import PhysicsProfile
from py_interceptcalc.engines.base_engine import BaseInterceptEngine
from py_interceptcalc.exceptions import DegenerateModelError, NoInterceptError
from py_interceptcalc.guard import accept_direction, finite
from py_interceptcalc.logger import logger
from py_interceptcalc.solution import InterceptSolution, SolveMethod
from py_interceptcalc.vector import Vector

__all__ = ('QuadraticInterceptEngine',)


class QuadraticInterceptEngine(BaseInterceptEngine):
    """Intercept solver for a drag-free projectile under constant gravity."""

    MIN_DENOMINATOR: float = 1e-12  # |2a| below this is treated as zero gravity

    def _find(self, rel_pos: Vector, target_velocity: Vector, profile: PhysicsProfile) -> InterceptSolution:
        g = profile.gravity
        s = profile.launch_speed
        x, y, z = rel_pos
        vx, vy, vz = target_velocity

        a = 0.5 * g
        b = -(s * vy + 0.5 * g * y)
        c = s * (x * vx + y * vy + z * vz)
        if not finite(a, b, c):
            raise NoInterceptError(NoInterceptError.NO_REAL_ROOT)

        denom = 2 * a
        if not math.isfinite(denom) or abs(denom) < self.MIN_DENOMINATOR:
            raise DegenerateModelError('gravity', g)

        discriminant = b * b - 4 * a * c
        if not math.isfinite(discriminant) or discriminant < 0:
            raise NoInterceptError(NoInterceptError.NO_REAL_ROOT)

        sqrt_disc = math.sqrt(discriminant)
        t1 = (-b + sqrt_disc) / denom
        t2 = (-b - sqrt_disc) / denom

        # Smallest positive root
        if t1 > 0 and t2 > 0:
            t = min(t1, t2)
        elif t1 > 0:
            t = t1
        elif t2 > 0:
            t = t2
        else:
            raise NoInterceptError(NoInterceptError.NO_POSITIVE_ROOT, iterations_count=1)

        if not math.isfinite(t) or t > self._config.max_quadratic_time:
            raise NoInterceptError(NoInterceptError.NO_POSITIVE_ROOT, t, iterations_count=1)

        aim_point = Vector(x + vx * t,
                           y + vy * t - 0.5 * g * t * t,
                           z + vz * t)
        direction = accept_direction(aim_point, self._config.min_direction_length)
        if direction is None:
            raise NoInterceptError(NoInterceptError.DEGENERATE_DIRECTION, t, iterations_count=1)

        logger.debug(f"Quadratic intercept at t={t}")
        return InterceptSolution(t, direction, 0.0, SolveMethod.QUADRATIC)
