import math

import pytest

from py_interceptcalc import (DegenerateModelError, InvalidInputError, NoInterceptError, QuadraticInterceptEngine,
                              SolveMethod, Vector)
from tests.fixtures_and_helpers import (CLOSING_TARGET, CLOSING_VELOCITY, ORIGIN, OVERHEAD_TARGET, STATIONARY,
                                        assert_unit)


@pytest.fixture
def engine():
    return QuadraticInterceptEngine()


class TestQuadraticIntercept:

    def test_closing_target(self, engine):
        solution = engine.find_intercept(ORIGIN, CLOSING_TARGET, CLOSING_VELOCITY)
        assert solution.method == SolveMethod.QUADRATIC
        assert solution.residual == 0.0
        assert solution.time == pytest.approx(math.sqrt(1.5) / 0.05)
        assert_unit(solution.direction)
        assert tuple(solution.direction) == pytest.approx((-0.77666, -0.59759, 0.19920), abs=1e-4)

    def test_aim_point_includes_gravity_drop(self, engine):
        solution = engine.find_intercept(ORIGIN, CLOSING_TARGET, CLOSING_VELOCITY)
        t = solution.time
        aim = Vector(5 - t, -0.025 * t * t, 5)
        assert tuple(solution.direction) == pytest.approx(tuple(aim.normalize()))

    def test_stationary_overhead_target(self, engine):
        solution = engine.find_intercept(ORIGIN, OVERHEAD_TARGET, STATIONARY)
        assert solution.time == pytest.approx(10.0)
        assert tuple(solution.direction) == pytest.approx((0.0, 1.0, 0.0))

    def test_shooter_offset(self, engine):
        shooter = Vector(10, -4, 2)
        offset = engine.find_intercept(shooter, shooter + CLOSING_TARGET, CLOSING_VELOCITY)
        at_origin = engine.find_intercept(ORIGIN, CLOSING_TARGET, CLOSING_VELOCITY)
        assert offset.time == pytest.approx(at_origin.time)
        assert tuple(offset.direction) == pytest.approx(tuple(at_origin.direction))

    @pytest.mark.parametrize("drag_ratio", [1.0, 1.0 + 1e-13, 0.5])
    def test_drag_ratio_ignored(self, engine, drag_ratio):
        reference = engine.solve(ORIGIN, CLOSING_TARGET, CLOSING_VELOCITY)
        direction = engine.solve(ORIGIN, CLOSING_TARGET, CLOSING_VELOCITY, profile={'drag_ratio': drag_ratio})
        assert direction == reference


class TestQuadraticNoIntercept:

    def test_receding_target_has_no_real_root(self, engine):
        # Moving away faster than the projectile closes in
        with pytest.raises(NoInterceptError) as exc:
            engine.find_intercept(ORIGIN, CLOSING_TARGET, Vector(1.0, 0.0, 0.0))
        assert exc.value.reason == NoInterceptError.NO_REAL_ROOT
        assert engine.solve(ORIGIN, CLOSING_TARGET, Vector(1.0, 0.0, 0.0)) is None

    def test_both_roots_negative(self, engine):
        with pytest.raises(NoInterceptError) as exc:
            engine.find_intercept(ORIGIN, Vector(0, -5, 5), Vector(0, -1, 0))
        assert exc.value.reason == NoInterceptError.NO_POSITIVE_ROOT

    def test_root_beyond_time_limit(self):
        engine = QuadraticInterceptEngine({'max_quadratic_time': 5.0})
        with pytest.raises(NoInterceptError) as exc:
            engine.find_intercept(ORIGIN, OVERHEAD_TARGET, STATIONARY)
        assert exc.value.reason == NoInterceptError.NO_POSITIVE_ROOT
        assert exc.value.best_time == pytest.approx(10.0)

    @pytest.mark.parametrize("gravity", [0.0, 1e-13])
    def test_zero_gravity(self, engine, gravity):
        with pytest.raises(DegenerateModelError) as exc:
            engine.find_intercept(ORIGIN, CLOSING_TARGET, CLOSING_VELOCITY, profile={'gravity': gravity})
        assert exc.value.parameter == 'gravity'
        assert engine.solve(ORIGIN, CLOSING_TARGET, CLOSING_VELOCITY, profile={'gravity': gravity}) is None

    def test_non_finite_gravity(self, engine):
        assert engine.solve(ORIGIN, CLOSING_TARGET, CLOSING_VELOCITY, profile={'gravity': math.inf}) is None

    @pytest.mark.parametrize("speed", [0.0, -1.0, math.inf])
    def test_bad_launch_speed(self, engine, speed):
        with pytest.raises(InvalidInputError):
            engine.find_intercept(ORIGIN, CLOSING_TARGET, CLOSING_VELOCITY, speed)

    def test_stationary_target_on_shooter(self, engine):
        assert engine.solve(ORIGIN, ORIGIN, STATIONARY) is None
