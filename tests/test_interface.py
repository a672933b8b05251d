from importlib.metadata import EntryPoint
from types import SimpleNamespace
from typing import cast

import pytest

from py_interceptcalc import (Calculator, DegenerateModelError, DragInterceptEngine, InterceptEngineProtocol,
                              InvalidInputError, QuadraticInterceptEngine, SolveMethod, Vector,
                              solve_drag_intercept, solve_quadratic_intercept)
from py_interceptcalc.interface import _EngineLoader
from tests.fixtures_and_helpers import (CLOSING_TARGET, CLOSING_VELOCITY, LEVEL_TARGET, ORIGIN, OVERHEAD_TARGET,
                                        STATIONARY, assert_unit)


@pytest.mark.engine
class TestLoadedEngine:

    def test_entry_point_loaded(self, loaded_engine_instance):
        assert isinstance(loaded_engine_instance, InterceptEngineProtocol), "Not implements InterceptEngineProtocol"

    def test_overhead_target(self, loaded_engine_instance):
        calc = Calculator(engine=loaded_engine_instance, fallback=None)
        direction = calc.solve(ORIGIN, OVERHEAD_TARGET, STATIONARY)
        assert tuple(direction) == pytest.approx((0.0, 1.0, 0.0), abs=1e-6)

    def test_rejects_bad_speed(self, loaded_engine_instance):
        calc = Calculator(engine=loaded_engine_instance, fallback=None)
        assert calc.solve(ORIGIN, OVERHEAD_TARGET, STATIONARY, 0.0) is None


class TestCalculator:

    def test_defaults(self):
        calc = Calculator()
        assert isinstance(calc._engine_instance, DragInterceptEngine)
        assert isinstance(calc._fallback_instance, QuadraticInterceptEngine)

    def test_primary_engine_wins(self):
        solution = Calculator().find_intercept(ORIGIN, LEVEL_TARGET, STATIONARY)
        assert solution.method == SolveMethod.REFINED

    def test_falls_back_to_quadratic(self, caplog):
        calc = Calculator(profile={'drag_ratio': 1.0})
        solution = calc.find_intercept(ORIGIN, CLOSING_TARGET, CLOSING_VELOCITY)
        assert solution.method == SolveMethod.QUADRATIC
        assert_unit(solution.direction)
        assert "falling back to QuadraticInterceptEngine" in caplog.text

    def test_without_fallback_raises(self):
        calc = Calculator(fallback=None, profile={'drag_ratio': 1.0})
        with pytest.raises(DegenerateModelError):
            calc.find_intercept(ORIGIN, CLOSING_TARGET, CLOSING_VELOCITY)
        assert calc.solve(ORIGIN, CLOSING_TARGET, CLOSING_VELOCITY) is None

    def test_both_engines_fail(self):
        calc = Calculator(profile={'drag_ratio': 1.0, 'gravity': 0.0})
        with pytest.raises(DegenerateModelError) as exc:
            calc.find_intercept(ORIGIN, CLOSING_TARGET, CLOSING_VELOCITY)
        assert exc.value.parameter == 'gravity'
        assert calc.solve(ORIGIN, CLOSING_TARGET, CLOSING_VELOCITY) is None

    def test_invalid_input_not_retried(self, caplog):
        calc = Calculator()
        with pytest.raises(InvalidInputError):
            calc.find_intercept(ORIGIN, LEVEL_TARGET, STATIONARY, -1.0)
        assert "falling back" not in caplog.text

    def test_call_profile_overrides_calculator_profile(self):
        calc = Calculator(fallback=None, profile={'drag_ratio': 1.0})
        direction = calc.solve(ORIGIN, LEVEL_TARGET, STATIONARY, profile={'drag_ratio': 0.99})
        assert direction is not None

    def test_engine_by_path(self):
        calc = Calculator(engine='py_interceptcalc.engines.quadratic:QuadraticInterceptEngine', fallback=None)
        assert isinstance(calc._engine_instance, QuadraticInterceptEngine)

    def test_engine_by_name(self):
        if not any(ep.name == 'quadratic_engine' for ep in Calculator.iter_engines()):
            pytest.skip("py_interceptcalc is not installed, entry points unavailable")
        calc = Calculator(engine='quadratic_engine')
        assert isinstance(calc._engine_instance, QuadraticInterceptEngine)

    def test_config_shared_by_engines(self):
        calc = Calculator(config={'tolerance': 1e-6})
        assert calc._engine_instance.config.tolerance == 1e-6
        assert calc._fallback_instance.config.tolerance == 1e-6


@pytest.mark.extended
class TestEngineLoader:

    class DummyEP:
        def __init__(self, name: str, value: str, group: str, loader):
            self.name = name
            self.value = value
            self.group = group
            self._loader = loader

        def load(self):  # Mimic importlib.metadata.EntryPoint API
            return self._loader()

    def test_iter_engines_suffix(self):
        assert all(ep.name.endswith('_engine') for ep in Calculator.iter_engines())

    def test_load_with_none_uses_default_engine(self):
        assert _EngineLoader.load(None) is DragInterceptEngine

    def test_load_class(self):
        assert _EngineLoader.load(QuadraticInterceptEngine) is QuadraticInterceptEngine

    def test_unknown_name(self, monkeypatch):
        monkeypatch.setattr(_EngineLoader, "iter_engines", classmethod(lambda cls: iter(())))
        with pytest.raises(ValueError):
            _EngineLoader.load("totally_missing_engine")
        with pytest.raises(ValueError):
            Calculator(engine='not_an_engine')

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            _EngineLoader.load(42)  # type: ignore[arg-type]

    def test_load_from_entry_import_error(self):
        def boom():
            raise ImportError("nope")

        ep = self.DummyEP("bad_engine", "x.y:Z", _EngineLoader._entry_point_group, boom)
        assert _EngineLoader._load_from_entry(cast(EntryPoint, ep)) is None

    def test_load_from_entry_not_an_engine(self):
        ep = self.DummyEP("not_engine", "x.y:Z", _EngineLoader._entry_point_group, lambda: SimpleNamespace())
        assert _EngineLoader._load_from_entry(cast(EntryPoint, ep)) is None

    def test_missing_module_path(self):
        with pytest.raises(ValueError):
            _EngineLoader.load("py_interceptcalc.engines.nowhere:Engine")


class TestFunctionalInterface:

    def test_solve_drag_intercept(self):
        direction = solve_drag_intercept(ORIGIN, LEVEL_TARGET, STATIONARY, 3.0)
        assert_unit(direction)
        assert direction.z > 0.99

    def test_solve_drag_intercept_no_solution(self):
        assert solve_drag_intercept(ORIGIN, LEVEL_TARGET, STATIONARY, 0.0) is None
        assert solve_drag_intercept(ORIGIN, LEVEL_TARGET, STATIONARY, profile={'drag_ratio': 1.0}) is None

    def test_solve_quadratic_intercept(self):
        direction = solve_quadratic_intercept(ORIGIN, CLOSING_TARGET, CLOSING_VELOCITY, 3.0)
        assert tuple(direction) == pytest.approx((-0.77666, -0.59759, 0.19920), abs=1e-4)

    def test_solve_quadratic_intercept_no_solution(self):
        assert solve_quadratic_intercept(ORIGIN, CLOSING_TARGET, Vector(1, 0, 0), 3.0) is None

    def test_engines_agree_without_drag_or_motion(self):
        # Straight up there is nothing for drag to bend
        drag = solve_drag_intercept(ORIGIN, OVERHEAD_TARGET, STATIONARY)
        quadratic = solve_quadratic_intercept(ORIGIN, OVERHEAD_TARGET, STATIONARY)
        assert tuple(drag) == pytest.approx(tuple(quadratic), abs=1e-9)

    def test_config_override(self):
        assert solve_drag_intercept(ORIGIN, LEVEL_TARGET, STATIONARY, config={'max_flight_time': 0}) is None
