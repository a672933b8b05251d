"""Intercept calculator interface and engine loading system.

This module provides the `Calculator` class, which runs a primary engine and, when it
finds no intercept, a fallback engine. Engines are plugins discovered through Python
entry points, and must implement InterceptEngineProtocol.

It also provides the functional interface:

    solve_drag_intercept(shooter_pos, target_pos, target_velocity, launch_speed) -> Optional[Vector]
    solve_quadratic_intercept(shooter_pos, target_pos, target_velocity, launch_speed) -> Optional[Vector]

Both return a unit direction or None; callers cannot tell why interception failed.

Key Classes:
    - Calculator: Intercept calculator with pluggable primary and fallback engines
    - _EngineLoader: Internal utility for discovering and loading engine plugins
"""
from dataclasses import dataclass, field
from importlib.metadata import entry_points, EntryPoint
from typing import Any

from typing_extensions import Generator, Optional, Type, Union

from py_interceptcalc.config import SolverConfig, SolverConfigDict
from py_interceptcalc.engines import (DragInterceptEngine, InterceptEngineProtocol, ProfileEntry,
                                      QuadraticInterceptEngine)
from py_interceptcalc.exceptions import InterceptError, InvalidInputError
from py_interceptcalc.logger import logger
from py_interceptcalc.solution import InterceptSolution
from py_interceptcalc.vector import Vector

DEFAULT_ENTRY_SUFFIX = '_engine'
DEFAULT_ENTRY_GROUP = 'py_interceptcalc'
DEFAULT_ENTRY: Type[InterceptEngineProtocol] = DragInterceptEngine
DEFAULT_FALLBACK_ENTRY: Type[InterceptEngineProtocol] = QuadraticInterceptEngine

EngineProtocolType = Type[InterceptEngineProtocol[Any]]
EngineProtocolEntry = Union[str, EngineProtocolType, None]
ConfigEntry = Union[SolverConfig, SolverConfigDict, None]


@dataclass
class _EngineLoader:
    _entry_point_group = DEFAULT_ENTRY_GROUP
    _entry_point_suffix = DEFAULT_ENTRY_SUFFIX

    @classmethod
    def _get_entries_by_group(cls) -> set:
        all_entry_points = entry_points()
        if hasattr(all_entry_points, 'select'):  # for importlib >= 5
            intercept_entry_points = all_entry_points.select(group=cls._entry_point_group)
        elif hasattr(all_entry_points, 'get'):  # for importlib < 5
            intercept_entry_points = all_entry_points.get(cls._entry_point_group, [])  # type: ignore[arg-type]
        else:
            raise RuntimeError('Entry point not supported')
        return set(intercept_entry_points)

    @classmethod
    def iter_engines(cls) -> Generator[EntryPoint, None, None]:
        """Iterate over all available engines in the entry points."""
        for ep in cls._get_entries_by_group():
            if ep.name.endswith(cls._entry_point_suffix):
                yield ep

    @classmethod
    def _load_from_entry(cls, ep: EntryPoint) -> Optional[EngineProtocolType]:
        try:
            handle: EngineProtocolType = ep.load()
            if not isinstance(handle, InterceptEngineProtocol):
                raise TypeError(f"Unsupported engine {ep.value} does not implement InterceptEngineProtocol")
            logger.info(f"Loaded engine from: {ep.value} (Class: {handle})")
            return handle
        except ImportError as e:
            logger.error(f"Error loading engine from {ep.value}: {e}")
        except AttributeError as e:
            logger.error(f"Error loading attribute from {ep.value}: {e}")
        except (TypeError, ValueError) as e:
            logger.error(f"Invalid engine entry {ep.value}: {e}")
        return None

    @classmethod
    def load(cls, entry_point: EngineProtocolEntry = DEFAULT_ENTRY) -> EngineProtocolType:
        """Resolve an engine class from a class, an entry point name or a 'module:Class' path.

        Raises:
            ValueError: If no engine matches the name.
            TypeError: If `entry_point` is neither a string nor an engine class.
        """
        if entry_point is None:
            entry_point = DEFAULT_ENTRY
        if isinstance(entry_point, type) and isinstance(entry_point, InterceptEngineProtocol):
            return entry_point
        if isinstance(entry_point, str):
            for ep in cls.iter_engines():
                if ep.name == entry_point:
                    if handle := cls._load_from_entry(ep):
                        return handle

            if ':' in entry_point:
                ep = EntryPoint(entry_point, entry_point, cls._entry_point_group)
                if handle := cls._load_from_entry(ep):
                    return handle
            raise ValueError(f"No 'engine' entry point found containing '{entry_point}'")
        raise TypeError("Invalid entry_point type, expected 'str' or an InterceptEngineProtocol class")


@dataclass
class Calculator:
    """Intercept calculator running a primary engine with an optional fallback.

    Attributes:
        config: Solver configuration shared by both engines.
        engine: Primary engine (class, entry point name or 'module:Class'). Defaults to the drag model.
        fallback: Engine tried when the primary finds no intercept, or None to disable.
                  Defaults to the quadratic model.
        profile: Physics profile used when a call passes none.

    Examples:
        >>> calc = Calculator()
        >>> direction = calc.solve(Vector(0, 0, 0), Vector(0, 0, 20), Vector(0, 0, 0))
        >>> calc = Calculator(engine="quadratic_engine", fallback=None, profile={'gravity': 0.03})
    """

    config: ConfigEntry = field(default=None)
    engine: EngineProtocolEntry = field(default=DEFAULT_ENTRY)
    fallback: EngineProtocolEntry = field(default=DEFAULT_FALLBACK_ENTRY)
    profile: ProfileEntry = field(default=None)
    _engine_instance: InterceptEngineProtocol[Any] = field(init=False, repr=False, compare=False)
    _fallback_instance: Optional[InterceptEngineProtocol[Any]] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._engine_instance = _EngineLoader.load(self.engine)(self.config)  # type: ignore[call-arg]
        self._fallback_instance = None
        if self.fallback is not None:
            self._fallback_instance = _EngineLoader.load(self.fallback)(self.config)  # type: ignore[call-arg]

    def find_intercept(self, shooter_pos: Vector, target_pos: Vector, target_velocity: Vector,
                       launch_speed: Optional[float] = None, *,
                       profile: ProfileEntry = None) -> InterceptSolution:
        """Solve with the primary engine, then with the fallback engine.

        Inputs rejected by the Input Guard are not retried: both engines share it.

        Raises:
            InterceptError: The error of the last engine tried.
        """
        if profile is None:
            profile = self.profile
        try:
            return self._engine_instance.find_intercept(shooter_pos, target_pos, target_velocity,
                                                        launch_speed, profile=profile)
        except InvalidInputError:
            raise
        except InterceptError as e:
            if self._fallback_instance is None:
                raise
            logger.warning(f"{self._engine_instance.__class__.__name__} failed: {e}; "
                           f"falling back to {self._fallback_instance.__class__.__name__}")
        return self._fallback_instance.find_intercept(shooter_pos, target_pos, target_velocity,
                                                      launch_speed, profile=profile)

    def solve(self, shooter_pos: Vector, target_pos: Vector, target_velocity: Vector,
              launch_speed: Optional[float] = None, *,
              profile: ProfileEntry = None) -> Optional[Vector]:
        """Unit launch direction from the first engine that succeeds, or None."""
        try:
            return self.find_intercept(shooter_pos, target_pos, target_velocity,
                                       launch_speed, profile=profile).direction
        except InterceptError as e:
            logger.debug(f"No intercept: {e}")
            return None

    @staticmethod
    def iter_engines() -> Generator[EntryPoint, None, None]:
        """Iterate all available engines in the entry points."""
        yield from _EngineLoader.iter_engines()


def solve_drag_intercept(shooter_pos: Vector, target_pos: Vector, target_velocity: Vector,
                         launch_speed: Optional[float] = None, *,
                         profile: ProfileEntry = None,
                         config: ConfigEntry = None) -> Optional[Vector]:
    """Unit launch direction under the drag model, or None when there is no intercept.

    Args:
        shooter_pos: Shooter position.
        target_pos: Current target position.
        target_velocity: Target velocity, units per step.
        launch_speed: Projectile launch speed. Defaults to the profile's launch speed.
        profile: Physics profile or overrides. Defaults to `PhysicsProfile.defaults()`.
        config: Solver configuration or overrides.
    """
    return DragInterceptEngine(config).solve(shooter_pos, target_pos, target_velocity,
                                             launch_speed, profile=profile)


def solve_quadratic_intercept(shooter_pos: Vector, target_pos: Vector, target_velocity: Vector,
                              launch_speed: Optional[float] = None, *,
                              profile: ProfileEntry = None,
                              config: ConfigEntry = None) -> Optional[Vector]:
    """Unit launch direction ignoring drag, or None when there is no intercept.

    Same arguments as `solve_drag_intercept`; the profile's drag ratio is not used.
    """
    return QuadraticInterceptEngine(config).solve(shooter_pos, target_pos, target_velocity,
                                                  launch_speed, profile=profile)


__all__ = ('Calculator', '_EngineLoader', 'solve_drag_intercept', 'solve_quadratic_intercept',)
