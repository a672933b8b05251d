"""Base intercept engine.

The module serves as the core framework for the engine system, providing:
- InterceptEngineProtocol, the interface the Calculator and _EngineLoader rely on
- BaseInterceptEngine, which resolves the physics profile, runs the Input Guard and
  collapses solver errors into `None` for the functional interface

Concrete engines implement `_find()` on already validated inputs.

See Also:
    py_interceptcalc.engines.drag: Drag-Model Solver
    py_interceptcalc.engines.quadratic: Quadratic Fallback Solver
    py_interceptcalc.interface.Calculator: Engine selection and fallback chain
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TypeVar

from typing_extensions import Optional, Protocol, Tuple, Union, runtime_checkable

from py_interceptcalc.config import (PhysicsProfile, PhysicsProfileDict, SolverConfig, SolverConfigDict,
                                     create_physics_profile, create_solver_config)
from py_interceptcalc.exceptions import InterceptError, InvalidInputError
from py_interceptcalc.guard import geometry_degenerate, inputs_valid
from py_interceptcalc.logger import logger
from py_interceptcalc.solution import InterceptSolution
from py_interceptcalc.vector import Vector

__all__ = (
    'InterceptEngineProtocol',
    'BaseInterceptEngine',
    'ProfileEntry',
)

ConfigT = TypeVar("ConfigT", covariant=True)

ProfileEntry = Union[PhysicsProfile, PhysicsProfileDict, None]


@runtime_checkable
class InterceptEngineProtocol(Protocol[ConfigT]):
    """Protocol defining the interface for intercept engines.

    Required Methods:
        - find_intercept: Solve for flight time and direction, raising InterceptError on failure.
        - solve: Same search, returning the unit direction or None.
    """

    @abstractmethod
    def find_intercept(self, shooter_pos: Vector, target_pos: Vector, target_velocity: Vector,
                       launch_speed: Optional[float] = None, *,
                       profile: ProfileEntry = None) -> InterceptSolution:
        raise NotImplementedError

    @abstractmethod
    def solve(self, shooter_pos: Vector, target_pos: Vector, target_velocity: Vector,
              launch_speed: Optional[float] = None, *,
              profile: ProfileEntry = None) -> Optional[Vector]:
        raise NotImplementedError


def _resolve_profile(profile: ProfileEntry, launch_speed: Optional[float]) -> PhysicsProfile:
    if profile is None:
        resolved = PhysicsProfile.defaults()
    elif isinstance(profile, PhysicsProfile):
        resolved = profile
    else:
        resolved = create_physics_profile(profile)
    return resolved.with_launch_speed(launch_speed)


class BaseInterceptEngine(ABC, InterceptEngineProtocol[SolverConfigDict]):
    """Shared input handling for intercept engines.

    Engines are stateless between calls: the only attribute is the solver configuration,
    so one instance can serve any number of call sites.
    """

    def __init__(self, _config: Union[SolverConfig, SolverConfigDict, None] = None):
        """Initialize the class.

        Args:
            _config: The configuration object or dictionary of overrides.
        """
        self._config: SolverConfig = create_solver_config(_config)

    @property
    def config(self) -> SolverConfig:
        return self._config

    def _prepare(self, shooter_pos: Vector, target_pos: Vector, target_velocity: Vector,
                 launch_speed: Optional[float], profile: ProfileEntry) -> Tuple[Vector, Vector, PhysicsProfile]:
        """Validate inputs and return (relative position, target velocity, profile)."""
        resolved = _resolve_profile(profile, launch_speed)
        if not inputs_valid(shooter_pos, target_pos, target_velocity, resolved.launch_speed):
            raise InvalidInputError(
                f"Non-finite input or non-positive launch speed {resolved.launch_speed!r}")
        rel_pos = Vector(target_pos.x - shooter_pos.x,
                         target_pos.y - shooter_pos.y,
                         target_pos.z - shooter_pos.z)
        velocity = Vector(target_velocity.x, target_velocity.y, target_velocity.z)
        if geometry_degenerate(rel_pos, velocity, self._config.min_direction_length):
            raise InvalidInputError("Stationary target coincides with the shooter")
        return rel_pos, velocity, resolved

    def find_intercept(self, shooter_pos: Vector, target_pos: Vector, target_velocity: Vector,
                       launch_speed: Optional[float] = None, *,
                       profile: ProfileEntry = None) -> InterceptSolution:
        """Solve for the intercept.

        Args:
            shooter_pos: Shooter position.
            target_pos: Current target position.
            target_velocity: Target velocity, units per step.
            launch_speed: Overrides the profile's launch speed when given.
            profile: Physics profile or dictionary of overrides. Defaults to `PhysicsProfile.defaults()`.

        Returns:
            InterceptSolution with flight time, unit direction, residual and solver stage.

        Raises:
            InvalidInputError: Inputs rejected by the Input Guard.
            DegenerateModelError: The profile makes the model singular.
            NoInterceptError: The search found no usable candidate.
        """
        rel_pos, velocity, resolved = self._prepare(shooter_pos, target_pos, target_velocity,
                                                    launch_speed, profile)
        return self._find(rel_pos, velocity, resolved)

    def solve(self, shooter_pos: Vector, target_pos: Vector, target_velocity: Vector,
              launch_speed: Optional[float] = None, *,
              profile: ProfileEntry = None) -> Optional[Vector]:
        """Unit launch direction, or None when there is no intercept for any reason."""
        try:
            solution = self.find_intercept(shooter_pos, target_pos, target_velocity,
                                           launch_speed, profile=profile)
        except InterceptError as e:
            logger.debug(f"{self.__class__.__name__}: no solution: {e}")
            return None
        return solution.direction

    @abstractmethod
    def _find(self, rel_pos: Vector, target_velocity: Vector, profile: PhysicsProfile) -> InterceptSolution:
        """Solve on validated inputs.

        Args:
            rel_pos: Target position relative to the shooter.
            target_velocity: Target velocity.
            profile: Resolved physics profile with a finite, positive launch speed.
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._config!r})"
