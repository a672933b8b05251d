"""Physics profiles and solver configuration.

Two dataclass/TypedDict pairs configure the solvers:

- PhysicsProfile: physical constants of a projectile (drag ratio, gravity, launch speed).
  Profiles are passed explicitly to every solve call, so several can coexist;
  the process-wide default is only used when a call passes none.
- SolverConfig: numeric constants of the search (scan length, tolerance, bisection budget, ...).

Dictionary forms (PhysicsProfileDict, SolverConfigDict) allow partial overrides that
are merged onto the defaults by `create_physics_profile()` and `create_solver_config()`.

Examples:
    >>> profile = create_physics_profile({'launch_speed': 1.5})
    >>> profile.drag_ratio
    0.99
    >>> config = create_solver_config({'tolerance': 1e-4})
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, fields, replace
from typing import Any, ClassVar, Mapping

from typing_extensions import Optional, TypedDict, Union

__all__ = (
    'PhysicsProfile',
    'PhysicsProfileDict',
    'create_physics_profile',
    'SolverConfig',
    'SolverConfigDict',
    'create_solver_config',
    'DEFAULT_SOLVER_CONFIG',
    'cDragRatio',
    'cGravity',
    'cLaunchSpeed',
)

cDragRatio: float = 0.99  # fraction of velocity retained per step
cGravity: float = 0.05  # downward acceleration per step squared
cLaunchSpeed: float = 3.0  # units per step

cMaxFlightTime: int = 300  # coarse scan ceiling, steps
cTolerance: float = 0.001  # accepted |length - 1| of a candidate direction
cRefineWindow: int = 20  # half-width of the bisection interval around the best sample, steps
cRefineIterations: int = 70  # bisection budget
cMinDirectionLength: float = 0.01  # shorter candidates are rejected before normalization
cDragRatioEpsilon: float = 1e-12  # |drag_ratio - 1| below this makes the drag model singular
cMaxQuadraticTime: float = 1e6  # upper bound for the quadratic root, steps


def _merge(cls: Any, default: Any, overrides: Optional[Mapping[str, Any]]) -> Any:
    if overrides is None:
        return replace(default)
    if not isinstance(overrides, Mapping):
        raise TypeError(f"Expected a mapping for {cls.__name__}, got {type(overrides).__name__}")
    known = {f.name for f in fields(cls)}
    unknown = set(overrides) - known
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} keys: {', '.join(sorted(unknown))}")
    values = asdict(default)
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"{cls.__name__}.{key} must be a number, got {value!r}")
        values[key] = value
    return cls(**values)


@dataclass(frozen=True)
class PhysicsProfile:
    """Physical constants of a projectile.

    Attributes:
        drag_ratio: Fraction of velocity retained per step under exponential decay, 0 < r < 1.
                    Defaults to 0.99.
        gravity: Downward acceleration subtracted from vertical velocity each step.
                 Defaults to 0.05.
        launch_speed: Magnitude of the initial projectile velocity, units per step.
                      Defaults to 3.0.

    Values are not validated here: the Input Guard rejects unusable ones at solve time,
    which keeps a profile usable with the quadratic model even when its drag ratio is 1.
    """

    drag_ratio: float = cDragRatio
    gravity: float = cGravity
    launch_speed: float = cLaunchSpeed

    _default: ClassVar[Optional[PhysicsProfile]] = None

    @classmethod
    def defaults(cls) -> PhysicsProfile:
        """Process-wide default profile used when a solve call passes none."""
        if cls._default is None:
            return cls()
        return cls._default

    @classmethod
    def set_defaults(cls, profile: Union[PhysicsProfile, PhysicsProfileDict, None]) -> None:
        if profile is None or isinstance(profile, PhysicsProfile):
            cls._default = profile
        else:
            cls._default = create_physics_profile(profile)

    @classmethod
    def restore_defaults(cls) -> None:
        cls._default = None

    def with_launch_speed(self, launch_speed: Optional[float]) -> PhysicsProfile:
        """Copy of the profile with `launch_speed` overridden (unless None)."""
        if launch_speed is None:
            return self
        return replace(self, launch_speed=launch_speed)


class PhysicsProfileDict(TypedDict, total=False):
    """Partial PhysicsProfile, merged onto the defaults by create_physics_profile()."""

    drag_ratio: Optional[float]
    gravity: Optional[float]
    launch_speed: Optional[float]


def create_physics_profile(profile: Optional[PhysicsProfileDict] = None) -> PhysicsProfile:
    """Create PhysicsProfile from optional dictionary overrides.

    Args:
        profile: Optional mapping with overrides. Unspecified or None fields keep
                 the values of `PhysicsProfile.defaults()`.

    Raises:
        TypeError: If `profile` is not a mapping or a value is not a number.
        ValueError: If `profile` contains unknown keys.
    """
    return _merge(PhysicsProfile, PhysicsProfile.defaults(), profile)


@dataclass
class SolverConfig:
    """Numeric constants of the intercept solvers.

    Attributes:
        max_flight_time: Coarse scan samples t = 1..max_flight_time. Defaults to 300.
        tolerance: Accepted |length - 1| of a candidate direction. Defaults to 0.001.
        refine_window: Half-width of the bisection interval around the best sample. Defaults to 20.
        refine_iterations: Maximum bisection steps. Defaults to 70.
        min_direction_length: Candidates not longer than this are rejected. Defaults to 0.01.
        drag_ratio_epsilon: Minimum |drag_ratio - 1| for the drag model. Defaults to 1e-12.
        max_quadratic_time: Largest flight time accepted from the quadratic model. Defaults to 1e6.
    """

    max_flight_time: int = cMaxFlightTime
    tolerance: float = cTolerance
    refine_window: int = cRefineWindow
    refine_iterations: int = cRefineIterations
    min_direction_length: float = cMinDirectionLength
    drag_ratio_epsilon: float = cDragRatioEpsilon
    max_quadratic_time: float = cMaxQuadraticTime

    _default: ClassVar[Optional[SolverConfig]] = None

    @classmethod
    def defaults(cls) -> SolverConfig:
        """Process-wide default configuration, set by basicConfig() from a `[pyic.solver]` table."""
        if cls._default is None:
            return DEFAULT_SOLVER_CONFIG
        return cls._default

    @classmethod
    def set_defaults(cls, config: Union[SolverConfig, SolverConfigDict, None]) -> None:
        if config is None or isinstance(config, SolverConfig):
            cls._default = config
        else:
            cls._default = _merge(SolverConfig, DEFAULT_SOLVER_CONFIG, config)

    @classmethod
    def restore_defaults(cls) -> None:
        cls._default = None


#: Default configuration instance using the standard solver constants
DEFAULT_SOLVER_CONFIG: SolverConfig = SolverConfig()


class SolverConfigDict(TypedDict, total=False):
    """Partial SolverConfig, merged onto DEFAULT_SOLVER_CONFIG by create_solver_config()."""

    max_flight_time: Optional[int]
    tolerance: Optional[float]
    refine_window: Optional[int]
    refine_iterations: Optional[int]
    min_direction_length: Optional[float]
    drag_ratio_epsilon: Optional[float]
    max_quadratic_time: Optional[float]


def create_solver_config(config: Union[SolverConfig, SolverConfigDict, None] = None) -> SolverConfig:
    """Create SolverConfig from optional dictionary overrides.

    Args:
        config: SolverConfig instance (returned as is) or mapping with overrides.
                Unspecified or None fields keep the values of `SolverConfig.defaults()`.

    Raises:
        TypeError: If `config` is not a mapping or a value is not a number.
        ValueError: If `config` contains unknown keys.
    """
    if isinstance(config, SolverConfig):
        return config
    return _merge(SolverConfig, SolverConfig.defaults(), config)
