"""Launch-direction solver for intercepting moving targets with drag-affected projectiles."""

import importlib.metadata

try:
    __version__ = importlib.metadata.version("py_interceptcalc")
except importlib.metadata.PackageNotFoundError:  # running from a source checkout
    __version__ = "0.0.0"

# Standard library imports
import os
import sys

# Third-party imports
from typing_extensions import Any, Dict, Optional

# Local imports
from .logger import logger as log
from .config import PhysicsProfile, SolverConfig

if sys.version_info[:2] < (3, 11):
    import tomli as tomllib
else:
    import tomllib


def _find_pyic_toml(start_dir: Optional[str] = None) -> Optional[str]:
    """Search for .pyic.toml or pyic.toml starting from `start_dir` and walking up.

    Args:
        start_dir: The directory to start searching from. Default is the current working directory.

    Returns:
        The absolute path to the config file if found, otherwise None.
    """
    current_dir = os.path.abspath(start_dir or os.getcwd())
    while True:
        for pyic_path in (os.path.join(current_dir, '.pyic.toml'),
                          os.path.join(current_dir, 'pyic.toml')):
            if os.path.exists(pyic_path):
                return os.path.abspath(pyic_path)

        parent_dir = os.path.dirname(current_dir)
        # Stop at the filesystem root
        if parent_dir == current_dir:
            return None
        current_dir = parent_dir


def _load_config(filepath: Optional[str] = None, suppress_warnings: bool = False) -> None:
    """Load default physics profile and solver configuration from a .pyic.toml file.

    Recognized tables are `[pyic.physics]` (PhysicsProfile fields) and
    `[pyic.solver]` (SolverConfig fields).

    Args:
        filepath: Path to configuration file. If None, searches for .pyic.toml or pyic.toml
        suppress_warnings: If True, suppress warning messages

    Raises:
        ValueError: A table contains unknown keys.
        TypeError: A value is not a number.
    """
    if filepath is None:
        filepath = _find_pyic_toml()

    if filepath is None:
        log.debug("No pyic.toml found, using built-in defaults")
        return

    log.debug(f"Found {os.path.basename(filepath)} at {os.path.dirname(filepath)}")

    with open(filepath, "rb") as fp:
        _config = tomllib.load(fp)

    if _pyic := _config.get('pyic'):
        if physics := _pyic.get('physics'):
            PhysicsProfile.restore_defaults()
            PhysicsProfile.set_defaults(physics)
        elif not suppress_warnings:
            log.warning("Config has no `pyic.physics` section")
        if solver := _pyic.get('solver'):
            SolverConfig.restore_defaults()
            SolverConfig.set_defaults(solver)
    elif not suppress_warnings:
        log.warning("Config has no `pyic` section")

    log.debug("Default physics profile and solver config load success")


def _basic_config(filename: Optional[str] = None,
                  profile: Optional[Dict[str, Any]] = None,
                  solver: Optional[Dict[str, Any]] = None,
                  suppress_warnings: bool = False) -> None:
    """Set the default physics profile and solver configuration from a file or mappings.

    Args:
        filename: Configuration file path
        profile: PhysicsProfile overrides
        solver: SolverConfig overrides
        suppress_warnings: If True, suppress warning messages

    Raises:
        ValueError: If both filename and a mapping are provided
    """
    if filename and (profile or solver):
        raise ValueError("Can't use profile/solver mappings and config file at same time")
    if profile or solver:
        if profile:
            PhysicsProfile.restore_defaults()
            PhysicsProfile.set_defaults(profile)  # type: ignore[arg-type]
        if solver:
            SolverConfig.restore_defaults()
            SolverConfig.set_defaults(solver)  # type: ignore[arg-type]
    else:
        _load_config(filename, suppress_warnings)


basicConfig = _basic_config

basicConfig()


from .config import (PhysicsProfileDict, SolverConfigDict, DEFAULT_SOLVER_CONFIG,
                     create_physics_profile, create_solver_config)
from .engines import (InterceptEngineProtocol, BaseInterceptEngine, DragInterceptEngine,
                      QuadraticInterceptEngine, direction_at, drag_displacement)
from .exceptions import InterceptError, InvalidInputError, DegenerateModelError, NoInterceptError
from .guard import inputs_valid, drag_ratio_valid, is_finite_vector
from .interface import Calculator, _EngineLoader, solve_drag_intercept, solve_quadratic_intercept
from .logger import logger, enable_file_logging, disable_file_logging
from .solution import InterceptSolution, SolveMethod
from .vector import Vector

__all__ = [
    'basicConfig',
    'PhysicsProfile', 'PhysicsProfileDict', 'create_physics_profile',
    'SolverConfig', 'SolverConfigDict', 'DEFAULT_SOLVER_CONFIG', 'create_solver_config',
    'InterceptEngineProtocol', 'BaseInterceptEngine', 'DragInterceptEngine', 'QuadraticInterceptEngine',
    'direction_at', 'drag_displacement',
    'InterceptError', 'InvalidInputError', 'DegenerateModelError', 'NoInterceptError',
    'inputs_valid', 'drag_ratio_valid', 'is_finite_vector',
    'Calculator', 'solve_drag_intercept', 'solve_quadratic_intercept',
    'logger', 'enable_file_logging', 'disable_file_logging',
    'InterceptSolution', 'SolveMethod',
    'Vector',
]
