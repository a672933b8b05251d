"""Intercept engines.

All engines implement the InterceptEngineProtocol interface and share the
Input Guard through BaseInterceptEngine. They hold no state between calls.

Available Engines:
    - DragInterceptEngine (drag_engine): exponential drag and gravity, scan plus bisection (default)
    - QuadraticInterceptEngine (quadratic_engine): gravity only, closed-form root (fallback)

Examples:
    >>> from py_interceptcalc.engines import DragInterceptEngine
    >>> engine = DragInterceptEngine({'tolerance': 1e-4})

    >>> # Using with Calculator
    >>> from py_interceptcalc import Calculator
    >>> calc = Calculator(engine="drag_engine", fallback="quadratic_engine")
"""

from .base_engine import *
from .drag import *
from .quadratic import *

__all__ = (
    'InterceptEngineProtocol',
    'BaseInterceptEngine',
    'ProfileEntry',
    'DragInterceptEngine',
    'direction_at',
    'drag_displacement',
    'QuadraticInterceptEngine',
)
