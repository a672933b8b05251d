"""3D Vector Mathematics.

The Vector class is an immutable NamedTuple used for positions, velocities
and launch directions. Axis convention follows the intercept model:
`y` is vertical (positive = up), gravity acts along `-y`.

Typical Usage:
    ```python
    from py_interceptcalc import Vector

    shooter = Vector(0.0, 1.6, 0.0)
    target = Vector(0.0, 1.6, 20.0)

    relative = target - shooter
    distance = relative.magnitude()
    direction = relative.normalize()
    ```
"""
from __future__ import annotations

import math
from typing import Union, NamedTuple

__all__ = ('Vector',)


class Vector(NamedTuple):
    """Immutable 3D vector.

    Attributes:
        x: Horizontal component.
        y: Vertical component (positive = upward direction).
        z: Horizontal component.

    Examples:
        ```python
        velocity = Vector(1.0, 0.0, 0.0)
        position = Vector(5.0, 0.0, 5.0) + velocity * 3  # Target after 3 steps
        ```
    """

    x: float
    y: float
    z: float

    def magnitude(self) -> float:
        """Euclidean norm (length) of the vector.

        Note:
            Uses math.hypot() for numerical stability with extreme values.
            Any non-finite component yields a non-finite magnitude.
        """
        return math.hypot(self.x, self.y, self.z)

    def is_finite(self) -> bool:
        """True when all three components are finite numbers."""
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)

    def mul_by_const(self, a: float) -> Vector:
        """Multiply vector by a scalar constant."""
        return Vector(self.x * a, self.y * a, self.z * a)

    def mul_by_vector(self, b: Vector) -> float:
        """Dot product of two vectors."""
        return self.x * b.x + self.y * b.y + self.z * b.z

    def add(self, b: Vector) -> Vector:
        """Add two vectors component-wise."""
        return Vector(self.x + b.x, self.y + b.y, self.z + b.z)

    def subtract(self, b: Vector) -> Vector:
        """Subtract `b` component-wise; the result points from `b` to self."""
        return Vector(self.x - b.x, self.y - b.y, self.z - b.z)

    def negate(self) -> Vector:
        """Vector of the same length pointing the opposite way."""
        return Vector(-self.x, -self.y, -self.z)

    def normalize(self) -> Vector:
        """Unit vector pointing in the same direction.

        Note:
            Vectors shorter than 1e-10 are returned unchanged instead of
            being divided by a near-zero length. Callers that need a true
            unit vector must reject short vectors first.
        """
        m = self.magnitude()
        if math.fabs(m) < 1e-10:
            return Vector(self.x, self.y, self.z)
        return self.mul_by_const(1.0 / m)

    def __mul__(self, other: Union[int, float, Vector]) -> Union[float, Vector]:  # type: ignore[override]
        """Scalar multiplication for numbers, dot product for vectors.

        Raises:
            TypeError: If `other` is neither a number nor a Vector.
        """
        if isinstance(other, (int, float)):
            return self.mul_by_const(float(other))
        if isinstance(other, Vector):
            return self.mul_by_vector(other)
        raise TypeError(other)

    # Operator overloads - aliases more efficient than wrappers
    def __add__(self, other: Vector) -> Vector:  # type: ignore[override]
        return self.add(other)

    def __radd__(self, other: Vector) -> Vector:  # type: ignore[override]
        return self.add(other)

    def __sub__(self, other: Vector) -> Vector:  # type: ignore[override]
        return self.subtract(other)

    def __rmul__(self, other: Union[int, float, Vector]) -> Union[float, Vector]:  # type: ignore[override]
        return self.__mul__(other)

    def __neg__(self) -> Vector:  # type: ignore[override]
        return self.negate()
