"""
Core geometry types for the straight skeleton engine.

Provides the Vector and Angle value types used by the topology, the
event model and the wavefront engine. Both are immutable, so copies are
never aliased mutable state.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple, Union
import math

from ..errors import ZeroVectorError


@dataclass(frozen=True, slots=True)
class Vector:
    """2D vector (or point) in a y-up plane."""
    x: float
    y: float

    @classmethod
    def coerce(cls, value: Union['Vector', Sequence[float]]) -> 'Vector':
        """Build a Vector from a Vector or an (x, y) pair."""
        if isinstance(value, Vector):
            return value
        x, y = value
        return cls(float(x), float(y))

    def __add__(self, other: 'Vector') -> 'Vector':
        """Vector addition."""
        return Vector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Vector') -> 'Vector':
        """Vector subtraction."""
        return Vector(self.x - other.x, self.y - other.y)

    def __neg__(self) -> 'Vector':
        return Vector(-self.x, -self.y)

    def __mul__(self, factor: float) -> 'Vector':
        return self.scale(factor)

    __rmul__ = __mul__

    def scale(self, factor: float) -> 'Vector':
        """Multiply both components by a scalar."""
        return Vector(self.x * factor, self.y * factor)

    def dot(self, other: 'Vector') -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: 'Vector') -> float:
        """2D cross product (returns scalar z-component)."""
        return self.x * other.y - self.y * other.x

    def length(self) -> float:
        """Euclidean length."""
        return math.hypot(self.x, self.y)

    def distance_to(self, other: 'Vector') -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def normalize(self) -> 'Vector':
        """
        Unit vector with the same direction.

        Raises:
            ZeroVectorError: If the vector has zero length
        """
        length = self.length()
        if length == 0.0:
            raise ZeroVectorError(f"Cannot normalize zero-length vector {self}")
        return Vector(self.x / length, self.y / length)

    def perpendicular(self) -> 'Vector':
        """Vector rotated 90 degrees counter-clockwise."""
        return Vector(-self.y, self.x)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def is_close(self, other: 'Vector', tolerance: float) -> bool:
        """True if other lies within tolerance of this point."""
        return self.distance_to(other) <= tolerance

    def midpoint(self, other: 'Vector') -> 'Vector':
        return Vector((self.x + other.x) * 0.5, (self.y + other.y) * 0.5)

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True, slots=True)
class Angle:
    """
    Signed angle in radians.

    Angles built from vectors lie in (-pi, pi]. Angles built from raw
    degrees or radians are reduced modulo 2*pi keeping the sign of the
    input, so -90 degrees stays -pi/2 rather than becoming 3*pi/2.
    """
    value: float

    @classmethod
    def between(cls, a: Vector, b: Vector) -> 'Angle':
        """Signed rotation carrying direction a onto direction b."""
        return cls(math.atan2(a.cross(b), a.dot(b)))

    @classmethod
    def from_vector(cls, v: Vector) -> 'Angle':
        """Direction of v measured from the positive x-axis."""
        return cls(math.atan2(v.y, v.x))

    @classmethod
    def from_radians(cls, radians: float) -> 'Angle':
        return cls(math.fmod(radians, 2.0 * math.pi))

    @classmethod
    def from_degrees(cls, degrees: float) -> 'Angle':
        return cls.from_radians(math.radians(degrees))

    def radians(self) -> float:
        return self.value

    def degrees(self) -> float:
        return math.degrees(self.value)

    def sin(self) -> float:
        return math.sin(self.value)

    def cos(self) -> float:
        return math.cos(self.value)

    def tan(self) -> float:
        return math.tan(self.value)
