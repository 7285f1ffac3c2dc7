"""Vector maths and sphere colliders shared by the game objects."""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Callable, Iterator, Optional


@dataclass(frozen=True)
class Vec3:
    """An immutable three-component vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vec3:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vec3:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Vec3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def length(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.dot(self))

    def normalized(self) -> Vec3:
        """Unit vector in the same direction; the zero vector stays zero."""
        size = self.length()
        if size == 0.0:
            return ZERO
        return self / size

    def dot(self, other: Vec3) -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y + self.z * other.z


ZERO = Vec3(0.0, 0.0, 0.0)
ONE = Vec3(1.0, 1.0, 1.0)
BASIS_X = Vec3(1.0, 0.0, 0.0)
BASIS_Y = Vec3(0.0, 1.0, 0.0)
BASIS_Z = Vec3(0.0, 0.0, 1.0)

GRAVITY = Vec3(0.0, -9.8, 0.0)


@dataclass(eq=False)
class SphereCollider:
    """A sphere attached to an optional parent that has a world position.

    The parent, when given, must provide a ``world_position()`` method;
    the collider sits at the parent's position plus ``offset``.
    """

    radius: float = 1.0
    offset: Vec3 = ZERO
    parent: Any = None
    group: str = ""
    active: bool = True
    on_collision_enter: Optional[Callable[["SphereCollider"], None]] = None

    def world_position(self) -> Vec3:
        """Position of the sphere's centre in world space."""
        if self.parent is None:
            return self.offset
        return self.parent.world_position() + self.offset

    def intersects(self, other: SphereCollider) -> bool:
        """Whether the two spheres overlap or touch (activity is not checked)."""
        distance = (self.world_position() - other.world_position()).length()
        return distance <= self.radius + other.radius