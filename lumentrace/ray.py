"""
Ray class for representing rays in 3D space.

A ray is defined by an origin point, a direction vector and the instant
it was emitted. Ray(t) = origin + t * direction
"""

from __future__ import annotations
from .vec3 import Vec3, Point3


class Ray:
    """A ray with origin, direction and sample time.

    The parametric form is: P(t) = origin + t * direction.
    ``time`` lies in [0, 1) and selects where moving geometry is when
    the ray is traced.
    """

    __slots__ = ('origin', 'direction', 'time')

    def __init__(self, origin: Point3, direction: Vec3, time: float = 0.0):
        self.origin = origin
        self.direction = direction
        self.time = time

    def at(self, t: float) -> Point3:
        """Get the point along the ray at parameter t."""
        return self.origin + self.direction * t

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin}, direction={self.direction}, time={self.time:.4f})"
