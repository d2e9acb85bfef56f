"""
Scalar intervals and axis-aligned bounding boxes.

An Interval bounds the acceptable ray parameters of an intersection query.
An AABB is three Intervals, one per axis, used by acceleration structures.
"""

from __future__ import annotations
import math

from .vec3 import Point3
from .ray import Ray


class Interval:
    """A real interval [min, max]."""

    __slots__ = ('min', 'max')

    EMPTY: Interval
    UNIVERSE: Interval

    def __init__(self, min_val: float = math.inf, max_val: float = -math.inf):
        self.min = min_val
        self.max = max_val

    @classmethod
    def enclosing(cls, a: Interval, b: Interval) -> Interval:
        """Return the tightest interval containing both intervals."""
        return cls(min(a.min, b.min), max(a.max, b.max))

    def size(self) -> float:
        return self.max - self.min

    def contains(self, x: float) -> bool:
        return self.min <= x <= self.max

    def surrounds(self, x: float) -> bool:
        """True if x lies strictly inside the interval."""
        return self.min < x < self.max

    def clamp(self, x: float) -> float:
        if x < self.min:
            return self.min
        if x > self.max:
            return self.max
        return x

    def expand(self, delta: float) -> Interval:
        """Return a copy widened by delta in total (delta/2 on each side)."""
        padding = delta / 2
        return Interval(self.min - padding, self.max + padding)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self.min == other.min and self.max == other.max

    def __hash__(self) -> int:
        return hash((self.min, self.max))

    def __repr__(self) -> str:
        return f"Interval({self.min}, {self.max})"


Interval.EMPTY = Interval(math.inf, -math.inf)
Interval.UNIVERSE = Interval(-math.inf, math.inf)


class AABB:
    """Axis-Aligned Bounding Box for acceleration structures.

    No axis is ever thinner than MIN_THICKNESS; flat boxes are padded so
    the slab test never degenerates.
    """

    MIN_THICKNESS = 1e-4

    __slots__ = ('x', 'y', 'z')

    def __init__(
        self,
        x: Interval = Interval.EMPTY,
        y: Interval = Interval.EMPTY,
        z: Interval = Interval.EMPTY
    ):
        self.x = x
        self.y = y
        self.z = z
        self._pad_to_minimums()

    @classmethod
    def from_points(cls, a: Point3, b: Point3) -> AABB:
        """Create an AABB with the two points as opposite corners, in any order."""
        return cls(
            Interval(min(a.x, b.x), max(a.x, b.x)),
            Interval(min(a.y, b.y), max(a.y, b.y)),
            Interval(min(a.z, b.z), max(a.z, b.z))
        )

    @classmethod
    def surrounding(cls, box0: AABB, box1: AABB) -> AABB:
        """Return the AABB that contains both input boxes."""
        return cls(
            Interval.enclosing(box0.x, box1.x),
            Interval.enclosing(box0.y, box1.y),
            Interval.enclosing(box0.z, box1.z)
        )

    def _pad_to_minimums(self) -> None:
        # The empty box is left as is so it stays the identity of surrounding().
        if self.x.size() < self.MIN_THICKNESS and self.x.size() >= 0:
            self.x = self.x.expand(self.MIN_THICKNESS)
        if self.y.size() < self.MIN_THICKNESS and self.y.size() >= 0:
            self.y = self.y.expand(self.MIN_THICKNESS)
        if self.z.size() < self.MIN_THICKNESS and self.z.size() >= 0:
            self.z = self.z.expand(self.MIN_THICKNESS)

    def axis_interval(self, n: int) -> Interval:
        if n == 1:
            return self.y
        if n == 2:
            return self.z
        return self.x

    def hit(self, ray: Ray, ray_t: Interval) -> bool:
        """Test if ray intersects this AABB using the slab method."""
        t_min = ray_t.min
        t_max = ray_t.max

        for axis in range(3):
            ax = self.axis_interval(axis)
            d = ray.direction[axis]
            o = ray.origin[axis]

            if d == 0:
                if o < ax.min or o > ax.max:
                    return False
                continue

            inv_d = 1.0 / d
            t0 = (ax.min - o) * inv_d
            t1 = (ax.max - o) * inv_d
            if t0 > t1:
                t0, t1 = t1, t0

            t_min = max(t0, t_min)
            t_max = min(t1, t_max)

            if t_max <= t_min:
                return False

        return True

    def longest_axis(self) -> int:
        """Index of the axis with the largest extent."""
        sizes = (self.x.size(), self.y.size(), self.z.size())
        return sizes.index(max(sizes))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AABB):
            return NotImplemented
        return self.x == other.x and self.y == other.y and self.z == other.z

    def __hash__(self) -> int:
        return hash((self.x, self.y, self.z))

    def __repr__(self) -> str:
        return f"AABB(x={self.x}, y={self.y}, z={self.z})"
