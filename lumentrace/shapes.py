"""
Geometric shapes for the ray tracer.

Each shape implements the Hittable interface: ``hit`` for ray
intersection and ``bounding_box`` for acceleration structures.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
import math

from .vec3 import Vec3, Point3
from .ray import Ray
from .bounds import Interval, AABB

if TYPE_CHECKING:
    from .materials import Material


@dataclass
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        point: The intersection point in world space
        normal: The unit surface normal, always pointing against the ray
        t: The ray parameter at intersection
        front_face: True if the ray hit the outside of the surface
        material: The material at the hit point
        u, v: Surface coordinates at the hit point
    """
    point: Point3
    normal: Vec3
    t: float
    front_face: bool = True
    material: Optional[Material] = None
    u: float = 0.0
    v: float = 0.0

    def set_face_normal(self, ray: Ray, outward_normal: Vec3) -> None:
        """Orient the normal against the ray direction.

        Args:
            ray: The incoming ray
            outward_normal: The unit geometric normal pointing outward
        """
        self.front_face = ray.direction.dot(outward_normal) < 0
        self.normal = outward_normal if self.front_face else -outward_normal


class Hittable(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    @abstractmethod
    def hit(self, ray: Ray, ray_t: Interval) -> Optional[HitRecord]:
        """Test if ray intersects this object.

        Args:
            ray: The ray to test
            ray_t: Parameters strictly inside this interval are accepted

        Returns:
            HitRecord for the nearest accepted intersection, None otherwise
        """

    @abstractmethod
    def bounding_box(self) -> AABB:
        """Get the axis-aligned bounding box for this object."""


class Sphere(Hittable):
    """A sphere whose center moves linearly over the shutter interval.

    The center is stored as a ray: its origin is the position at time 0
    and its direction the displacement reached at time 1. A static
    sphere is the zero-velocity case.
    """

    def __init__(
        self,
        center: Point3,
        radius: float,
        material: Optional[Material] = None,
        center1: Optional[Point3] = None
    ):
        """Create a sphere.

        Args:
            center: Center position at time 0
            radius: Radius, clamped to zero when negative
            material: Material for shading
            center1: Center position at time 1 (None for a static sphere)
        """
        velocity = center1 - center if center1 is not None else Vec3(0, 0, 0)
        self.center = Ray(center, velocity)
        self.radius = max(0.0, float(radius))
        self.material = material

        rvec = Vec3(self.radius, self.radius, self.radius)
        box0 = AABB.from_points(self.center.at(0) - rvec, self.center.at(0) + rvec)
        if center1 is None:
            self.bbox = box0
        else:
            box1 = AABB.from_points(self.center.at(1) - rvec, self.center.at(1) + rvec)
            self.bbox = AABB.surrounding(box0, box1)

    @property
    def is_moving(self) -> bool:
        return not self.center.direction.near_zero()

    def center_at(self, time: float) -> Point3:
        """Get the center position at a given time."""
        return self.center.at(time)

    def hit(self, ray: Ray, ray_t: Interval) -> Optional[HitRecord]:
        """Test ray-sphere intersection at the ray's time.

        Substituting P = O + tD into |P - C|^2 = r^2 with h = D.(C - O)
        gives a t^2 - 2h t + c = 0, solved in its half-b form.
        """
        if self.radius == 0:
            return None

        current_center = self.center.at(ray.time)
        oc = current_center - ray.origin
        a = ray.direction.length_squared()
        h = ray.direction.dot(oc)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = h * h - a * c
        if discriminant < 0:
            return None

        sqrtd = math.sqrt(discriminant)

        # Find the nearest root in the acceptable range
        root = (h - sqrtd) / a
        if not ray_t.surrounds(root):
            root = (h + sqrtd) / a
            if not ray_t.surrounds(root):
                return None

        point = ray.at(root)
        outward_normal = (point - current_center) / self.radius
        u, v = self._get_sphere_uv(outward_normal)

        hit_record = HitRecord(
            point=point,
            normal=outward_normal,
            t=root,
            material=self.material,
            u=u,
            v=v
        )
        hit_record.set_face_normal(ray, outward_normal)

        return hit_record

    @staticmethod
    def _get_sphere_uv(normal: Vec3) -> tuple[float, float]:
        """Get spherical UV coordinates for a point on the unit sphere.

        u: returned value [0,1] of angle around the Y axis from X=-1
        v: returned value [0,1] of angle from Y=-1 to Y=+1
        """
        theta = math.acos(max(-1.0, min(1.0, -normal.y)))
        phi = math.atan2(-normal.z, normal.x) + math.pi

        return phi / (2 * math.pi), theta / math.pi

    def bounding_box(self) -> AABB:
        return self.bbox

    def __repr__(self) -> str:
        if self.is_moving:
            return f"Sphere(center={self.center.at(0)}, center1={self.center.at(1)}, radius={self.radius})"
        return f"Sphere(center={self.center.origin}, radius={self.radius})"


class HittableList(Hittable):
    """A collection of hittable objects."""

    def __init__(self, objects: Optional[list[Hittable]] = None):
        self.objects: list[Hittable] = []
        self.bbox = AABB()
        for obj in objects or []:
            self.add(obj)

    def add(self, obj: Hittable) -> None:
        """Add an object to the list."""
        self.objects.append(obj)
        self.bbox = AABB.surrounding(self.bbox, obj.bounding_box())

    def hit(self, ray: Ray, ray_t: Interval) -> Optional[HitRecord]:
        """Find the closest intersection among all objects."""
        closest_hit: Optional[HitRecord] = None
        closest_t = ray_t.max

        for obj in self.objects:
            hit_record = obj.hit(ray, Interval(ray_t.min, closest_t))
            if hit_record is not None:
                closest_hit = hit_record
                closest_t = hit_record.t

        return closest_hit

    def bounding_box(self) -> AABB:
        return self.bbox

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self):
        return iter(self.objects)
