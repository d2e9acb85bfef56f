"""Tests for geometric shapes."""

import pytest
import math
import numpy as np
from lumentrace.vec3 import Vec3, Point3, Color
from lumentrace.ray import Ray
from lumentrace.bounds import Interval
from lumentrace.shapes import Sphere, HittableList, HitRecord
from lumentrace.materials import Lambertian


def forward():
    return Interval(0.001, math.inf)


class TestSphere:
    """Test Sphere class."""

    def test_creation(self):
        center = Point3(0, 0, 0)
        sphere = Sphere(center, 1.0)
        assert sphere.center_at(0.0) == center
        assert sphere.radius == 1.0
        assert not sphere.is_moving

    def test_negative_radius_clamped(self):
        sphere = Sphere(Point3(0, 0, 0), -2.0)
        assert sphere.radius == 0.0

    def test_zero_radius_never_hit(self):
        sphere = Sphere(Point3(0, 0, 0), -1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        assert sphere.hit(ray, forward()) is None

    def test_hit_through_center(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit = sphere.hit(ray, forward())

        assert hit is not None
        assert abs(hit.t - 4.0) < 1e-6
        assert abs(hit.point.z - (-1.0)) < 1e-6

    def test_hit_unnormalized_direction(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 2))
        hit = sphere.hit(ray, forward())

        assert abs(hit.t - 2.0) < 1e-6
        assert abs(hit.normal.length() - 1.0) < 1e-10

    def test_hit_front_face(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        hit = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), forward())

        assert hit.front_face is True
        assert hit.normal.z < 0

    def test_hit_from_inside(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        hit = sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), forward())

        assert hit is not None
        assert hit.front_face is False
        assert abs(hit.t - 1.0) < 1e-6
        # Flipped to face the ray origin
        assert hit.normal.z < 0

    def test_miss(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        assert sphere.hit(Ray(Point3(0, 5, -5), Vec3(0, 0, 1)), forward()) is None

    def test_behind_ray(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        assert sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), forward()) is None

    def test_outside_pointing_away_never_hits(self):
        rng = np.random.default_rng(11)
        sphere = Sphere(Point3(1, 2, 3), 1.5)
        for _ in range(200):
            outward = Vec3.random_unit_vector(rng)
            origin = Point3(1, 2, 3) + outward * (1.5 + 0.1 + rng.random() * 5)
            direction = outward + Vec3.random_in_unit_sphere(rng) * 0.3
            assert sphere.hit(Ray(origin, direction), forward()) is None

    def test_roots_symmetric_about_center(self):
        center = Point3(0, 0, -4)
        sphere = Sphere(center, 1.0)
        origin = Point3(1, 1, 0)
        direction = (center - origin) * 0.5

        near = sphere.hit(Ray(origin, direction), forward())
        far = sphere.hit(Ray(origin, direction), Interval(near.t + 1e-6, math.inf))

        a = direction.length_squared()
        h = direction.dot(center - origin)
        assert abs((near.t + far.t) - 2 * h / a) < 1e-9
        midpoint = (near.point + far.point) * 0.5
        assert midpoint == center

    def test_second_root_when_first_rejected(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit = sphere.hit(ray, Interval(4.5, math.inf))

        assert abs(hit.t - 6.0) < 1e-6
        assert hit.front_face is False

    def test_both_roots_rejected(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        assert sphere.hit(ray, Interval(0.001, 3.0)) is None

    def test_interval_bounds_are_exclusive(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        assert sphere.hit(ray, Interval(0.001, 4.0)) is None

    def test_t_inside_interval_and_normal_faces_ray(self):
        rng = np.random.default_rng(5)
        sphere = Sphere(Point3(0, 0, -3), 1.0)
        for _ in range(200):
            origin = Vec3.random(-3, 3, rng)
            direction = Vec3.random(-1, 1, rng)
            ray_t = Interval(rng.random() * 2, 2 + rng.random() * 6)
            hit = sphere.hit(Ray(origin, direction), ray_t)
            if hit is None:
                continue
            assert ray_t.surrounds(hit.t)
            assert abs(hit.normal.length() - 1.0) < 1e-9
            assert hit.normal.dot(direction) <= 0

    def test_uv_at_poles_and_equator(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)

        top = sphere.hit(Ray(Point3(0, 5, 0), Vec3(0, -1, 0)), forward())
        assert abs(top.v - 1.0) < 1e-6

        bottom = sphere.hit(Ray(Point3(0, -5, 0), Vec3(0, 1, 0)), forward())
        assert abs(bottom.v) < 1e-6

        # Outward normal (1, 0, 0): u = (atan2(0, 1) + pi) / 2pi = 0.5
        side = sphere.hit(Ray(Point3(5, 0, 0), Vec3(-1, 0, 0)), forward())
        assert abs(side.u - 0.5) < 1e-6
        assert abs(side.v - 0.5) < 1e-6

    def test_uv_uses_outward_normal_from_inside(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        hit = sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 1, 0)), forward())
        # Outward normal at the hit is +y, even though the record normal is -y
        assert hit.normal.y < 0
        assert abs(hit.v - 1.0) < 1e-6

    def test_material_assigned(self):
        material = Lambertian(Color(1, 0, 0))
        sphere = Sphere(Point3(0, 0, 0), 1.0, material)
        hit = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), forward())
        assert hit.material is material

    def test_bounding_box_is_exact(self):
        sphere = Sphere(Point3(1, -2, 3), 0.5)
        bbox = sphere.bounding_box()
        assert bbox.x == Interval(0.5, 1.5)
        assert bbox.y == Interval(-2.5, -1.5)
        assert bbox.z == Interval(2.5, 3.5)


class TestHitRecord:
    """Test HitRecord face orientation."""

    def test_front_face(self):
        rec = HitRecord(point=Point3(0, 0, 0), normal=Vec3(0, 0, 0), t=1.0)
        rec.set_face_normal(Ray(Point3(0, 0, -1), Vec3(0, 0, 1)), Vec3(0, 0, -1))
        assert rec.front_face is True
        assert rec.normal == Vec3(0, 0, -1)

    def test_back_face(self):
        rec = HitRecord(point=Point3(0, 0, 0), normal=Vec3(0, 0, 0), t=1.0)
        rec.set_face_normal(Ray(Point3(0, 0, -1), Vec3(0, 0, 1)), Vec3(0, 0, 1))
        assert rec.front_face is False
        assert rec.normal == Vec3(0, 0, -1)


class TestHittableList:
    """Test HittableList class."""

    def test_empty_list(self):
        world = HittableList()
        assert len(world) == 0
        assert world.hit(Ray(Point3(0, 0, 0), Vec3(1, 0, 0)), forward()) is None

    def test_finds_closest(self):
        world = HittableList()
        world.add(Sphere(Point3(0, 0, -10), 1.0))
        world.add(Sphere(Point3(0, 0, -5), 1.0))
        world.add(Sphere(Point3(0, 0, -15), 1.0))

        hit = world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), forward())
        assert abs(hit.t - 4.0) < 1e-6

    def test_constructor_objects(self):
        spheres = [Sphere(Point3(0, 0, -5), 1.0), Sphere(Point3(3, 0, -5), 1.0)]
        world = HittableList(spheres)
        assert len(world) == 2
        assert list(world) == spheres

    def test_bounding_box_grows(self):
        world = HittableList()
        world.add(Sphere(Point3(0, 0, 0), 1.0))
        world.add(Sphere(Point3(5, 0, 0), 1.0))

        bbox = world.bounding_box()
        assert bbox.x == Interval(-1, 6)
        assert bbox.y == Interval(-1, 1)
