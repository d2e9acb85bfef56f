"""
Camera module for generating primary rays.

Supports:
- Perspective projection with configurable vertical field of view
- Arbitrary positioning via look-at
- Depth of field (defocus disk)
- Motion blur (random sample time per ray)
- Anti-aliasing (jittered sub-pixel samples)
"""

from __future__ import annotations
import math
from enum import Enum
from typing import Optional

import numpy as np

from .vec3 import Vec3, Point3
from .ray import Ray
from .errors import RenderError


class CameraState(Enum):
    UNINITIALIZED = "uninitialized"
    CONFIGURED = "configured"


class Camera:
    """A thin-lens perspective camera.

    The camera is positioned at construction but only knows its viewport
    once ``initialize`` is called with the image resolution.
    """

    def __init__(
        self,
        lookfrom: Point3 = Point3(0, 0, 0),
        lookat: Point3 = Point3(0, 0, -1),
        vup: Vec3 = Vec3(0, 1, 0),
        vfov: float = 90.0,
        defocus_angle: float = 0.0,
        focus_dist: float = 10.0
    ):
        """Create a camera.

        Args:
            lookfrom: Camera position in world space
            lookat: Point the camera is looking at
            vup: World up vector (usually (0, 1, 0))
            vfov: Vertical field of view in degrees
            defocus_angle: Cone angle in degrees of rays through each pixel
                (0 = pinhole, everything in focus)
            focus_dist: Distance from lookfrom to the plane of perfect focus
        """
        self.lookfrom = lookfrom
        self.lookat = lookat
        self.vup = vup
        self.vfov = vfov
        self.defocus_angle = defocus_angle
        self.focus_dist = focus_dist

        self.state = CameraState.UNINITIALIZED
        self.image_width = 0
        self.image_height = 0

    def initialize(self, image_width: int, image_height: int) -> None:
        """Derive the viewport and lens geometry for the given resolution."""
        self.image_width = image_width
        self.image_height = image_height
        self.center = self.lookfrom

        theta = math.radians(self.vfov)
        h = math.tan(theta / 2)
        viewport_height = 2.0 * h * self.focus_dist
        viewport_width = viewport_height * (image_width / image_height)

        # Orthonormal camera basis
        self.w = (self.lookfrom - self.lookat).normalize()  # Points backward
        self.u = self.vup.cross(self.w).normalize()         # Points right
        self.v = self.w.cross(self.u)                       # Points up

        # Image rows run downward, so the vertical edge is -v
        viewport_u = self.u * viewport_width
        viewport_v = -self.v * viewport_height

        self.pixel_delta_u = viewport_u / image_width
        self.pixel_delta_v = viewport_v / image_height

        viewport_upper_left = (
            self.center
            - self.w * self.focus_dist
            - viewport_u / 2
            - viewport_v / 2
        )
        self.pixel00_loc = viewport_upper_left + (self.pixel_delta_u + self.pixel_delta_v) * 0.5

        self.defocus_radius = self.focus_dist * math.tan(math.radians(self.defocus_angle / 2))
        self.defocus_disk_u = self.u * self.defocus_radius
        self.defocus_disk_v = self.v * self.defocus_radius

        self.state = CameraState.CONFIGURED

    def get_ray(self, i: int, j: int, rng: Optional[np.random.Generator] = None) -> Ray:
        """Generate a sample ray through pixel (i, j).

        The ray passes through a random point of the pixel's square,
        starts on the defocus disk (or the camera center when the lens is
        a pinhole), and carries a random time in [0, 1).

        Args:
            i: Column, 0 at the left
            j: Row, 0 at the top
            rng: Random stream of the calling worker
        """
        if self.state is not CameraState.CONFIGURED:
            raise RenderError("Camera.get_ray() called before initialize()")

        source = rng if rng is not None else np.random

        offset_x, offset_y = source.random(2) - 0.5
        pixel_sample = (
            self.pixel00_loc
            + self.pixel_delta_u * (i + offset_x)
            + self.pixel_delta_v * (j + offset_y)
        )

        if self.defocus_angle <= 0:
            ray_origin = self.center
        else:
            ray_origin = self.defocus_disk_sample(rng)

        ray_time = float(source.random())

        return Ray(ray_origin, pixel_sample - ray_origin, ray_time)

    def defocus_disk_sample(self, rng: Optional[np.random.Generator] = None) -> Point3:
        """Return a random point on the camera's defocus disk."""
        p = Vec3.random_in_unit_disk(rng)
        return self.center + self.defocus_disk_u * p.x + self.defocus_disk_v * p.y

    def __repr__(self) -> str:
        return f"Camera(lookfrom={self.lookfrom}, lookat={self.lookat}, vfov={self.vfov})"
