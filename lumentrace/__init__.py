"""
LumenTrace - A Python Ray Tracer

A multi-threaded Monte Carlo ray tracer with support for:
- Spheres with linear motion (motion blur)
- Depth of field via a thin-lens camera
- Diffuse, metal, glass and emissive materials
- Bounding volume hierarchy acceleration
- PPM and PNG output
"""

__version__ = "0.1.0"

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .bounds import Interval, AABB
from .shapes import Hittable, HitRecord, Sphere, HittableList
from .bvh import BVHNode, build_bvh
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric, DiffuseLight
from .integrator import ray_color, background_color, sky_color
from .camera import Camera, CameraState
from .renderer import Renderer, RenderSettings, RenderState, partition_rows
from .errors import ConfigurationError, RenderError
