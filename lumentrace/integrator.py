"""
Light transport integrator.

Follows a camera ray through the scene, collecting emitted light and
attenuating by each scattering event, until the ray escapes, is absorbed,
or the bounce budget runs out.
"""

from __future__ import annotations
import math
from typing import Optional

import numpy as np

from .vec3 import Color
from .ray import Ray
from .bounds import Interval
from .shapes import Hittable

# Lower bound on accepted hit distances; suppresses self-intersection
# of rays leaving a surface (shadow acne).
T_MIN = 0.001

SKY_HORIZON = Color(1.0, 1.0, 1.0)
SKY_ZENITH = Color(0.5, 0.7, 1.0)


def sky_color(ray: Ray) -> Color:
    """Vertical white-to-blue gradient based on the ray's y direction."""
    unit_direction = ray.direction.normalize()
    t = 0.5 * (unit_direction.y + 1.0)
    return SKY_HORIZON * (1.0 - t) + SKY_ZENITH * t


def background_color(ray: Ray, background: Optional[Color] = None) -> Color:
    """Radiance arriving along a ray that leaves the scene.

    Args:
        ray: The escaping ray
        background: Constant background, or None for the sky gradient
    """
    if background is None:
        return sky_color(ray)
    return background


def ray_color(
    ray: Ray,
    depth: int,
    scene: Hittable,
    background: Optional[Color] = None,
    rng: Optional[np.random.Generator] = None
) -> Color:
    """Estimate the radiance carried back along a ray.

    Equivalent to the recursion
        color(r, d) = emitted + attenuation * color(scattered, d - 1)
    with color(r, 0) = black, unrolled into a loop over bounces.

    Args:
        ray: The ray to trace
        depth: Maximum number of ray segments to follow
        scene: The scene to intersect
        background: Constant background, or None for the sky gradient
        rng: Random stream handed to the materials

    Returns:
        The estimated color for this ray
    """
    result = Color(0, 0, 0)
    throughput = Color(1, 1, 1)
    ray_t = Interval(T_MIN, math.inf)

    for _ in range(depth):
        rec = scene.hit(ray, ray_t)
        if rec is None:
            return result + throughput * background_color(ray, background)

        material = rec.material
        if material is None:
            # Shapes without a material absorb everything
            return result

        result = result + throughput * material.emitted(rec.u, rec.v, rec.point)

        scatter = material.scatter(ray, rec, rng)
        if scatter is None:
            return result

        throughput = throughput * scatter.attenuation
        ray = scatter.scattered_ray

    # Bounce budget exhausted: no further contribution
    return result
