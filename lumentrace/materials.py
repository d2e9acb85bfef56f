"""
Materials: how surfaces scatter and emit light.

Implements:
- Lambertian diffuse
- Metal (specular reflection with fuzz)
- Dielectric (glass, water - with refraction)
- DiffuseLight (emitter)
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
import math

import numpy as np

from .vec3 import Vec3, Color
from .ray import Ray

if TYPE_CHECKING:
    from .shapes import HitRecord


@dataclass
class ScatterResult:
    """Result of a material scatter operation."""
    scattered_ray: Ray
    attenuation: Color


def _random_double(rng: Optional[np.random.Generator]) -> float:
    if rng is None:
        return float(np.random.random())
    return float(rng.random())


class Material(ABC):
    """Abstract base class for materials."""

    @abstractmethod
    def scatter(self, ray_in: Ray, rec: HitRecord,
                rng: Optional[np.random.Generator] = None) -> Optional[ScatterResult]:
        """Compute the scattered ray and attenuation.

        Args:
            ray_in: The incoming ray
            rec: The intersection being shaded
            rng: Random stream of the calling worker

        Returns:
            ScatterResult if the ray scatters, None if it is absorbed
        """

    def emitted(self, u: float, v: float, point: Vec3) -> Color:
        """Return emitted light color. Default is no emission."""
        return Color(0, 0, 0)


class Lambertian(Material):
    """Diffuse material with Lambertian (ideal matte) scattering."""

    def __init__(self, albedo: Color):
        self.albedo = albedo

    def scatter(self, ray_in, rec, rng=None):
        scatter_direction = rec.normal + Vec3.random_unit_vector(rng)

        # Catch degenerate scatter direction
        if scatter_direction.near_zero():
            scatter_direction = rec.normal

        return ScatterResult(
            scattered_ray=Ray(rec.point, scatter_direction, ray_in.time),
            attenuation=self.albedo
        )


class Metal(Material):
    """Metallic material with specular reflection."""

    def __init__(self, albedo: Color, fuzz: float = 0.0):
        """Create a metal material.

        Args:
            albedo: The reflection color
            fuzz: Radius of the reflection perturbation (0 = mirror, at most 1)
        """
        self.albedo = albedo
        self.fuzz = min(fuzz, 1.0)

    def scatter(self, ray_in, rec, rng=None):
        reflected = ray_in.direction.reflect(rec.normal).normalize()
        if self.fuzz > 0:
            reflected = reflected + Vec3.random_unit_vector(rng) * self.fuzz

        # Fuzz can push the ray below the surface; absorb it then
        if reflected.dot(rec.normal) <= 0:
            return None

        return ScatterResult(
            scattered_ray=Ray(rec.point, reflected, ray_in.time),
            attenuation=self.albedo
        )


class Dielectric(Material):
    """Dielectric (glass-like) material with refraction."""

    def __init__(self, refraction_index: float = 1.5):
        """Create a dielectric material.

        Args:
            refraction_index: Index relative to the enclosing medium
                (1.5 = glass in air, 1/1.33 = air bubble in water)
        """
        self.refraction_index = refraction_index

    def scatter(self, ray_in, rec, rng=None):
        ri = 1.0 / self.refraction_index if rec.front_face else self.refraction_index

        unit_direction = ray_in.direction.normalize()
        cos_theta = min(-unit_direction.dot(rec.normal), 1.0)
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))

        cannot_refract = ri * sin_theta > 1.0

        if cannot_refract or self._reflectance(cos_theta, ri) > _random_double(rng):
            direction = unit_direction.reflect(rec.normal)
        else:
            direction = unit_direction.refract(rec.normal, ri)

        return ScatterResult(
            scattered_ray=Ray(rec.point, direction, ray_in.time),
            attenuation=Color(1, 1, 1)
        )

    @staticmethod
    def _reflectance(cosine: float, ref_idx: float) -> float:
        """Schlick's approximation for reflectance."""
        r0 = (1 - ref_idx) / (1 + ref_idx)
        r0 = r0 * r0
        return r0 + (1 - r0) * pow(1 - cosine, 5)


class DiffuseLight(Material):
    """Light-emitting material. Never scatters."""

    def __init__(self, color: Color, intensity: float = 1.0):
        self.color = color
        self.intensity = intensity

    def scatter(self, ray_in, rec, rng=None):
        return None

    def emitted(self, u: float, v: float, point: Vec3) -> Color:
        return self.color * self.intensity
