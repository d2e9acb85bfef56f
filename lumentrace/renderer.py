"""
Renderer module - drives the camera and integrator over the whole image.

Implements:
- Monte Carlo pixel estimation (averaged jittered samples)
- Multi-threaded rendering over disjoint row bands
- Per-row random streams for reproducible images
- PPM pixel stream and Pillow image output
"""

from __future__ import annotations
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, TextIO, Tuple

import numpy as np

from .vec3 import Color
from .camera import Camera
from .shapes import Hittable
from .integrator import ray_color
from .errors import ConfigurationError, RenderError


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    aspect_ratio: float = 16.0 / 9.0
    image_width: int = 400
    samples_per_pixel: int = 100
    max_depth: int = 50
    background: Optional[Color] = None  # None = sky gradient
    num_threads: int = 0  # 0 = auto-detect
    seed: Optional[int] = None

    def __post_init__(self):
        if self.image_width <= 0:
            raise ConfigurationError(f"image_width must be positive, got {self.image_width}")
        if self.aspect_ratio <= 0:
            raise ConfigurationError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if self.samples_per_pixel <= 0:
            raise ConfigurationError(
                f"samples_per_pixel must be positive, got {self.samples_per_pixel}"
            )
        if self.max_depth < 0:
            raise ConfigurationError(f"max_depth must not be negative, got {self.max_depth}")
        if self.num_threads < 0:
            raise ConfigurationError(f"num_threads must not be negative, got {self.num_threads}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 1

    @property
    def image_height(self) -> int:
        return max(1, int(self.image_width / self.aspect_ratio))


class RenderState(Enum):
    CONFIGURED = "configured"
    RENDERING = "rendering"
    DONE = "done"


def partition_rows(height: int, workers: int) -> List[Tuple[int, int]]:
    """Split rows [0, height) into one contiguous band per worker.

    Every band but the last has height // workers rows; the last band
    absorbs the remainder, so the bands cover each row exactly once.

    Returns:
        List of (start, end) row ranges, end exclusive
    """
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")

    section_height = height // workers
    bands = []
    for t in range(workers):
        start = t * section_height
        end = height if t == workers - 1 else start + section_height
        bands.append((start, end))
    return bands


class Renderer:
    """Multi-threaded Monte Carlo renderer.

    A renderer performs a single render pass; create a new one for each
    image.
    """

    def __init__(self, settings: Optional[RenderSettings] = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self.state = RenderState.CONFIGURED
        self.rows_completed = 0
        self._progress_lock = threading.Lock()
        self._progress_callback: Optional[Callable[[int, int], None]] = None

    def set_progress_callback(self, callback: Callable[[int, int], None]) -> None:
        """Set a callback receiving (rows_completed, total_rows).

        Calls are serialized; the callback never runs concurrently with itself.
        """
        self._progress_callback = callback

    def render(self, scene: Hittable, camera: Camera) -> np.ndarray:
        """Render the scene and return the averaged linear image.

        Args:
            scene: The scene to render (any Hittable)
            camera: The camera to render from

        Returns:
            Linear color image as numpy array of shape (height, width, 3)
        """
        if self.state is not RenderState.CONFIGURED:
            raise RenderError("A Renderer performs exactly one render pass")
        self.state = RenderState.RENDERING

        width = self.settings.image_width
        height = self.settings.image_height
        camera.initialize(width, height)

        image = np.zeros((height, width, 3), dtype=np.float64)
        row_seeds = np.random.SeedSequence(self.settings.seed).spawn(height)
        self.rows_completed = 0

        def render_band(band: Tuple[int, int]) -> None:
            start, end = band
            for j in range(start, end):
                rng = np.random.default_rng(row_seeds[j])
                self._render_row(j, image, scene, camera, rng)
                self._row_done(height)

        bands = partition_rows(height, self.settings.num_threads)
        if len(bands) > 1:
            with ThreadPoolExecutor(max_workers=len(bands)) as executor:
                # list() joins every worker and re-raises the first failure
                list(executor.map(render_band, bands))
        else:
            render_band(bands[0])

        self.state = RenderState.DONE
        return image

    def _render_row(
        self,
        j: int,
        image: np.ndarray,
        scene: Hittable,
        camera: Camera,
        rng: np.random.Generator
    ) -> None:
        """Estimate every pixel of row j into the image buffer."""
        samples = self.settings.samples_per_pixel
        max_depth = self.settings.max_depth
        background = self.settings.background
        pixel_samples_scale = 1.0 / samples

        for i in range(self.settings.image_width):
            pixel_color = Color(0, 0, 0)
            for _ in range(samples):
                ray = camera.get_ray(i, j, rng)
                pixel_color = pixel_color + ray_color(ray, max_depth, scene, background, rng)
            image[j, i] = (pixel_color * pixel_samples_scale).to_array()

    def _row_done(self, total_rows: int) -> None:
        with self._progress_lock:
            self.rows_completed += 1
            if self._progress_callback:
                self._progress_callback(self.rows_completed, total_rows)

    @staticmethod
    def to_ldr(image: np.ndarray) -> np.ndarray:
        """Convert a linear image to 8-bit with square-root gamma.

        Each channel is gamma corrected, clamped to [0, 0.999] and scaled
        by 256, so 1.0 maps to 255.

        Args:
            image: Linear image array (float64)

        Returns:
            Image as uint8 array
        """
        corrected = np.sqrt(np.clip(image, 0, None))
        return (256 * np.clip(corrected, 0.0, 0.999)).astype(np.uint8)

    @classmethod
    def write_ppm(cls, image: np.ndarray, stream: TextIO) -> None:
        """Write the image as a plain-text (P3) PPM, top row first."""
        height, width = image.shape[:2]
        ldr = cls.to_ldr(image)

        stream.write(f"P3\n{width} {height}\n255\n")
        for row in ldr:
            for r, g, b in row:
                stream.write(f"{r} {g} {b}\n")

    def save_image(self, image: np.ndarray, filename: str) -> None:
        """Save image to file.

        ``.ppm`` files are written as a plain pixel stream; any other
        extension goes through Pillow.
        """
        if filename.lower().endswith('.ppm'):
            with open(filename, 'w') as f:
                self.write_ppm(image, f)
            return

        from PIL import Image as PILImage

        PILImage.fromarray(self.to_ldr(image), 'RGB').save(filename)
