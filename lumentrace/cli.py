"""
Command-line entry point.

Renders one of the built-in scenes and writes it as a PPM stream on stdout
or to an image file. Progress goes to stderr.
"""

from __future__ import annotations
import argparse
import os
import platform
import sys
import time
from pathlib import Path
from typing import Optional, Sequence, Tuple

import numpy as np
from PIL import Image as PILImage

from .vec3 import Vec3, Color, Point3
from .camera import Camera
from .shapes import Sphere, HittableList
from .materials import Lambertian, Metal, Dielectric, DiffuseLight
from .bvh import build_bvh
from .renderer import Renderer, RenderSettings
from .errors import ConfigurationError


def create_spheres_scene() -> Tuple[HittableList, Camera]:
    """Ground plane with a diffuse, a glass and a metal sphere."""
    world = HittableList()

    world.add(Sphere(Point3(0, -100.5, -1), 100, Lambertian(Color(0.8, 0.8, 0.0))))
    world.add(Sphere(Point3(0, 0, -1.2), 0.5, Lambertian(Color(0.1, 0.2, 0.5))))
    world.add(Sphere(Point3(-1, 0, -1), 0.5, Dielectric(1.5)))
    # Air bubble inside the glass sphere makes it hollow
    world.add(Sphere(Point3(-1, 0, -1), 0.4, Dielectric(1.0 / 1.5)))
    world.add(Sphere(Point3(1, 0, -1), 0.5, Metal(Color(0.8, 0.6, 0.2), 1.0)))

    camera = Camera(
        lookfrom=Point3(-2, 2, 1),
        lookat=Point3(0, 0, -1),
        vup=Vec3(0, 1, 0),
        vfov=20,
        defocus_angle=10.0,
        focus_dist=3.4
    )
    return world, camera


def create_motion_scene(seed: Optional[int] = None) -> Tuple[HittableList, Camera]:
    """A grid of small spheres, the diffuse ones bouncing upward during the shutter."""
    rng = np.random.default_rng(seed)
    world = HittableList()

    world.add(Sphere(Point3(0, -1000, 0), 1000, Lambertian(Color(0.5, 0.5, 0.5))))

    for a in range(-5, 5):
        for b in range(-5, 5):
            choose_mat = rng.random()
            center = Point3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())
            if (center - Point3(4, 0.2, 0)).length() <= 0.9:
                continue

            if choose_mat < 0.8:
                albedo = Color.random(rng=rng) * Color.random(rng=rng)
                center1 = center + Vec3(0, rng.uniform(0, 0.5), 0)
                world.add(Sphere(center, 0.2, Lambertian(albedo), center1=center1))
            elif choose_mat < 0.95:
                albedo = Color.random(0.5, 1, rng)
                world.add(Sphere(center, 0.2, Metal(albedo, rng.uniform(0, 0.5))))
            else:
                world.add(Sphere(center, 0.2, Dielectric(1.5)))

    world.add(Sphere(Point3(0, 1, 0), 1.0, Dielectric(1.5)))
    world.add(Sphere(Point3(-4, 1, 0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4, 1, 0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    camera = Camera(
        lookfrom=Point3(13, 2, 3),
        lookat=Point3(0, 0, 0),
        vup=Vec3(0, 1, 0),
        vfov=20,
        defocus_angle=0.6,
        focus_dist=10.0
    )
    return world, camera


def create_lights_scene() -> Tuple[HittableList, Camera]:
    """Diffuse spheres lit only by emitters, meant for a black background."""
    world = HittableList()

    world.add(Sphere(Point3(0, -1000, 0), 1000, Lambertian(Color(0.5, 0.5, 0.5))))
    world.add(Sphere(Point3(0, 2, 0), 2.0, Lambertian(Color(0.8, 0.3, 0.2))))
    world.add(Sphere(Point3(4, 1, -2), 1.0, Metal(Color(0.8, 0.8, 0.9), 0.1)))
    world.add(Sphere(Point3(0, 7, 0), 2.0, DiffuseLight(Color(1, 1, 1), 4.0)))
    world.add(Sphere(Point3(-4, 1, 3), 0.5, DiffuseLight(Color(1.0, 0.6, 0.2), 6.0)))

    camera = Camera(
        lookfrom=Point3(26, 3, 6),
        lookat=Point3(0, 2, 0),
        vup=Vec3(0, 1, 0),
        vfov=20,
        focus_dist=26.0
    )
    return world, camera


SCENES = {
    'spheres': lambda seed: create_spheres_scene(),
    'motion': create_motion_scene,
    'lights': lambda seed: create_lights_scene(),
}

# Scenes without a sky; anything not listed uses the gradient
SCENE_BACKGROUNDS = {
    'lights': Color(0, 0, 0),
}


def check_output(output: str) -> None:
    """Reject an output target the renderer could not write.

    Accepts "-" (PPM on stdout), a .ppm file, or any extension Pillow can save.

    Raises:
        ConfigurationError: If the extension is missing or unsupported
    """
    if output == '-':
        return

    suffix = Path(output).suffix.lower()
    if suffix == '.ppm':
        return

    image_format = PILImage.registered_extensions().get(suffix)
    if image_format is None or image_format not in PILImage.SAVE:
        raise ConfigurationError(
            f"cannot write output {output!r}: unsupported file extension {suffix!r}"
        )


def get_platform_info() -> dict:
    """Describe the host, for choosing a thread count."""
    return {
        'system': platform.system(),
        'machine': platform.machine(),
        'python_version': platform.python_version(),
        'cpu_count': os.cpu_count(),
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='lumentrace',
        description='LumenTrace - a multi-threaded Python ray tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene spheres > image.ppm
  python main.py --scene motion --width 800 --samples 200 --output motion.png
  python main.py --scene lights --samples 500 --output lights.png
        '''
    )

    parser.add_argument('--width', type=int, default=400, help='Image width (default: 400)')
    parser.add_argument('--aspect', type=float, default=16.0 / 9.0,
                        help='Aspect ratio width/height (default: 16/9)')
    parser.add_argument('--samples', type=int, default=100, help='Samples per pixel (default: 100)')
    parser.add_argument('--depth', type=int, default=50, help='Max ray depth (default: 50)')
    parser.add_argument('--threads', type=int, default=0, help='Number of threads (0=auto)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for a reproducible image')
    parser.add_argument('--scene', type=str, default='spheres', choices=sorted(SCENES),
                        help='Scene to render (default: spheres)')
    parser.add_argument('--background', type=float, nargs=3, default=None, metavar=('R', 'G', 'B'),
                        help='Constant background color (default: sky gradient, black for lights)')
    parser.add_argument('--output', type=str, default='-',
                        help='Output file; "-" writes PPM to stdout (default: -)')
    parser.add_argument('--info', action='store_true', help='Show platform info and exit')
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if args.info:
        info = get_platform_info()
        print("LumenTrace Platform Info:")
        print(f"  System: {info['system']}")
        print(f"  Machine: {info['machine']}")
        print(f"  Python: {info['python_version']}")
        print(f"  CPU Cores: {info['cpu_count']}")
        return 0

    if args.background is not None:
        background = Color(*args.background)
    else:
        background = SCENE_BACKGROUNDS.get(args.scene)

    try:
        settings = RenderSettings(
            aspect_ratio=args.aspect,
            image_width=args.width,
            samples_per_pixel=args.samples,
            max_depth=args.depth,
            num_threads=args.threads,
            seed=args.seed,
            background=background
        )
        check_output(args.output)
    except ConfigurationError as e:
        print(f"lumentrace: error: {e}", file=sys.stderr)
        return 2

    world, camera = SCENES[args.scene](args.seed)
    print(f"Scene '{args.scene}': {len(world)} objects, "
          f"{settings.image_width}x{settings.image_height}, "
          f"{settings.samples_per_pixel} spp, {settings.num_threads} threads",
          file=sys.stderr)

    renderer = Renderer(settings)

    def progress_callback(completed: int, total: int) -> None:
        print(f"\rProgress: {completed} / {total} ({100 * completed / total:.1f} %)",
              end='', file=sys.stderr, flush=True)

    renderer.set_progress_callback(progress_callback)

    start_time = time.time()
    image = renderer.render(build_bvh(world), camera)
    elapsed = time.time() - start_time
    print(f"\rDone in {elapsed:.2f}s.                    ", file=sys.stderr)

    if args.output == '-':
        renderer.write_ppm(image, sys.stdout)
    else:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        renderer.save_image(image, str(output_path))
        print(f"Saved to: {output_path}", file=sys.stderr)

    return 0
