#!/usr/bin/env python3
"""Render the three-sphere demo scene.

This script builds the demo scene (three reflective spheres above a red
floor, lit by one point light), renders it and saves the result along with
a few filtered variants.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH         Image width in pixels (default: 800)
    --height HEIGHT       Image height in pixels (default: 600)
    --output-dir DIR      Directory for the PNG files (default: renders)
    --max-depth DEPTH     Maximum reflection depth (default: 20)
    --cpu-threads N       Worker threads for the CPU backend (default: all)
    --quiet               Only log warnings and errors

Example:
    python -m examples.render_spheres --width 400 --height 300 --max-depth 5
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_spheres")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the three-sphere demo scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=800,
        help="Image width in pixels (default: 800)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=600,
        help="Image height in pixels (default: 600)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="renders",
        help="Directory for the PNG files (default: renders)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=20,
        help="Maximum reflection depth (default: 20)",
    )
    parser.add_argument(
        "--cpu-threads",
        type=int,
        default=None,
        help="Worker threads for the CPU backend (default: all cores)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    return parser.parse_args(argv)


def build_demo_scene(max_depth: int = 20):
    """Create the demo scene: three spheres, a floor and one point light."""
    from pointtracer.core.config import TracerConfig
    from pointtracer.scene.manager import Scene
    from pointtracer.scene.objects import Material, PlaneShape, PointLight, SphereShape

    scene = Scene(TracerConfig(max_depth=max_depth))

    scene.add_shape(
        SphereShape(radius=5.0, center=(0.0, 0.0, 30.0)),
        Material(diffuse=(0.25, 0.75, 0.4), specular=0.5),
    )
    scene.add_shape(
        SphereShape(radius=3.0, center=(8.0, 0.0, 30.0)),
        Material(diffuse=(0.75, 0.4, 0.25), specular=0.5),
    )
    scene.add_shape(
        SphereShape(radius=3.0, center=(-8.0, 0.0, 30.0)),
        Material(diffuse=(0.25, 0.4, 0.75), specular=0.5),
    )
    # Floor at y = -6, just below the sphere bottoms (y = -5) instead of cutting
    # through them at y = -1. Planes are hit along their normal, so it points down.
    scene.add_shape(
        PlaneShape.from_offset(6.0, (0.0, -1.0, 0.0)),
        Material(diffuse=(1.0, 0.0, 0.0), specular=0.2),
    )
    scene.add_light(PointLight(position=(0.0, 2.0, -4.0), color=(1.0, 1.0, 1.0), brightness=0.8))

    return scene


def render_spheres(
    width: int = 800,
    height: int = 600,
    output_dir: str = "renders",
    max_depth: int = 20,
) -> list[Path]:
    """Render the demo scene and save the original and filtered images.

    Returns:
        Paths of the saved PNG files.
    """
    # Lazy imports to allow Taichi initialization first
    from pointtracer.image.filters import AVERAGE, EDGE_DETECTION, SHARPEN
    from pointtracer.image.raster import Raster
    from pointtracer.preview.export import save_filtered_pngs

    scene = build_demo_scene(max_depth)
    logger.info("Rendering %r at %dx%d", scene, width, height)

    raster = Raster.from_scene(scene, width, height)

    directory = Path(output_dir)
    paths = [raster.save(directory / "ray_tracing.png")]
    paths += save_filtered_pngs(
        raster,
        directory,
        {
            "average": (AVERAGE, 1),
            "sharpen": (SHARPEN, 5),
            "edge_detection": (EDGE_DETECTION, 1),
        },
    )

    for path in paths:
        logger.info("Saved to: %s", path.absolute())
    return paths


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if args.cpu_threads is not None:
        ti.init(arch=ti.cpu, cpu_max_num_threads=args.cpu_threads)
    else:
        ti.init(arch=ti.cpu)

    try:
        render_spheres(
            width=args.width,
            height=args.height,
            output_dir=args.output_dir,
            max_depth=args.max_depth,
        )
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        logger.error("Error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
