"""Image export utilities for rendered rasters.

This module provides functions for saving rendered images to files and
comparing renders.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from pointtracer.preview.export import save_png
    >>> pixels = scene.render(800, 600)
    >>> save_png(pixels, 800, 600, "output.png")
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from pointtracer.image.filters import Filter
from pointtracer.image.raster import Raster


def save_png(
    pixels: npt.ArrayLike,
    width: int,
    height: int,
    filepath: str | Path,
) -> Path:
    """Save a packed RGB pixel buffer as a PNG file.

    Args:
        pixels: Buffer of width * height packed 0xRRGGBB integers.
        width: Image width in pixels.
        height: Image height in pixels.
        filepath: Output file path (should end in .png).

    Returns:
        The path written.
    """
    return Raster(width, height, pixels).save(filepath)


def save_filtered_pngs(
    raster: Raster,
    output_dir: str | Path,
    filters: dict[str, tuple[Filter, int]],
) -> list[Path]:
    """Save one PNG per named filter chain.

    Args:
        raster: The source image.
        output_dir: Directory to write into.
        filters: Mapping of file stem to (filter, number of passes).

    Returns:
        The paths written, in mapping order.
    """
    directory = Path(output_dir)
    written = []
    for name, (kernel, times) in filters.items():
        written.append(raster.apply(kernel, times).save(directory / f"{name}.png"))
    return written


def load_png(filepath: str | Path) -> Raster:
    """Load an RGB image file into a raster."""
    with PILImage.open(filepath) as pil_image:
        rgb = np.asarray(pil_image.convert("RGB"), dtype=np.int32)
    height, width, _ = rgb.shape
    packed = (rgb[..., 0] << 16) | (rgb[..., 1] << 8) | rgb[..., 2]
    return Raster(width, height, packed)


def compute_rmse(image_a: Raster, image_b: Raster) -> float:
    """Compute root mean squared error between two rasters.

    The error is measured on channels scaled to [0, 1].

    Raises:
        ValueError: If raster sizes don't match.
    """
    if (image_a.width, image_a.height) != (image_b.width, image_b.height):
        raise ValueError(
            f"Raster sizes must match: {image_a.width}x{image_a.height} "
            f"vs {image_b.width}x{image_b.height}"
        )

    diff = image_a.to_rgb_array().astype(np.float64) - image_b.to_rgb_array().astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
