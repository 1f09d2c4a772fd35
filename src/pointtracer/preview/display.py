"""Matplotlib-based preview display for rendered rasters.

Example:
    >>> from pointtracer.image.raster import Raster
    >>> from pointtracer.preview.display import show_preview
    >>> show_preview(Raster.from_scene(scene, 400, 300))
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from pointtracer.image.raster import Raster


def show_preview(
    raster: Raster,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display a raster in a Matplotlib figure.

    Pixels are shown unscaled with the top-left pixel in the upper-left
    corner, matching the buffer layout.

    Args:
        raster: The image to display.
        title: Custom title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    if title is None:
        title = f"Render Preview - {raster.width}x{raster.height}"

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(raster.to_uint8(), interpolation="nearest")
    ax.set_title(title)
    ax.set_axis_off()

    fig.tight_layout()
    plt.show(block=block)


def show_comparison(
    image_a: Raster,
    image_b: Raster,
    *,
    labels: tuple[str, str] = ("A", "B"),
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 6),
    block: bool = True,
) -> float:
    """Display two rasters side by side with an amplified difference view.

    Useful for checking a filtered or re-rendered image against a reference.

    Returns:
        RMSE between the two images, on channels scaled to [0, 1].

    Raises:
        ValueError: If the raster sizes differ.
    """
    import matplotlib.pyplot as plt

    from pointtracer.preview.export import compute_rmse

    rmse = compute_rmse(image_a, image_b)
    diff = np.abs(image_a.to_rgb_array() - image_b.to_rgb_array())

    panels = [
        (image_a.to_uint8(), labels[0]),
        (image_b.to_uint8(), labels[1]),
        (np.clip(diff * diff_scale, 0.0, 1.0), f"Difference x{diff_scale:g} (RMSE {rmse:.6f})"),
    ]

    fig, axes = plt.subplots(1, len(panels), figsize=figsize)
    for ax, (pixels, label) in zip(axes, panels):
        ax.imshow(pixels, interpolation="nearest")
        ax.set_title(label)
        ax.set_axis_off()

    fig.tight_layout()
    plt.show(block=block)

    return rmse
