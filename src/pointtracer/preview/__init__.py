"""Preview module for output and visualization.

Components:
    display: Matplotlib-based preview and side-by-side comparison
    export: PNG save/load and image comparison utilities

Example:
    >>> from pointtracer.image.raster import Raster
    >>> from pointtracer.preview import save_png, show_preview
    >>> pixels = scene.render(400, 300)
    >>> save_png(pixels, 400, 300, "output.png")
    >>> show_preview(Raster(400, 300, pixels))
"""

from pointtracer.preview.display import show_comparison, show_preview
from pointtracer.preview.export import (
    compute_rmse,
    load_png,
    save_filtered_pngs,
    save_png,
)

__all__ = [
    # Display functions
    "show_preview",
    "show_comparison",
    # Export functions
    "save_png",
    "save_filtered_pngs",
    "load_png",
    "compute_rmse",
]
