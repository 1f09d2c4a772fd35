"""Image module: the raster container consuming the renderer's output.

Components:
    raster: Packed RGB raster with bounds-checked access and PNG export
    filters: Square convolution kernels (average, edge detection, sharpen)

Neither module touches Taichi; they only rely on the buffer contract of
Scene.render(): width * height packed 0xRRGGBB integers, row-major.
"""

from .filters import AVERAGE, EDGE_DETECTION, IDENTITY, SHARPEN, Filter
from .raster import Raster, pack_rgb, pack_rgb_array, unpack_rgb, unpack_rgb_array

__all__ = [
    "Raster",
    "pack_rgb",
    "unpack_rgb",
    "pack_rgb_array",
    "unpack_rgb_array",
    "Filter",
    "AVERAGE",
    "EDGE_DETECTION",
    "SHARPEN",
    "IDENTITY",
]
