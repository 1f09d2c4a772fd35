"""Parallel renderer producing a packed RGB pixel buffer.

The render kernel's outermost loop runs over every pixel of the requested
image. Taichi executes that loop on its parallel worker pool, one
independent unit of work per pixel; each unit builds a camera ray, traces
it, clamps the color to [0, 1] and writes the packed 24-bit RGB value to
its own index x + y * width. The kernel launch followed by the copy back to
NumPy acts as the barrier: render_scene() only returns once every pixel has
been written.

The pixel buffer is preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT to
avoid kernel recompilation when the image size changes.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pointtracer.scene.manager import Scene
    >>> scene = Scene()
    >>> # ... add objects and lights ...
    >>> pixels = scene.render(80, 60)  # np.ndarray of 4800 packed colors
"""

import logging
import threading
import time
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
import taichi as ti

from pointtracer.camera.screen import get_camera_ray
from pointtracer.core.ray import clamp_color, pack_rgb
from pointtracer.core.tracer import trace

if TYPE_CHECKING:
    from pointtracer.scene.manager import Scene

logger = logging.getLogger(__name__)

# =============================================================================
# Render Target (Pixel Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048
MAX_PIXELS = MAX_IMAGE_WIDTH * MAX_IMAGE_HEIGHT

# Packed 0xRRGGBB colors, row-major with stride = width
_pixel_buffer = ti.field(dtype=ti.i32, shape=MAX_PIXELS)

# Taichi fields are process-wide; one render at a time may use them
_render_lock = threading.Lock()


def check_dimensions(width: int, height: int) -> None:
    """Validate requested image dimensions.

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )


@ti.kernel
def _render_kernel(width: ti.i32, height: ti.i32):
    """Shade every pixel; the outer loop is parallelized by Taichi."""
    for x, y in ti.ndrange(width, height):
        ray = get_camera_ray(x, y, width, height)
        color = clamp_color(trace(ray, 0), 0.0, 1.0)
        index = x + y * width
        if 0 <= index < MAX_PIXELS:
            _pixel_buffer[index] = pack_rgb(color)


def render_pixels(width: int, height: int) -> npt.NDArray[np.int32]:
    """Render the scene currently uploaded to the Taichi fields.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        An int32 array of length width * height holding packed RGB colors.

    Raises:
        ValueError: If the dimensions are invalid.
    """
    check_dimensions(width, height)
    _render_kernel(width, height)
    return _pixel_buffer.to_numpy()[: width * height].copy()


def render_scene(scene: "Scene", width: int, height: int) -> npt.NDArray[np.int32]:
    """Render a scene into a packed RGB pixel buffer.

    Uploads the scene snapshot and configuration, launches the parallel
    render kernel and waits for every pixel to complete. The scene is frozen
    for the duration of the call.

    Args:
        scene: The scene to render.
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Returns:
        An int32 array of length width * height; pixel (x, y) is at
        index x + y * width.

    Raises:
        ValueError: If the dimensions are invalid.
    """
    check_dimensions(width, height)

    with _render_lock, scene.frozen():
        scene.upload()
        start = time.perf_counter()
        pixels = render_pixels(width, height)
        elapsed = time.perf_counter() - start

    logger.info("Finished rendering scene in %.3f seconds.", elapsed)
    return pixels
