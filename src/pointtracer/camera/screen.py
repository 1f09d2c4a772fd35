"""Fixed pinhole camera mapping pixels to primary rays.

The camera sits at the configured eye (default (0, 0, -1)) and looks toward
+z through an image plane at z = 0. Pixel (x, y) is mapped as follows:

    screen_pos   = (x, height - y)            # y grows downward in the image
    centered     = screen_pos - (width / 2, height / 2)
    screen_point = centered / width           # both axes divide by width
    direction    = normalize((screen_point, 0) - eye)

Dividing both axes by the width keeps the horizontal field of view fixed and
lets the vertical extent follow the aspect ratio.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pointtracer.camera.screen import get_camera_ray
    >>> @ti.kernel
    ... def render():
    ...     ray = get_camera_ray(0, 0, 64, 48)  # Ray through the top-left pixel
"""

import taichi as ti
import taichi.math as tm

from pointtracer.core.config import get_eye
from pointtracer.core.ray import Ray, normalize

vec2 = tm.vec2
vec3 = tm.vec3


@ti.func
def screen_point(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32) -> vec2:
    """Map a pixel to its point on the z = 0 image plane.

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The (x, y) world coordinates of the pixel on the image plane.
    """
    screen_pos = vec2(ti.cast(x, ti.f32), ti.cast(height - y, ti.f32))
    screen_size = vec2(ti.cast(width, ti.f32), ti.cast(height, ti.f32))
    centered = screen_pos - screen_size * 0.5
    return centered / ti.cast(width, ti.f32)


@ti.func
def get_camera_ray(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray through a pixel.

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A ray starting at the eye with a unit-length direction.
    """
    eye = get_eye()
    point = screen_point(x, y, width, height)
    direction = normalize(vec3(point.x, point.y, 0.0) - eye)
    return Ray(origin=eye, direction=direction)


_ray_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_ray_direction = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _camera_ray_kernel(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32):
    ray = get_camera_ray(x, y, width, height)
    _ray_origin[None] = ray.origin
    _ray_direction[None] = ray.direction


def get_camera_ray_host(
    x: int, y: int, width: int, height: int
) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
    """Compute the primary ray for a pixel from Python scope.

    Returns:
        Tuple of (origin, direction).
    """
    _camera_ray_kernel(x, y, width, height)
    o = _ray_origin[None]
    d = _ray_direction[None]
    return (
        (float(o[0]), float(o[1]), float(o[2])),
        (float(d[0]), float(d[1]), float(d[2])),
    )
