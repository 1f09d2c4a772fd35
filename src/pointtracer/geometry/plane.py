"""Infinite plane primitive with a one-sided ray-plane intersection.

A plane is stored as a point on the plane (origin) and a unit normal.

Ray-plane intersection:
    denom = dot(direction, normal)
    t = dot(origin - ray.origin, normal) / denom

Only rays travelling along the stored normal (denom > epsilon) can hit the
plane. The test is deliberately not symmetric: a plane is visible only from
the side its normal points away from. Rays parallel to the plane miss.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pointtracer.geometry.plane import Plane, hit_plane
    >>> # Floor at y = -1 seen from above: the normal points down
    >>> floor = Plane(origin=ti.math.vec3(0, -1, 0), normal=ti.math.vec3(0, -1, 0))
"""

import taichi as ti
import taichi.math as tm

from pointtracer.core.ray import Ray

from .sphere import Collision, miss

vec3 = tm.vec3

# Rays with |dot(direction, normal)| at or below this are treated as parallel
PLANE_EPSILON = 1e-6


@ti.dataclass
class Plane:
    """An infinite plane.

    Attributes:
        origin: Any point on the plane (vec3).
        normal: The unit normal of the plane (vec3).
    """

    origin: vec3
    normal: vec3


@ti.func
def hit_plane(ray: Ray, plane: Plane, epsilon: ti.f32) -> Collision:
    """Test for ray-plane intersection.

    Args:
        ray: The ray to test (unit-length direction).
        plane: The plane to test intersection against.
        epsilon: Minimum value of dot(direction, normal) for a hit.

    Returns:
        A Collision with time t >= 0 on a hit, or a miss.
    """
    denom = tm.dot(ray.direction, plane.normal)

    result = miss()

    if denom > epsilon:
        t = tm.dot(plane.origin - ray.origin, plane.normal) / denom
        if t >= 0.0:
            result = Collision(hit=1, time=t)

    return result


@ti.func
def plane_normal(plane: Plane, point: vec3) -> vec3:
    """Normal of the plane; constant across the surface."""
    return plane.normal


@ti.func
def make_plane(origin: vec3, normal: vec3) -> Plane:
    return Plane(origin=origin, normal=normal)
