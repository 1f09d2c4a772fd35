"""Sphere primitive with ray-sphere intersection.

This module provides the Sphere and Collision dataclasses and the
ray-sphere intersection function used by the scene queries.

The intersection solves the quadratic

    t^2 + b*t + c = 0

with b = 2 * dot(direction, oc), c = dot(oc, oc) - radius^2 and
oc = origin - center (the direction is unit length, so the quadratic
coefficient is 1). Near-tangent rays, whose discriminant falls below the
epsilon, are reported as misses, and so are rays whose nearer root lies at
or behind the ray origin.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pointtracer.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, 30), radius=5.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from pointtracer.core.ray import Ray

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Rejects near-tangent hits and hits at the origin of secondary rays
SPHERE_EPSILON = 1e-4


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class Collision:
    """Result of a ray-shape intersection test.

    Attributes:
        hit: 1 if the ray hit the shape, 0 for a miss.
        time: The ray parameter t of the hit, such that
            origin + direction * t is the intersection point.
            Only valid if hit == 1.
    """

    hit: ti.i32
    time: ti.f32


@ti.func
def miss() -> Collision:
    return Collision(hit=0, time=0.0)


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, epsilon: ti.f32) -> Collision:
    """Test for ray-sphere intersection.

    Both roots of the quadratic are computed and the smaller one is kept, so
    the near intersection is preferred. A ray starting inside the sphere has
    a negative near root and therefore misses.

    Args:
        ray: The ray to test (unit-length direction).
        sphere: The sphere to test intersection against.
        epsilon: Threshold for both the discriminant and the hit time.

    Returns:
        A Collision; check its hit field to determine if intersection occurred.
    """
    oc = ray.origin - sphere.center
    b = 2.0 * tm.dot(ray.direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - 4.0 * c

    result = miss()

    if discriminant >= epsilon:
        sqrt_d = ti.sqrt(discriminant)
        t1 = (-b + sqrt_d) / 2.0
        t2 = (-b - sqrt_d) / 2.0
        t = ti.min(t1, t2)

        if t >= epsilon:
            result = Collision(hit=1, time=t)

    return result


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal of the sphere at a surface point."""
    return tm.normalize(point - sphere.center)


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)
