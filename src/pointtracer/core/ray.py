"""Ray data structure and vector utilities for the ray tracer.

This module provides the Ray dataclass and the small set of vector helpers
the tracer needs: dot products, normalization, mirror reflection and the
conversion of a color vector into a packed 24-bit RGB integer. All helpers
are Taichi functions so they can be called from inside render kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pointtracer.core.ray import Ray, ray_at, vec3
    >>> ray = Ray(origin=vec3(0.0, 0.0, -1.0), direction=vec3(0.0, 0.0, 1.0))
    >>> # Use ray_at(ray, t) within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

# Type aliases for vectors using Taichi's math module
vec3 = tm.vec3
vec2 = tm.vec2


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction of the ray (vec3). Must be unit length before
            the ray is handed to any intersection or shading routine.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + ray.direction * t.
    """
    return ray.origin + ray.direction * t


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from an origin and a (normalized) direction."""
    return Ray(origin=origin, direction=direction)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    return tm.dot(a, b)


@ti.func
def length(v: vec3) -> ti.f32:
    return tm.length(v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    The input must not be (near-)zero; no ray in the tracer ever produces
    a zero direction.
    """
    return v / tm.length(v)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident direction about a surface normal.

    Computes incident - normal * 2 * dot(incident, normal). The normal should
    be unit length for the result to keep the incident length.

    Args:
        incident: The incoming direction (pointing toward the surface).
        normal: The surface normal.

    Returns:
        The mirrored direction.
    """
    return incident - normal * (2.0 * tm.dot(incident, normal))


@ti.func
def clamp_color(color: vec3, lower: ti.f32, upper: ti.f32) -> vec3:
    """Clamp every channel of a color into [lower, upper]."""
    return tm.clamp(color, lower, upper)


@ti.func
def pack_rgb(color: vec3) -> ti.i32:
    """Convert a color in [0, 1] to a packed 24-bit RGB integer.

    Each channel is scaled by 255 and truncated; red ends up in the high byte:
    (r << 16) | (g << 8) | b. Callers clamp the color first.

    Args:
        color: The RGB color with channels in [0, 1].

    Returns:
        The packed integer color.
    """
    shifted = color * 255.0
    r = ti.cast(shifted.x, ti.i32)
    g = ti.cast(shifted.y, ti.i32)
    b = ti.cast(shifted.z, ti.i32)
    return (r << 16) | (g << 8) | b
