"""Geometry module for shape primitives.

This module provides the closed set of geometric primitives and their
intersection algorithms:

Components:
    sphere: Sphere primitive with ray-sphere intersection, plus the Collision
        record shared by all shapes
    plane: Infinite plane primitive with one-sided ray-plane intersection

All intersection routines are implemented as Taichi functions (@ti.func)
so they can be called from the parallel render kernel. They follow the
pattern:
    collision = hit_shape(ray, shape, epsilon)
    normal = shape_normal(shape, point)
"""

from .plane import PLANE_EPSILON, Plane, hit_plane, make_plane, plane_normal
from .sphere import (
    SPHERE_EPSILON,
    Collision,
    Sphere,
    hit_sphere,
    make_sphere,
    miss,
    sphere_normal,
)

__all__ = [
    "Collision",
    "miss",
    "Sphere",
    "hit_sphere",
    "make_sphere",
    "sphere_normal",
    "SPHERE_EPSILON",
    "Plane",
    "hit_plane",
    "make_plane",
    "plane_normal",
    "PLANE_EPSILON",
]
