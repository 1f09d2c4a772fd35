"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure, vector utilities and packed RGB conversion
    config: Tracer configuration (depth bound, background, epsilons, eye)
    tracer: Recursive Whitted-style shading (ambient + diffuse + mirror)
    renderer: Parallel per-pixel dispatch into the packed pixel buffer

All compute-intensive operations use Taichi kernels for parallel execution.
"""

from .ray import (
    Ray,
    clamp_color,
    dot,
    length,
    make_ray,
    normalize,
    pack_rgb,
    ray_at,
    reflect,
    vec2,
    vec3,
)

# Note: config, tracer and renderer are NOT imported here because they
# allocate Taichi fields at import time. Import them directly, e.g.:
#   from pointtracer.core.renderer import render_scene

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec2",
    "vec3",
    "dot",
    "length",
    "normalize",
    "reflect",
    "clamp_color",
    "pack_rgb",
]
