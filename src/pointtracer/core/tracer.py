"""Recursive Whitted-style shading for the point-sampled ray tracer.

The shading model is a fixed approximation:

    color = ambient * diffuse
          + diffuse * sum(brightness * max(0, dot(to_light, normal)))
          + sum(specular * trace(reflected_ray, depth + 1))

where both sums run over the point lights whose shadow ray is unoccluded.
The reflection term is accumulated once per unoccluded light, so a surface
that no light reaches shows no reflection either. Rays that miss the scene,
or that reach the maximum depth, return the background color.

Taichi functions cannot call themselves, so trace() unrolls the recursion
into a bounded loop. Every unoccluded light re-traces the same reflected
ray, which makes the recursive result

    local(depth) + specular * lit_count * trace(reflected, depth + 1)

and the loop accumulates exactly that with a running weight. No extra
parallel work is created per reflection; each pixel traces sequentially.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pointtracer.core.tracer import trace_ray
    >>> color = trace_ray((0.0, 0.0, -1.0), (0.0, 0.0, 1.0))
"""

import taichi as ti
import taichi.math as tm

from pointtracer.core.config import (
    get_ambient,
    get_background,
    get_max_depth,
    get_ray_epsilon,
)
from pointtracer.core.ray import Ray, normalize, ray_at, reflect
from pointtracer.scene.intersection import (
    POINT_LIGHT_KIND,
    is_occluded,
    light_brightness,
    light_kinds,
    light_positions,
    nearest_hit,
    num_lights,
    object_diffuse,
    object_normal,
    object_specular,
)

# Type alias for 3D vectors
vec3 = tm.vec3
vec2 = tm.vec2


@ti.func
def direct_lighting(hit_point: vec3, normal: vec3) -> vec2:
    """Accumulate the diffuse strength of every unoccluded light.

    Args:
        hit_point: The surface point being shaded.
        normal: The surface normal at hit_point.

    Returns:
        vec2(diffuse_strength, lit_count) where lit_count is the number of
        lights whose shadow ray reached them unobstructed.
    """
    diffuse_strength = 0.0
    lit_count = 0.0
    bias = get_ray_epsilon()

    for i in range(num_lights[None]):
        if light_kinds[i] == POINT_LIGHT_KIND:
            to_light = normalize(light_positions[i] - hit_point)
            shadow_ray = Ray(origin=hit_point + to_light * bias, direction=to_light)
            if is_occluded(shadow_ray) == 0:
                diffuse_strength += light_brightness[i] * ti.max(0.0, tm.dot(to_light, normal))
                lit_count += 1.0

    return vec2(diffuse_strength, lit_count)


@ti.func
def trace(ray: Ray, depth: ti.i32) -> vec3:
    """Compute the (unclamped) color seen along a ray.

    Args:
        ray: The ray to trace (unit-length direction).
        depth: The reflection depth of this ray; camera rays start at 0.

    Returns:
        The RGB color; may exceed 1 and is clamped by the renderer.
    """
    background = get_background()
    ambient = get_ambient()
    max_depth = get_max_depth()
    bias = get_ray_epsilon()

    color = vec3(0.0, 0.0, 0.0)
    weight = 1.0
    current = ray

    # Active flag for the reflection chain (no break inside ti.func loops)
    active = 1

    for _ in range(depth, max_depth):
        if active == 1:
            rec = nearest_hit(current)
            if rec.hit == 0:
                color += background * weight
                active = 0
            else:
                idx = rec.object_index
                hit_point = ray_at(current, rec.time)
                normal = object_normal(idx, hit_point)
                diffuse = object_diffuse[idx]

                lighting = direct_lighting(hit_point, normal)
                diffuse_strength = lighting.x
                lit_count = lighting.y
                color += (ambient * diffuse + diffuse * diffuse_strength) * weight

                if lit_count == 0.0:
                    active = 0
                else:
                    weight *= object_specular[idx] * lit_count
                    reflected = normalize(reflect(current.direction, normal))
                    current = Ray(origin=hit_point + reflected * bias, direction=reflected)

    # Chain reached max_depth
    if active == 1:
        color += background * weight

    return color


# =============================================================================
# Host-side helpers
# =============================================================================


@ti.kernel
def _trace_single(
    ox: ti.f32, oy: ti.f32, oz: ti.f32,
    dx: ti.f32, dy: ti.f32, dz: ti.f32,
    depth: ti.i32,
) -> vec3:
    """Trace one ray; used for testing and debugging the shading."""
    direction = normalize(vec3(dx, dy, dz))
    return trace(Ray(origin=vec3(ox, oy, oz), direction=direction), depth)


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
) -> tuple[float, float, float]:
    """Trace a single ray against the uploaded scene.

    The direction is normalized before tracing. Uses whatever scene and
    configuration are currently stored in the Taichi fields.

    Args:
        origin: Ray origin.
        direction: Ray direction (need not be unit length, must be non-zero).
        depth: Starting reflection depth.

    Returns:
        The unclamped RGB color.
    """
    color = _trace_single(
        origin[0], origin[1], origin[2],
        direction[0], direction[1], direction[2],
        depth,
    )
    return float(color[0]), float(color[1]), float(color[2])
