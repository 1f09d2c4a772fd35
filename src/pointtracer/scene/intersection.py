"""Scene-level ray queries over the uploaded object and light tables.

The scene stores its objects in a single ordered table so that nearest-hit
ties resolve by insertion order regardless of shape type. Each row holds a
ShapeType tag plus the union of the sphere and plane parameters, and the
object's material. Lights live in a separate table tagged by LightType.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pointtracer.scene.intersection import add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere((0, 0, 30), 5.0, diffuse=(0.25, 0.75, 0.4), specular=0.5)
    >>> # Use nearest_hit / is_occluded within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from pointtracer.core.config import get_plane_epsilon, get_sphere_epsilon
from pointtracer.core.ray import Ray
from pointtracer.geometry.plane import Plane, hit_plane, plane_normal
from pointtracer.geometry.sphere import Collision, Sphere, hit_sphere, miss, sphere_normal
from pointtracer.scene.objects import LightType, ShapeType

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Table tags as plain ints for use inside kernels
SPHERE_KIND = int(ShapeType.SPHERE)
PLANE_KIND = int(ShapeType.PLANE)
POINT_LIGHT_KIND = int(LightType.POINT)


@ti.dataclass
class SceneCollision:
    """Record of a ray-scene intersection.

    Attributes:
        hit: 1 if any object was hit, 0 for a miss.
        time: Ray parameter of the nearest hit. Only valid if hit == 1.
        object_index: Row of the hit object in the object table.
            Only valid if hit == 1; -1 on a miss.
    """

    hit: ti.i32
    time: ti.f32
    object_index: ti.i32


# Maximum number of objects and lights supported in the scene
MAX_OBJECTS = 1024
MAX_LIGHTS = 64

# Object table: Structure of Arrays layout.
# For spheres, object_points holds the center and object_radii the radius.
# For planes, object_points holds the origin and object_normals the normal.
object_kinds = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_points = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
object_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
object_radii = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
object_diffuse = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
object_specular = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
num_objects = ti.field(dtype=ti.i32, shape=())

# Light table
light_kinds = ti.field(dtype=ti.i32, shape=MAX_LIGHTS)
light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_brightness = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all objects and lights from the tables.

    Resets the counts to zero. The field data is overwritten when new
    rows are added.
    """
    num_objects[None] = 0
    num_lights[None] = 0


def _next_object_index() -> int:
    idx = num_objects[None]
    if idx >= MAX_OBJECTS:
        raise RuntimeError(f"Maximum number of objects ({MAX_OBJECTS}) exceeded")
    return idx


def _set_material(idx: int, diffuse, specular: float) -> None:
    object_diffuse[idx] = [diffuse[0], diffuse[1], diffuse[2]]
    object_specular[idx] = specular


def add_sphere(center, radius: float, diffuse, specular: float = 0.0) -> int:
    """Append a sphere row to the object table.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (should be positive).
        diffuse: The diffuse color (RGB).
        specular: The reflection weight.

    Returns:
        The row index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of objects is exceeded.
    """
    idx = _next_object_index()
    object_kinds[idx] = SPHERE_KIND
    object_points[idx] = [center[0], center[1], center[2]]
    object_normals[idx] = [0.0, 0.0, 0.0]
    object_radii[idx] = radius
    _set_material(idx, diffuse, specular)
    num_objects[None] = idx + 1
    return idx


def add_plane(origin, normal, diffuse, specular: float = 0.0) -> int:
    """Append a plane row to the object table.

    Args:
        origin: A point on the plane.
        normal: The unit normal of the plane.
        diffuse: The diffuse color (RGB).
        specular: The reflection weight.

    Returns:
        The row index of the added plane.

    Raises:
        RuntimeError: If the maximum number of objects is exceeded.
    """
    idx = _next_object_index()
    object_kinds[idx] = PLANE_KIND
    object_points[idx] = [origin[0], origin[1], origin[2]]
    object_normals[idx] = [normal[0], normal[1], normal[2]]
    object_radii[idx] = 0.0
    _set_material(idx, diffuse, specular)
    num_objects[None] = idx + 1
    return idx


def add_point_light(position, color, brightness: float) -> int:
    """Append a point light to the light table.

    Returns:
        The row index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_kinds[idx] = POINT_LIGHT_KIND
    light_positions[idx] = [position[0], position[1], position[2]]
    light_colors[idx] = [color[0], color[1], color[2]]
    light_brightness[idx] = brightness
    num_lights[None] = idx + 1
    return idx


def get_object_count() -> int:
    """Get the number of objects in the table."""
    return int(num_objects[None])


def get_light_count() -> int:
    """Get the number of lights in the table."""
    return int(num_lights[None])


@ti.func
def object_collision(i: ti.i32, ray: Ray) -> Collision:
    """Intersect a ray with the i-th object's shape."""
    result = miss()
    kind = object_kinds[i]
    if kind == SPHERE_KIND:
        sphere = Sphere(center=object_points[i], radius=object_radii[i])
        result = hit_sphere(ray, sphere, get_sphere_epsilon())
    elif kind == PLANE_KIND:
        plane = Plane(origin=object_points[i], normal=object_normals[i])
        result = hit_plane(ray, plane, get_plane_epsilon())
    return result


@ti.func
def object_normal(i: ti.i32, point: vec3) -> vec3:
    """Surface normal of the i-th object's shape at a point."""
    normal = vec3(0.0, 0.0, 0.0)
    kind = object_kinds[i]
    if kind == SPHERE_KIND:
        sphere = Sphere(center=object_points[i], radius=object_radii[i])
        normal = sphere_normal(sphere, point)
    elif kind == PLANE_KIND:
        plane = Plane(origin=object_points[i], normal=object_normals[i])
        normal = plane_normal(plane, point)
    return normal


@ti.func
def _make_miss_record() -> SceneCollision:
    return SceneCollision(hit=0, time=0.0, object_index=-1)


@ti.func
def nearest_hit(ray: Ray) -> SceneCollision:
    """Find the nearest object hit by a ray.

    Scans every object in insertion order and keeps the hit with the
    smallest time. The comparison is strict, so on an exact tie the object
    added first wins.

    Args:
        ray: The ray to test (unit-length direction).

    Returns:
        A SceneCollision for the nearest hit, or a miss record.
    """
    result = _make_miss_record()

    for i in range(num_objects[None]):
        rec = object_collision(i, ray)
        if rec.hit == 1:
            if result.hit == 0 or rec.time < result.time:
                result = SceneCollision(hit=1, time=rec.time, object_index=i)

    return result


@ti.func
def is_occluded(ray: Ray) -> ti.i32:
    """Test if any object blocks a ray (shadow ray query).

    Hits beyond the light are not excluded: any object along the ray
    occludes it.

    Returns:
        1 if any object was hit, 0 otherwise.
    """
    hit_any = 0

    for i in range(num_objects[None]):
        if hit_any == 0:
            rec = object_collision(i, ray)
            if rec.hit == 1:
                hit_any = 1

    return hit_any
