"""Tracer configuration and its GPU-side mirror.

The tracer's numeric constants (recursion bound, background and ambient
colors, intersection epsilons, secondary-ray bias and the camera eye) are
grouped in a TracerConfig owned by each Scene. Before a render the Scene
writes its configuration into the 0-d Taichi fields below with
apply_config(), which the tracer, scene queries and camera read.

Example:
    >>> from pointtracer.core.config import TracerConfig
    >>> config = TracerConfig(max_depth=5)
    >>> config.background
    (0.25, 0.25, 1.0)
"""

from dataclasses import asdict, dataclass
from typing import Any

import taichi as ti

from pointtracer.geometry.plane import PLANE_EPSILON
from pointtracer.geometry.sphere import SPHERE_EPSILON

# =============================================================================
# Defaults
# =============================================================================

# Maximum length of a reflection chain
MAX_DEPTH = 20

# Color returned for rays that escape the scene or exhaust the depth bound
BACKGROUND_COLOR = (0.25, 0.25, 1.0)

# Ambient term, multiplied by the material diffuse color
AMBIENT_COLOR = (0.1, 0.1, 0.1)

# Offset applied to shadow and reflection ray origins
RAY_EPSILON = 1e-4

# Camera eye; the image plane is z = 0
EYE_POSITION = (0.0, 0.0, -1.0)


@dataclass(frozen=True)
class TracerConfig:
    """Constants used by the tracer for one scene.

    Attributes:
        max_depth: Recursion bound; rays at this depth return the background.
        background: Background color (RGB).
        ambient: Ambient light color (RGB).
        sphere_epsilon: Discriminant and hit-time threshold for spheres.
        plane_epsilon: Parallel-ray threshold for planes.
        ray_epsilon: Origin bias for shadow and reflection rays.
        eye: Camera eye position in world space.
    """

    max_depth: int = MAX_DEPTH
    background: tuple[float, float, float] = BACKGROUND_COLOR
    ambient: tuple[float, float, float] = AMBIENT_COLOR
    sphere_epsilon: float = SPHERE_EPSILON
    plane_epsilon: float = PLANE_EPSILON
    ray_epsilon: float = RAY_EPSILON
    eye: tuple[float, float, float] = EYE_POSITION

    def to_dict(self) -> dict[str, Any]:
        """Export the configuration as plain lists and numbers."""
        data = asdict(self)
        for key in ("background", "ambient", "eye"):
            data[key] = list(data[key])
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TracerConfig":
        """Create a configuration from a dictionary, filling in defaults.

        Raises:
            ValueError: If the dictionary holds unknown keys.
        """
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown tracer config keys: {sorted(unknown)}")

        kwargs = dict(data)
        for key in ("background", "ambient", "eye"):
            if key in kwargs:
                kwargs[key] = tuple(float(v) for v in kwargs[key])
        return cls(**kwargs)


# =============================================================================
# Taichi Fields for Tracer State (GPU-accessible)
# =============================================================================

_max_depth = ti.field(dtype=ti.i32, shape=())
_background = ti.Vector.field(3, dtype=ti.f32, shape=())
_ambient = ti.Vector.field(3, dtype=ti.f32, shape=())
_sphere_epsilon = ti.field(dtype=ti.f32, shape=())
_plane_epsilon = ti.field(dtype=ti.f32, shape=())
_ray_epsilon = ti.field(dtype=ti.f32, shape=())
_eye = ti.Vector.field(3, dtype=ti.f32, shape=())


def apply_config(config: TracerConfig) -> None:
    """Write a configuration into the Taichi fields read by the kernels.

    Args:
        config: The configuration to activate.

    Raises:
        ValueError: If max_depth is negative.
    """
    if config.max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {config.max_depth}")

    _max_depth[None] = config.max_depth
    _background[None] = list(config.background)
    _ambient[None] = list(config.ambient)
    _sphere_epsilon[None] = config.sphere_epsilon
    _plane_epsilon[None] = config.plane_epsilon
    _ray_epsilon[None] = config.ray_epsilon
    _eye[None] = list(config.eye)


def get_active_config() -> TracerConfig:
    """Read the configuration currently stored in the Taichi fields."""
    background = _background[None]
    ambient = _ambient[None]
    eye = _eye[None]
    return TracerConfig(
        max_depth=int(_max_depth[None]),
        background=(float(background[0]), float(background[1]), float(background[2])),
        ambient=(float(ambient[0]), float(ambient[1]), float(ambient[2])),
        sphere_epsilon=float(_sphere_epsilon[None]),
        plane_epsilon=float(_plane_epsilon[None]),
        ray_epsilon=float(_ray_epsilon[None]),
        eye=(float(eye[0]), float(eye[1]), float(eye[2])),
    )


@ti.func
def get_max_depth() -> ti.i32:
    return _max_depth[None]


@ti.func
def get_background():
    return _background[None]


@ti.func
def get_ambient():
    return _ambient[None]


@ti.func
def get_sphere_epsilon() -> ti.f32:
    return _sphere_epsilon[None]


@ti.func
def get_plane_epsilon() -> ti.f32:
    return _plane_epsilon[None]


@ti.func
def get_ray_epsilon() -> ti.f32:
    return _ray_epsilon[None]


@ti.func
def get_eye():
    return _eye[None]


# Default configuration until a Scene applies its own
apply_config(TracerConfig())
