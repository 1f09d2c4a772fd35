"""Scene container: construction API, render entry point and serialization.

A Scene owns an ordered list of SceneObjects, a list of lights and the
TracerConfig used to render it. Objects and lights are append-only while
the scene is being built. During a render the scene is frozen: the render
reads a snapshot uploaded into the Taichi tables, and any attempt to mutate
the scene meanwhile raises SceneLockedError.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pointtracer.scene.manager import Scene
    >>> from pointtracer.scene.objects import Material, PointLight, SphereShape
    >>> scene = Scene()
    >>> scene.add_shape(
    ...     SphereShape(radius=5.0, center=(0.0, 0.0, 30.0)),
    ...     Material(diffuse=(0.25, 0.75, 0.4), specular=0.5),
    ... )
    >>> scene.add_light(PointLight(position=(0.0, 2.0, -4.0), brightness=0.8))
    >>> pixels = scene.render(80, 60)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import numpy.typing as npt

from pointtracer.core.config import TracerConfig, apply_config
from pointtracer.scene.intersection import (
    MAX_LIGHTS,
    MAX_OBJECTS,
    add_plane,
    add_point_light,
    add_sphere,
    clear_scene,
)
from pointtracer.scene.objects import (
    Light,
    Material,
    PlaneShape,
    PointLight,
    SceneObject,
    Shape,
    SphereShape,
    light_from_dict,
    scene_object_from_dict,
)

logger = logging.getLogger(__name__)


class SceneLockedError(RuntimeError):
    """Raised when a scene is modified while a render is in flight."""


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        objects: List of object configurations (shape + material).
        lights: List of light configurations.
        tracer: Tracer configuration as a dictionary.
    """

    objects: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)
    tracer: dict[str, Any] = field(default_factory=dict)


class Scene:
    """A ray tracing scene of objects, point lights and tracer settings.

    Example:
        >>> scene = Scene(TracerConfig(max_depth=5))
        >>> scene.add_shape(
        ...     PlaneShape.from_offset(-1.0, (0.0, -1.0, 0.0)),
        ...     Material(diffuse=(1.0, 0.0, 0.0), specular=0.2),
        ... )
    """

    def __init__(self, config: TracerConfig | None = None) -> None:
        """Initialize an empty scene.

        Args:
            config: Tracer configuration; defaults to TracerConfig().
        """
        self._config = config if config is not None else TracerConfig()
        self._objects: list[SceneObject] = []
        self._lights: list[Light] = []
        self._freeze_count = 0
        self._state_lock = threading.Lock()

    # =========================================================================
    # Construction
    # =========================================================================

    @property
    def config(self) -> TracerConfig:
        """The TracerConfig used when rendering this scene."""
        return self._config

    @config.setter
    def config(self, config: TracerConfig) -> None:
        """Replace the tracer configuration.

        Raises:
            SceneLockedError: If the scene is being rendered.
        """
        with self._state_lock:
            self._check_mutable()
            self._config = config

    @property
    def objects(self) -> tuple[SceneObject, ...]:
        """The scene objects in insertion order."""
        return tuple(self._objects)

    @property
    def lights(self) -> tuple[Light, ...]:
        """The scene lights in insertion order."""
        return tuple(self._lights)

    @property
    def is_frozen(self) -> bool:
        """Whether a render is currently reading this scene."""
        return self._freeze_count > 0

    def _check_mutable(self) -> None:
        if self.is_frozen:
            raise SceneLockedError("Scene cannot be modified while it is being rendered")

    def add_object(self, obj: SceneObject) -> int:
        """Append an object to the scene.

        Args:
            obj: The shape and material to add.

        Returns:
            The index of the added object.

        Raises:
            SceneLockedError: If the scene is being rendered.
            RuntimeError: If the maximum number of objects is exceeded.
            TypeError: If the shape is not a sphere or plane.
        """
        with self._state_lock:
            self._check_mutable()
            if not isinstance(obj.shape, (SphereShape, PlaneShape)):
                raise TypeError(f"Unsupported shape: {type(obj.shape).__name__}")
            if len(self._objects) >= MAX_OBJECTS:
                raise RuntimeError(f"Maximum number of objects ({MAX_OBJECTS}) exceeded")
            self._objects.append(obj)
            return len(self._objects) - 1

    def add_shape(self, shape: Shape, material: Material) -> int:
        """Append a shape with its material; see add_object."""
        return self.add_object(SceneObject(shape=shape, material=material))

    def add_light(self, light: Light) -> int:
        """Append a light to the scene.

        Returns:
            The index of the added light.

        Raises:
            SceneLockedError: If the scene is being rendered.
            RuntimeError: If the maximum number of lights is exceeded.
            TypeError: If the light is not a PointLight.
        """
        with self._state_lock:
            self._check_mutable()
            if not isinstance(light, PointLight):
                raise TypeError(f"Unsupported light: {type(light).__name__}")
            if len(self._lights) >= MAX_LIGHTS:
                raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
            self._lights.append(light)
            return len(self._lights) - 1

    def clear(self) -> None:
        """Remove all objects and lights.

        Raises:
            SceneLockedError: If the scene is being rendered.
        """
        with self._state_lock:
            self._check_mutable()
            self._objects.clear()
            self._lights.clear()

    # =========================================================================
    # Rendering
    # =========================================================================

    @contextmanager
    def frozen(self) -> Iterator[Scene]:
        """Context manager that forbids modification while active."""
        with self._state_lock:
            self._freeze_count += 1
        try:
            yield self
        finally:
            with self._state_lock:
                self._freeze_count -= 1

    def upload(self) -> None:
        """Copy the scene and its configuration into the Taichi tables."""
        apply_config(self.config)
        clear_scene()

        for obj in self._objects:
            shape = obj.shape
            material = obj.material
            if isinstance(shape, SphereShape):
                add_sphere(shape.center, shape.radius, material.diffuse, material.specular)
            else:
                add_plane(shape.origin, shape.normal, material.diffuse, material.specular)

        for light in self._lights:
            add_point_light(light.position, light.color, light.brightness)

        logger.debug(
            "Uploaded scene with %d objects and %d lights",
            len(self._objects),
            len(self._lights),
        )

    def render(self, width: int, height: int) -> npt.NDArray[np.int32]:
        """Render the scene into a packed RGB pixel buffer.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.

        Returns:
            An int32 array of length width * height, row-major from the
            top-left pixel, each entry a 0xRRGGBB color.

        Raises:
            ValueError: If the dimensions are invalid.
        """
        from pointtracer.core.renderer import render_scene

        return render_scene(self, width, height)

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        return SceneConfig(
            objects=[obj.to_dict() for obj in self._objects],
            lights=[light.to_dict() for light in self._lights],
            tracer=self.config.to_dict(),
        )

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene and loads the configuration.

        Raises:
            ValueError: If the configuration contains unknown types.
        """
        objects = [scene_object_from_dict(data) for data in config.objects]
        lights = [light_from_dict(data) for data in config.lights]
        tracer = TracerConfig.from_dict(config.tracer) if config.tracer else TracerConfig()

        self.clear()
        self.config = tracer
        for obj in objects:
            self.add_object(obj)
        for light in lights:
            self.add_light(light)

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {
            "objects": config.objects,
            "lights": config.lights,
            "tracer": config.tracer,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Scene:
        """Create a scene from a dictionary.

        Args:
            data: Dictionary with 'objects', 'lights' and optional 'tracer' keys.
        """
        scene = cls()
        scene.from_config(
            SceneConfig(
                objects=data.get("objects", []),
                lights=data.get("lights", []),
                tracer=data.get("tracer", {}),
            )
        )
        return scene

    def __repr__(self) -> str:
        return f"Scene(objects={len(self._objects)}, lights={len(self._lights)})"
