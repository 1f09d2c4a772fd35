"""Host-side descriptions of scene contents.

These immutable dataclasses are what callers build a Scene from. They are
plain Python values; the Scene uploads them into the Taichi object and
light tables (see intersection.py) right before rendering.

The shape and light sets are closed: ShapeType and LightType enumerate
every variant the render kernels know how to dispatch on.

Example:
    >>> from pointtracer.scene.objects import Material, SceneObject, SphereShape
    >>> ball = SceneObject(
    ...     shape=SphereShape(radius=5.0, center=(0.0, 0.0, 30.0)),
    ...     material=Material(diffuse=(0.25, 0.75, 0.4), specular=0.5),
    ... )
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Union

Vec3 = tuple[float, float, float]


class ShapeType(IntEnum):
    """Enumeration of supported shape types.

    Used by the scene queries to dispatch intersection and normal
    computations to the right primitive.
    """

    SPHERE = 0
    PLANE = 1


class LightType(IntEnum):
    """Enumeration of supported light types."""

    POINT = 0


def _vec3(values: Any) -> Vec3:
    return (float(values[0]), float(values[1]), float(values[2]))


@dataclass(frozen=True)
class SphereShape:
    """A sphere; radius must be positive (not checked)."""

    radius: float
    center: Vec3

    shape_type = ShapeType.SPHERE

    def to_dict(self) -> dict[str, Any]:
        return {"type": "sphere", "radius": self.radius, "center": list(self.center)}


@dataclass(frozen=True)
class PlaneShape:
    """An infinite plane through origin with a unit normal.

    The plane is only hit by rays travelling along its normal, so a floor seen
    from above is described with a downward normal.
    """

    origin: Vec3
    normal: Vec3

    shape_type = ShapeType.PLANE

    @classmethod
    def from_offset(cls, offset: float, normal: Vec3) -> "PlaneShape":
        """Create the plane dot(p, normal) = offset."""
        return cls(
            origin=(normal[0] * offset, normal[1] * offset, normal[2] * offset),
            normal=normal,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"type": "plane", "origin": list(self.origin), "normal": list(self.normal)}


Shape = Union[SphereShape, PlaneShape]


@dataclass(frozen=True)
class Material:
    """Surface appearance.

    Attributes:
        diffuse: The diffuse color (RGB, each component in [0, 1]).
        specular: Weight of the mirror reflection, typically in [0, 1].
    """

    diffuse: Vec3
    specular: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {"diffuse": list(self.diffuse), "specular": self.specular}


@dataclass(frozen=True)
class PointLight:
    """An omnidirectional light at a point.

    Attributes:
        position: Light position in world space.
        color: Light color. Carried along but not used by the shading.
        brightness: Scalar intensity of the diffuse contribution.
    """

    position: Vec3
    color: Vec3 = (1.0, 1.0, 1.0)
    brightness: float = 1.0

    light_type = LightType.POINT

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "point",
            "position": list(self.position),
            "color": list(self.color),
            "brightness": self.brightness,
        }


Light = PointLight


@dataclass(frozen=True)
class SceneObject:
    """A shape paired with its material."""

    shape: Shape
    material: Material

    def to_dict(self) -> dict[str, Any]:
        return {"shape": self.shape.to_dict(), "material": self.material.to_dict()}


def shape_from_dict(data: dict[str, Any]) -> Shape:
    """Build a shape from its dictionary form.

    Raises:
        ValueError: If the shape type is unknown.
    """
    shape_type = data.get("type", "").lower()
    if shape_type == "sphere":
        return SphereShape(
            radius=float(data.get("radius", 1.0)),
            center=_vec3(data.get("center", [0.0, 0.0, 0.0])),
        )
    if shape_type == "plane":
        if "offset" in data:
            return PlaneShape.from_offset(
                float(data["offset"]), _vec3(data.get("normal", [0.0, 1.0, 0.0]))
            )
        return PlaneShape(
            origin=_vec3(data.get("origin", [0.0, 0.0, 0.0])),
            normal=_vec3(data.get("normal", [0.0, 1.0, 0.0])),
        )
    raise ValueError(f"Unknown shape type: {shape_type}")


def light_from_dict(data: dict[str, Any]) -> Light:
    """Build a light from its dictionary form.

    Raises:
        ValueError: If the light type is unknown.
    """
    light_type = data.get("type", "point").lower()
    if light_type != "point":
        raise ValueError(f"Unknown light type: {light_type}")
    return PointLight(
        position=_vec3(data.get("position", [0.0, 0.0, 0.0])),
        color=_vec3(data.get("color", [1.0, 1.0, 1.0])),
        brightness=float(data.get("brightness", 1.0)),
    )


def scene_object_from_dict(data: dict[str, Any]) -> SceneObject:
    material = data.get("material", {})
    return SceneObject(
        shape=shape_from_dict(data.get("shape", {})),
        material=Material(
            diffuse=_vec3(material.get("diffuse", [0.5, 0.5, 0.5])),
            specular=float(material.get("specular", 0.0)),
        ),
    )
