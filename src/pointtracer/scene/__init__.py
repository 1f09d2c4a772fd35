"""Scene module for scene construction and ray-scene queries.

Components:
    objects: Immutable host-side descriptions (shapes, materials, lights)
    intersection: Taichi object/light tables with nearest-hit and
        shadow-occlusion queries
    manager: The Scene container, render entry point and serialization

Scene data is organized for parallel access:
    - A single ordered object table (Structure-of-Arrays), tagged by ShapeType
    - A light table tagged by LightType
    - Both uploaded from the Scene right before a render

Only the pure-Python descriptions are imported here; intersection and
manager allocate Taichi fields and must be imported after ti.init():
    from pointtracer.scene.manager import Scene
"""

from .objects import (
    Light,
    LightType,
    Material,
    PlaneShape,
    PointLight,
    SceneObject,
    Shape,
    ShapeType,
    SphereShape,
    light_from_dict,
    scene_object_from_dict,
    shape_from_dict,
)

__all__ = [
    "Light",
    "LightType",
    "Material",
    "PlaneShape",
    "PointLight",
    "SceneObject",
    "Shape",
    "ShapeType",
    "SphereShape",
    "light_from_dict",
    "scene_object_from_dict",
    "shape_from_dict",
]
