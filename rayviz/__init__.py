"""Shading core of an interactive ray/path tracing visualizer."""

from rayviz.camera import Camera
from rayviz.hit import HitRecord
from rayviz.ray import Ray
from rayviz.renderer import Raytracer, RayPath, RenderMode, SegmentType
from rayviz.scene import Scene
from rayviz.surfaces.cube import Cube
from rayviz.surfaces.infinite_plane import InfinitePlane
from rayviz.surfaces.sphere import Sphere
from rayviz.transform import Transform
from rayviz.typings.light import Light, LightType
from rayviz.typings.material import Material, MaterialType

__version__ = "0.1.0"

__all__ = [
    "Camera",
    "Cube",
    "HitRecord",
    "InfinitePlane",
    "Light",
    "LightType",
    "Material",
    "MaterialType",
    "Ray",
    "RayPath",
    "Raytracer",
    "RenderMode",
    "Scene",
    "SegmentType",
    "Sphere",
    "Transform",
]
