from __future__ import annotations

import math
from typing import Iterator, List, Union

import numpy as np

from rayviz.hit import HitRecord
from rayviz.ray import Ray
from rayviz.surfaces.cube import Cube
from rayviz.surfaces.infinite_plane import InfinitePlane
from rayviz.surfaces.sphere import Sphere
from rayviz.typings.light import Light
from rayviz.typings.material import Material, MaterialType
from rayviz.utils.vector_operations import vec3

Surface = Union[Sphere, Cube, InfinitePlane]


class Scene:
    """Flat collection of primitives and lights, searched by brute force."""

    def __init__(
        self,
        spheres: List[Sphere] | None = None,
        cubes: List[Cube] | None = None,
        planes: List[InfinitePlane] | None = None,
        lights: List[Light] | None = None,
    ) -> None:
        self.spheres: List[Sphere] = list(spheres or [])
        self.cubes: List[Cube] = list(cubes or [])
        self.planes: List[InfinitePlane] = list(planes or [])
        self.lights: List[Light] = list(lights or [])

    def add(self, obj: Union[Surface, Light]) -> None:
        if isinstance(obj, Sphere):
            self.spheres.append(obj)
        elif isinstance(obj, Cube):
            self.cubes.append(obj)
        elif isinstance(obj, InfinitePlane):
            self.planes.append(obj)
        elif isinstance(obj, Light):
            self.lights.append(obj)
        else:
            raise ValueError("Unknown scene object: {!r}".format(obj))

    def primitives(self) -> Iterator[Surface]:
        """All surfaces in intersection order: spheres, cubes, then planes."""
        yield from self.spheres
        yield from self.cubes
        yield from self.planes

    def intersect(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        """Closest hit along ray with t in [t_min, t_max]."""
        closest_hit: HitRecord | None = None
        closest_t = t_max
        for surface in self.primitives():
            hit = surface.intersect(ray, t_min, closest_t)
            if hit is None:
                continue
            closest_t = hit.t
            closest_hit = hit
        return closest_hit

    @classmethod
    def default(cls) -> "Scene":
        """Demo scene: a ring of pedestals with one sphere of each material, three-point lighting."""
        scene = cls()
        scene.planes.append(
            InfinitePlane(
                vec3(0.0, -0.5, 0.0),
                vec3(0.0, 1.0, 0.0),
                Material(vec3(0.5, 0.5, 0.5), specular=0.0, shininess=0.0, roughness=1.0),
            )
        )

        sphere_materials = [
            Material(vec3(0.8, 0.1, 0.1), 0.5, 32.0, 0.0, 0.1, 1.5, MaterialType.LAMBERTIAN), # red
            Material(vec3(0.6, 0.6, 0.6), 0.7, 64.0, 0.8, 0.1, 1.5, MaterialType.METAL), # polished grey
            Material(vec3(1.0, 1.0, 1.0), 1.0, 100.0, 0.1, 0.0, 1.52, MaterialType.DIELECTRIC), # glass
            Material(vec3(0.1, 0.1, 0.8), 0.5, 32.0, 0.4, 0.4, 1.5, MaterialType.METAL), # rough blue
            Material(vec3(0.8, 0.8, 0.1), 0.5, 32.0, 0.0, 0.1, 1.5, MaterialType.LAMBERTIAN), # yellow
        ]
        ring_radius = 3.0
        for i, sphere_material in enumerate(sphere_materials):
            angle = (i / len(sphere_materials)) * 2.0 * math.pi
            x = math.cos(angle) * ring_radius
            z = math.sin(angle) * ring_radius
            scene.cubes.append(
                Cube(
                    vec3(x - 0.5, -0.5, z - 0.5),
                    vec3(x + 0.5, 0.5, z + 0.5),
                    Material(vec3(0.1, 0.8, 0.8), specular=0.0, shininess=0.0, roughness=1.0),
                )
            )
            scene.spheres.append(Sphere(vec3(x, 1.0, z), 0.5, sphere_material))

        # key, fill and rim lights
        scene.lights.append(Light.point(vec3(5.0, 6.0, 4.0), vec3(1.0, 0.98, 0.95), 0.8))
        scene.lights.append(Light.point(vec3(-4.0, 3.0, 3.0), vec3(0.95, 0.98, 1.0), 0.4))
        scene.lights.append(Light.point(vec3(0.0, 7.0, -5.0), vec3(1.0, 1.0, 1.0), 0.5))
        return scene


def sky_color(direction: np.ndarray) -> np.ndarray:
    """Vertical white-to-blue gradient returned for rays that leave the scene."""
    unit_direction = direction / np.linalg.norm(direction)
    t = 0.5 * (float(unit_direction[1]) + 1.0)
    return (1.0 - t) * vec3(1.0, 1.0, 1.0) + t * vec3(0.5, 0.7, 1.0)
