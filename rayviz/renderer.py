"""
Pixel loop and light transport.

Both integrators (Whitted raytracing and next-event-estimation path tracing)
are expressed as a scatter function that decides, at one hit, how much light
leaves the surface toward the viewer and which single secondary ray (if any)
continues the path. trace_ray walks that chain iteratively, bounded by the
bounce budget, and reports every event to a visitor: RadianceAccumulator turns
the chain into a color, PathRecorder turns it into a RayPath for the debug view.
Because both visitors drive the same scatter functions with the same random
generator, recorded paths take exactly the branches the renderer takes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterator, List, Tuple

import numpy as np
from PIL import Image

from rayviz.camera import Camera
from rayviz.hit import HitRecord
from rayviz.ray import Ray
from rayviz.scene import Scene, sky_color
from rayviz.typings.light import Light
from rayviz.typings.material import MaterialType
from rayviz.utils.vector_operations import (
    color_to_uint8,
    is_near_zero,
    normalize_vector,
    random_unit_vector,
    reflect_vector,
    reflectance,
    refract_vector,
    vector_dot,
)

AMBIENT_FACTOR: float = 0.1
RAY_EPSILON: float = 1e-3 # minimum t for secondary and shadow rays (avoids self-intersection)
EXHAUSTED_RAY_EXTENT: float = 2.0
MISSED_RAY_EXTENT: float = 5.0
MIN_ROUGHNESS_EXPONENT: float = 0.01


class RenderMode(str, Enum):
    RAYTRACING = "raytracing"
    PATHTRACING = "pathtracing"


class SegmentType(str, Enum):
    PRIMARY = "primary"
    REFLECTION = "reflection"
    REFRACTION = "refraction"
    DIFFUSE = "diffuse"


@dataclass(slots=True)
class Scatter:
    """Outcome of shading one hit."""
    emitted: np.ndarray
    attenuation: np.ndarray | float = 1.0
    ray: Ray | None = None # None ends the path at this hit
    segment_type: SegmentType = SegmentType.DIFFUSE


@dataclass(slots=True)
class RayPath:
    points: List[np.ndarray]
    segment_types: List[SegmentType] = field(default_factory=list) # one per segment, len(points) - 1
    hit: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {
            "points": [[float(c) for c in point] for point in self.points],
            "segment_types": [segment_type.value for segment_type in self.segment_types],
            "hit": self.hit,
        }


ScatterFunction = Callable[[Ray, HitRecord, Scene, np.random.Generator, bool], Scatter]


# =========================
# Shared helpers
# =========================

def is_unoccluded(scene: Scene, point: np.ndarray, light_direction: np.ndarray, distance: float) -> bool:
    shadow_ray = Ray(origin=point, direction=light_direction)
    return scene.intersect(shadow_ray, RAY_EPSILON, distance) is None


def visible_lights(scene: Scene, hit: HitRecord) -> Iterator[Tuple[Light, np.ndarray]]:
    """Yield (light, unit direction to light) for every light that reaches the hit point."""
    for light in scene.lights:
        incidence = light.incident(hit.point)
        if incidence is None:
            continue
        light_direction, distance = incidence
        if is_unoccluded(scene, hit.point, light_direction, distance):
            yield light, light_direction


def dielectric_bounce(ray: Ray, hit: HitRecord, rng: np.random.Generator) -> Tuple[Ray, SegmentType]:
    """Pick reflection or transmission at a dielectric interface.

    Total internal reflection always reflects; otherwise Schlick's reflectance
    is the probability of reflecting.
    """
    unit_direction = normalize_vector(ray.direction)
    if vector_dot(unit_direction, hit.normal) < 0.0:
        normal, refraction_ratio = hit.normal, 1.0 / hit.material.ior
    else:
        normal, refraction_ratio = -hit.normal, hit.material.ior

    cos_theta = min(vector_dot(-unit_direction, normal), 1.0)
    sin_theta = float(np.sqrt(max(0.0, 1.0 - cos_theta * cos_theta)))
    cannot_refract = refraction_ratio * sin_theta > 1.0

    if cannot_refract or reflectance(cos_theta, refraction_ratio) > rng.random():
        direction = reflect_vector(unit_direction, normal)
        segment_type = SegmentType.REFLECTION
    else:
        direction = refract_vector(unit_direction, normal, refraction_ratio)
        segment_type = SegmentType.REFRACTION
    return Ray(origin=hit.point, direction=direction), segment_type


# =========================
# Whitted raytracing
# =========================

def whitted_scatter(
    ray: Ray,
    hit: HitRecord,
    scene: Scene,
    rng: np.random.Generator,
    shade: bool = True,
) -> Scatter:
    material = hit.material

    # Glass returns only what the chosen secondary ray sees
    if material.kind == MaterialType.DIELECTRIC:
        next_ray, segment_type = dielectric_bounce(ray, hit, rng)
        return Scatter(emitted=np.zeros(3), attenuation=1.0, ray=next_ray, segment_type=segment_type)

    local_color = np.zeros(3, dtype=float)
    if shade:
        surface_normal = hit.normal
        view_direction = -normalize_vector(ray.direction)
        local_color += material.color * AMBIENT_FACTOR

        for light, light_direction in visible_lights(scene, hit):
            # Diffuse: kd * light_color * max(dot(N, L), 0)
            n_dot_l = max(vector_dot(surface_normal, light_direction), 0.0)
            local_color += material.color * light.color * n_dot_l * light.intensity

            # Specular (Phong): ks * light_color * max(dot(V, R), 0)^shininess
            reflect_direction = reflect_vector(-light_direction, surface_normal)
            r_dot_v = max(vector_dot(view_direction, reflect_direction), 0.0)
            local_color += light.color * material.specular * (r_dot_v ** material.shininess) * light.intensity

    if material.reflectivity > 0.0:
        reflect_ray = Ray(origin=hit.point, direction=reflect_vector(ray.direction, hit.normal))
        return Scatter(
            emitted=local_color,
            attenuation=material.reflectivity,
            ray=reflect_ray,
            segment_type=SegmentType.REFLECTION,
        )
    return Scatter(emitted=local_color)


# =========================
# Path tracing
# =========================

def path_scatter(
    ray: Ray,
    hit: HitRecord,
    scene: Scene,
    rng: np.random.Generator,
    shade: bool = True,
) -> Scatter:
    material = hit.material
    surface_normal = hit.normal

    # Next event estimation: analytic lights are never hit by a scattered ray,
    # so they are sampled explicitly unless the surface is a perfect specular.
    direct_light = np.zeros(3, dtype=float)
    if shade and not material.is_specular:
        view_direction = -normalize_vector(ray.direction)
        for light, light_direction in visible_lights(scene, hit):
            if material.kind == MaterialType.LAMBERTIAN:
                cos_theta = max(vector_dot(surface_normal, light_direction), 0.0)
                direct_light += material.color * light.color * light.intensity * cos_theta
            elif material.kind == MaterialType.METAL:
                halfway = light_direction + view_direction
                if is_near_zero(halfway):
                    continue
                halfway = normalize_vector(halfway)
                exponent = 2.0 / max(material.roughness, MIN_ROUGHNESS_EXPONENT)
                highlight = max(vector_dot(surface_normal, halfway), 0.0) ** exponent
                direct_light += light.color * material.color * light.intensity * highlight

    if material.kind == MaterialType.LAMBERTIAN:
        scatter_direction = surface_normal + random_unit_vector(rng)
        if is_near_zero(scatter_direction):
            scatter_direction = surface_normal
        return Scatter(
            emitted=direct_light,
            attenuation=material.color,
            ray=Ray(origin=hit.point, direction=normalize_vector(scatter_direction)),
            segment_type=SegmentType.DIFFUSE,
        )

    if material.kind == MaterialType.METAL:
        reflected = reflect_vector(normalize_vector(ray.direction), surface_normal)
        scatter_direction = reflected + random_unit_vector(rng) * material.roughness
        if vector_dot(scatter_direction, surface_normal) <= 0.0:
            # absorbed
            return Scatter(emitted=direct_light, attenuation=0.0)
        return Scatter(
            emitted=direct_light,
            attenuation=material.color,
            ray=Ray(origin=hit.point, direction=scatter_direction),
            segment_type=SegmentType.REFLECTION,
        )

    next_ray, segment_type = dielectric_bounce(ray, hit, rng)
    return Scatter(emitted=direct_light, attenuation=1.0, ray=next_ray, segment_type=segment_type)


# =========================
# Traversal
# =========================

class RadianceAccumulator:
    needs_radiance = True

    def __init__(self) -> None:
        self.color = np.zeros(3, dtype=float)
        self.throughput: np.ndarray | float = 1.0

    def on_hit(self, hit: HitRecord, segment_type: SegmentType, scatter: Scatter) -> None:
        self.color += self.throughput * scatter.emitted
        self.throughput = self.throughput * scatter.attenuation

    def on_miss(self, ray: Ray, segment_type: SegmentType) -> None:
        self.color += self.throughput * sky_color(ray.direction)

    def on_exhausted(self, ray: Ray, segment_type: SegmentType) -> None:
        pass # out of bounces: contributes black


class PathRecorder:
    needs_radiance = False

    def __init__(self, origin: np.ndarray) -> None:
        self.path = RayPath(points=[np.array(origin, dtype=float)])

    def _extend(self, point: np.ndarray, segment_type: SegmentType) -> None:
        self.path.points.append(np.array(point, dtype=float))
        self.path.segment_types.append(segment_type)

    def on_hit(self, hit: HitRecord, segment_type: SegmentType, scatter: Scatter) -> None:
        self._extend(hit.point, segment_type)
        self.path.hit = True

    def on_miss(self, ray: Ray, segment_type: SegmentType) -> None:
        self._extend(ray.at(MISSED_RAY_EXTENT), segment_type)

    def on_exhausted(self, ray: Ray, segment_type: SegmentType) -> None:
        self._extend(ray.at(EXHAUSTED_RAY_EXTENT), segment_type)


def trace_ray(
    ray: Ray,
    scene: Scene,
    depth: int,
    scatter: ScatterFunction,
    rng: np.random.Generator,
    visitor,
) -> None:
    """Follow ray through at most depth surface interactions, reporting each event to visitor."""
    segment_type = SegmentType.PRIMARY
    remaining = depth
    while True:
        if remaining <= 0:
            visitor.on_exhausted(ray, segment_type)
            return

        hit = scene.intersect(ray, RAY_EPSILON, float("inf"))
        if hit is None:
            visitor.on_miss(ray, segment_type)
            return

        outcome = scatter(ray, hit, scene, rng, visitor.needs_radiance)
        visitor.on_hit(hit, segment_type, outcome)
        if outcome.ray is None:
            return

        ray = outcome.ray
        segment_type = outcome.segment_type
        remaining -= 1


def _radiance(ray: Ray, scene: Scene, depth: int, scatter: ScatterFunction, rng: np.random.Generator) -> np.ndarray:
    accumulator = RadianceAccumulator()
    trace_ray(ray, scene, depth, scatter, rng, accumulator)
    return accumulator.color


def whitted_radiance(ray: Ray, scene: Scene, depth: int, rng: np.random.Generator) -> np.ndarray:
    return _radiance(ray, scene, depth, whitted_scatter, rng)


def path_traced_radiance(ray: Ray, scene: Scene, depth: int, rng: np.random.Generator) -> np.ndarray:
    return _radiance(ray, scene, depth, path_scatter, rng)


SCATTER_FUNCTIONS: Dict[RenderMode, ScatterFunction] = {
    RenderMode.RAYTRACING: whitted_scatter,
    RenderMode.PATHTRACING: path_scatter,
}


# =========================
# Pixel loop
# =========================

@dataclass(slots=True)
class Raytracer:
    width: int = 200
    height: int = 150
    max_bounces: int = 3
    samples_per_pixel: int = 1
    mode: RenderMode = RenderMode.RAYTRACING

    @property
    def scatter_function(self) -> ScatterFunction:
        return SCATTER_FUNCTIONS[RenderMode(self.mode)]

    def radiance(self, ray: Ray, scene: Scene, rng: np.random.Generator) -> np.ndarray:
        return _radiance(ray, scene, self.max_bounces, self.scatter_function, rng)

    def render_image(
        self,
        scene: Scene,
        camera: Camera,
        rng: np.random.Generator | None = None,
    ) -> np.ndarray:
        """Average radiance per pixel as a (height, width, 3) float array, top row first, unclamped."""
        if rng is None:
            rng = np.random.default_rng()
        width, height, samples = self.width, self.height, self.samples_per_pixel
        image = np.zeros((height, width, 3), dtype=float)

        for y in range(height):
            for x in range(width):
                color = np.zeros(3, dtype=float)
                for _ in range(samples):
                    jitter_u, jitter_v = rng.random(), rng.random()
                    u = (x + jitter_u) / width
                    v = 1.0 - (y + jitter_v) / height # flip so v = 1 is the top row
                    ray = camera.get_ray(u, v)
                    color += self.radiance(ray, scene, rng)
                image[y, x, :] = color / samples

        return image

    def render(
        self,
        scene: Scene,
        camera: Camera,
        rng: np.random.Generator | None = None,
    ) -> bytes:
        """RGBA8 pixels, row-major, top row first, alpha 255."""
        return rgba_buffer(self.render_image(scene, camera, rng))

    def trace_paths(
        self,
        scene: Scene,
        camera: Camera,
        count: int,
        rng: np.random.Generator | None = None,
    ) -> List[RayPath]:
        """Record count primary rays through random image positions for the debug overlay."""
        if rng is None:
            rng = np.random.default_rng()
        scatter = self.scatter_function
        paths: List[RayPath] = []
        for _ in range(count):
            u, v = rng.random(), rng.random()
            ray = camera.get_ray(u, v)
            recorder = PathRecorder(ray.origin)
            trace_ray(ray, scene, self.max_bounces, scatter, rng, recorder)
            paths.append(recorder.path)
        return paths


def rgba_buffer(image: np.ndarray) -> bytes:
    height, width = image.shape[:2]
    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[:, :, :3] = color_to_uint8(image)
    rgba[:, :, 3] = 255
    return rgba.tobytes()


def save_image(buffer: bytes, width: int, height: int, output_path: str) -> None:
    image = Image.frombytes("RGBA", (width, height), buffer)
    image.save(output_path)
