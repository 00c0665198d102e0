from __future__ import annotations

import numpy as np

from rayviz.hit import HitRecord
from rayviz.ray import Ray
from rayviz.typings.material import Material
from rayviz.utils.vector_operations import vector_dot


class Sphere:
    def __init__(self, center: np.ndarray, radius: float, material: Material) -> None:
        self.center: np.ndarray = np.asarray(center, dtype=float)
        self.radius: float = float(radius)
        self.material: Material = material

    def intersect(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        origin_to_center = ray.origin - self.center
        quadratic_a = vector_dot(ray.direction, ray.direction)
        half_b = vector_dot(origin_to_center, ray.direction)
        quadratic_c = vector_dot(origin_to_center, origin_to_center) - self.radius * self.radius

        discriminant = half_b * half_b - quadratic_a * quadratic_c
        if discriminant < 0.0:
            return None

        sqrt_discriminant = float(np.sqrt(discriminant))

        # nearest root inside the window, else the far one
        root = (-half_b - sqrt_discriminant) / quadratic_a
        if root < t_min or root > t_max:
            root = (-half_b + sqrt_discriminant) / quadratic_a
            if root < t_min or root > t_max:
                return None

        hit_point = ray.at(root)
        surface_normal = (hit_point - self.center) / self.radius
        return HitRecord(t=float(root), point=hit_point, normal=surface_normal, material=self.material)
