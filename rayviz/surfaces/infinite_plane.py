import numpy as np

from rayviz.hit import HitRecord
from rayviz.ray import Ray
from rayviz.typings.material import Material
from rayviz.utils.vector_operations import EPSILON, normalize_vector, vector_dot


class InfinitePlane:
    def __init__(self, point: np.ndarray, normal: np.ndarray, material: Material) -> None:
        self.point: np.ndarray = np.asarray(point, dtype=float)
        self.normal: np.ndarray = normalize_vector(normal)
        self.material: Material = material

    def intersect(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        direction_dot_normal = vector_dot(self.normal, ray.direction)
        if abs(direction_dot_normal) <= EPSILON:
            return None

        hit_distance = vector_dot(self.point - ray.origin, self.normal) / direction_dot_normal
        if hit_distance < t_min or hit_distance > t_max:
            return None

        hit_point = ray.at(hit_distance)
        return HitRecord(t=float(hit_distance), point=hit_point, normal=self.normal, material=self.material)
