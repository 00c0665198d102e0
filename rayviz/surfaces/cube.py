from __future__ import annotations

import numpy as np

from rayviz.hit import HitRecord
from rayviz.ray import Ray
from rayviz.typings.material import Material
from rayviz.utils.vector_operations import EPSILON


class Cube:
    """Axis-aligned box between two corners, intersected with the slab method."""

    def __init__(self, min_point: np.ndarray, max_point: np.ndarray, material: Material) -> None:
        self.min: np.ndarray = np.asarray(min_point, dtype=float)
        self.max: np.ndarray = np.asarray(max_point, dtype=float)
        self.material: Material = material

    @classmethod
    def from_center(cls, center: np.ndarray, size: float, material: Material) -> "Cube":
        center = np.asarray(center, dtype=float)
        half_size = 0.5 * float(size)
        return cls(center - half_size, center + half_size, material)

    def intersect(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        ray_origin = ray.origin
        ray_direction = ray.direction
        t_near = t_min
        t_far = t_max
        entry_axis, entry_sign = -1, 0.0
        exit_axis, exit_sign = -1, 0.0

        for axis in range(3):
            origin_component = float(ray_origin[axis])
            direction_component = float(ray_direction[axis])
            if abs(direction_component) < EPSILON:
                if origin_component < self.min[axis] or origin_component > self.max[axis]:
                    return None
                continue

            t_low = (float(self.min[axis]) - origin_component) / direction_component
            t_high = (float(self.max[axis]) - origin_component) / direction_component
            # entering through the max face means the outward normal is +axis
            if t_low > t_high:
                t_low, t_high = t_high, t_low
                sign = 1.0
            else:
                sign = -1.0

            if t_low > t_near:
                t_near = t_low
                entry_axis, entry_sign = axis, sign
            if t_high < t_far:
                t_far = t_high
                exit_axis, exit_sign = axis, -sign

            if t_near > t_far:
                return None

        if entry_axis >= 0:
            hit_distance, axis, sign = t_near, entry_axis, entry_sign
        elif exit_axis >= 0:
            # origin inside the box: report the face the ray leaves through
            hit_distance, axis, sign = t_far, exit_axis, exit_sign
        else:
            return None

        surface_normal = np.zeros(3, dtype=float)
        surface_normal[axis] = sign
        return HitRecord(
            t=float(hit_distance),
            point=ray.at(hit_distance),
            normal=surface_normal,
            material=self.material,
        )
