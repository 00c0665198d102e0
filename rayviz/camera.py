import math
from typing import Tuple

import numpy as np

from rayviz.ray import Ray
from rayviz.transform import Transform, rotation_from_basis, rotation_from_yaw_pitch
from rayviz.utils.vector_operations import NEAR_ZERO, normalize_vector, vec3, vector_cross

WORLD_UP: np.ndarray = vec3(0.0, 1.0, 0.0)
# used when looking straight along WORLD_UP, where forward x WORLD_UP vanishes
FALLBACK_UP: np.ndarray = vec3(0.0, 0.0, -1.0)


class Camera:
    def __init__(
        self,
        position: np.ndarray,
        target: np.ndarray | None = None,
        fov: float = 45.0,
        aspect_ratio: float = 16.0 / 9.0,
    ) -> None:
        self.transform = Transform(position=position)
        self.fov = float(fov) # vertical, degrees
        self.aspect_ratio = float(aspect_ratio)
        if target is not None:
            self.look_at(target)

    @classmethod
    def default(cls) -> "Camera":
        return cls(vec3(0.0, 2.5, 6.0), vec3(0.0, 0.0, 0.0), fov=45.0, aspect_ratio=16.0 / 9.0)

    @property
    def position(self) -> np.ndarray:
        return self.transform.position

    def look_at(self, target: np.ndarray) -> None:
        """Orient the camera toward target, keeping the image upright with respect to +Y."""
        to_target = np.asarray(target, dtype=float) - self.transform.position
        if np.linalg.norm(to_target) < NEAR_ZERO:
            # no direction to face; keep the current orientation
            return
        forward = normalize_vector(to_target)
        right = vector_cross(forward, WORLD_UP)
        if np.linalg.norm(right) < NEAR_ZERO:
            right = vector_cross(forward, FALLBACK_UP)
        right = normalize_vector(right)
        true_up = vector_cross(right, forward)
        self.transform.rotation = rotation_from_basis(right, true_up, forward)

    def set_yaw_pitch(self, yaw: float, pitch: float) -> None:
        self.transform.rotation = rotation_from_yaw_pitch(yaw, pitch)

    def yaw_pitch(self) -> Tuple[float, float]:
        return self.transform.yaw_pitch()

    def _viewport(self) -> Tuple[float, float]:
        viewport_height = 2.0 * math.tan(math.radians(self.fov) / 2.0)
        return self.aspect_ratio * viewport_height, viewport_height

    def get_ray(self, u: float, v: float) -> Ray:
        """Ray through normalized image coordinates (u, v); v = 1 is the top of the image."""
        viewport_width, viewport_height = self._viewport()
        origin = self.transform.position
        horizontal = self.transform.right * viewport_width
        vertical = self.transform.up * viewport_height
        # image plane sits one unit in front of the camera
        lower_left_corner = origin - horizontal / 2.0 - vertical / 2.0 + self.transform.forward

        direction = lower_left_corner + horizontal * u + vertical * v - origin
        return Ray(origin=origin, direction=direction)

    def frustum_corners(self, distance: float = 1.0) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """Top-left, top-right, bottom-left, bottom-right corners of the view frustum at distance."""
        half_height = math.tan(math.radians(self.fov) / 2.0) * distance
        half_width = half_height * self.aspect_ratio
        center = self.transform.position + self.transform.forward * distance
        right = self.transform.right * half_width
        up = self.transform.up * half_height
        return center - right + up, center + right + up, center - right - up, center + right - up

    def view_matrix(self) -> np.ndarray:
        return np.linalg.inv(self.transform.rigid_matrix())

    def projection_matrix(self, z_near: float = 0.1, z_far: float = 100.0) -> np.ndarray:
        """Right-handed perspective projection with clip-space depth in [0, 1]."""
        half_fov = math.radians(self.fov) / 2.0
        focal_height = math.cos(half_fov) / math.sin(half_fov)
        focal_width = focal_height / self.aspect_ratio
        depth_range = z_far / (z_near - z_far)
        return np.array(
            [
                [focal_width, 0.0, 0.0, 0.0],
                [0.0, focal_height, 0.0, 0.0],
                [0.0, 0.0, depth_range, depth_range * z_near],
                [0.0, 0.0, -1.0, 0.0],
            ],
            dtype=float,
        )
