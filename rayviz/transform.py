"""Position / orientation / scale of an object in world space.

The rotation is kept as a 3x3 orthonormal matrix whose columns are the
object's right, up and back axes, so the object looks down its local -Z.
"""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np


def rotation_from_basis(right: np.ndarray, up: np.ndarray, forward: np.ndarray) -> np.ndarray:
    return np.column_stack((right, up, -np.asarray(forward, dtype=float)))


def rotation_from_yaw_pitch(yaw_degrees: float, pitch_degrees: float) -> np.ndarray:
    """Rotation about Y by yaw, then about X by pitch (roll is always zero)."""
    yaw = math.radians(yaw_degrees)
    pitch = math.radians(pitch_degrees)
    cos_yaw, sin_yaw = math.cos(yaw), math.sin(yaw)
    cos_pitch, sin_pitch = math.cos(pitch), math.sin(pitch)
    rotation_y = np.array(
        [[cos_yaw, 0.0, sin_yaw], [0.0, 1.0, 0.0], [-sin_yaw, 0.0, cos_yaw]],
        dtype=float,
    )
    rotation_x = np.array(
        [[1.0, 0.0, 0.0], [0.0, cos_pitch, -sin_pitch], [0.0, sin_pitch, cos_pitch]],
        dtype=float,
    )
    return rotation_y @ rotation_x


class Transform:
    def __init__(
        self,
        position: np.ndarray = (0.0, 0.0, 0.0),
        rotation: np.ndarray | None = None,
        scale: np.ndarray = (1.0, 1.0, 1.0),
    ) -> None:
        self.position: np.ndarray = np.asarray(position, dtype=float)
        self.rotation: np.ndarray = np.eye(3) if rotation is None else np.asarray(rotation, dtype=float)
        self.scale: np.ndarray = np.asarray(scale, dtype=float)

    @property
    def forward(self) -> np.ndarray:
        return -self.rotation[:, 2]

    @property
    def right(self) -> np.ndarray:
        return self.rotation[:, 0]

    @property
    def up(self) -> np.ndarray:
        return self.rotation[:, 1]

    def yaw_pitch(self) -> Tuple[float, float]:
        """Inverse of rotation_from_yaw_pitch, in degrees."""
        pitch = math.asin(max(-1.0, min(1.0, -float(self.rotation[1, 2]))))
        yaw = math.atan2(float(self.rotation[0, 2]), float(self.rotation[2, 2]))
        return math.degrees(yaw), math.degrees(pitch)

    def rigid_matrix(self) -> np.ndarray:
        """Rotation + translation, no scale."""
        matrix = np.eye(4)
        matrix[:3, :3] = self.rotation
        matrix[:3, 3] = self.position
        return matrix

    def matrix(self) -> np.ndarray:
        matrix = self.rigid_matrix()
        matrix[:3, :3] = self.rotation * self.scale
        return matrix
