from __future__ import annotations

from enum import IntEnum
from typing import Tuple

import numpy as np

from rayviz.utils.vector_operations import NEAR_ZERO


class LightType(IntEnum):
    POINT = 0
    DIRECTIONAL = 1


class Light:
    def __init__(
        self,
        kind: LightType,
        position: np.ndarray = (0.0, 0.0, 0.0),
        direction: np.ndarray = (0.0, 0.0, 0.0),
        color: np.ndarray = (1.0, 1.0, 1.0),
        intensity: float = 1.0,
    ) -> None:
        self.kind: LightType = LightType(kind)
        self.position: np.ndarray = np.asarray(position, dtype=float) # point lights only
        self.direction: np.ndarray = np.asarray(direction, dtype=float) # directional lights only
        self.color: np.ndarray = np.asarray(color, dtype=float)
        self.intensity: float = float(intensity)

    @classmethod
    def point(cls, position: np.ndarray, color: np.ndarray = (1.0, 1.0, 1.0), intensity: float = 1.0) -> "Light":
        return cls(LightType.POINT, position=position, color=color, intensity=intensity)

    @classmethod
    def directional(cls, direction: np.ndarray, color: np.ndarray = (1.0, 1.0, 1.0), intensity: float = 1.0) -> "Light":
        return cls(LightType.DIRECTIONAL, direction=direction, color=color, intensity=intensity)

    def incident(self, point: np.ndarray) -> Tuple[np.ndarray, float] | None:
        """Unit vector from point toward the light and the distance a shadow ray may travel.

        Returns None when the light has no usable direction from this point.
        """
        if self.kind == LightType.DIRECTIONAL:
            magnitude = float(np.linalg.norm(self.direction))
            if magnitude < NEAR_ZERO:
                return None
            return -self.direction / magnitude, float("inf")

        to_light = self.position - point
        distance = float(np.linalg.norm(to_light))
        if distance < NEAR_ZERO:
            return None
        return to_light / distance, distance
