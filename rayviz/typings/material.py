from __future__ import annotations

from enum import IntEnum

import numpy as np


class MaterialType(IntEnum):
    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


class Material:
    def __init__(
        self,
        color: np.ndarray = (1.0, 1.0, 1.0),
        specular: float = 0.5,
        shininess: float = 32.0,
        reflectivity: float = 0.0,
        roughness: float = 0.0,
        ior: float = 1.5,
        kind: MaterialType = MaterialType.LAMBERTIAN,
    ) -> None:
        self.color: np.ndarray = np.asarray(color, dtype=float)
        self.specular: float = float(specular)
        self.shininess: float = float(shininess)
        self.reflectivity: float = float(reflectivity) # Whitted mirror term
        self.roughness: float = float(roughness)
        self.ior: float = float(ior)
        self.kind: MaterialType = MaterialType(kind)

    @property
    def is_specular(self) -> bool:
        """Dielectrics and near-mirror metals cannot be lit by sampling point/directional lights."""
        if self.kind == MaterialType.DIELECTRIC:
            return True
        return self.kind == MaterialType.METAL and self.roughness < 0.05

    def copy(self) -> "Material":
        return Material(
            self.color.copy(),
            self.specular,
            self.shininess,
            self.reflectivity,
            self.roughness,
            self.ior,
            self.kind,
        )

    def __repr__(self) -> str:
        return (
            f"Material(color={self.color.tolist()}, kind={self.kind.name}, "
            f"reflectivity={self.reflectivity}, roughness={self.roughness}, ior={self.ior})"
        )
