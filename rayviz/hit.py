from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from rayviz.typings.material import Material


@dataclass(frozen=True, slots=True)
class HitRecord:
    t: float
    point: np.ndarray
    normal: np.ndarray
    material: Material
