from __future__ import annotations

import numpy as np

EPSILON: float = 1e-6 # threshold for near-parallel rays and degenerate vectors
NEAR_ZERO: float = 1e-8


def vec3(x: float, y: float, z: float) -> np.ndarray:
    return np.array([x, y, z], dtype=float)


def normalize_vector(v: np.ndarray) -> np.ndarray:
    vector_array = np.asarray(v, dtype=float)
    magnitude = np.linalg.norm(vector_array)
    if magnitude < NEAR_ZERO:
        raise ValueError("Cannot normalize near-zero vector")
    return vector_array / magnitude


def is_near_zero(v: np.ndarray) -> bool:
    return bool(np.all(np.abs(np.asarray(v, dtype=float)) < NEAR_ZERO))


def vector_dot(a: np.ndarray, b: np.ndarray) -> float:
    vector_a = np.asarray(a, dtype=float)
    vector_b = np.asarray(b, dtype=float)
    return float(np.dot(vector_a, vector_b))


def vector_cross(a: np.ndarray, b: np.ndarray) -> np.ndarray: #cross product of two vectors (3D)
    vector_a = np.asarray(a, dtype=float)
    vector_b = np.asarray(b, dtype=float)
    return np.cross(vector_a, vector_b)


def reflect_vector(I: np.ndarray, N: np.ndarray) -> np.ndarray:
    """Calculates the reflection vector R given the incident vector I and surface normal N.
       Assumes I points toward the surface"""
    vector_I = np.asarray(I, dtype=float)
    vector_N = np.asarray(N, dtype=float)
    return vector_I - 2.0 * vector_dot(vector_I, vector_N) * vector_N


def refract_vector(uv: np.ndarray, N: np.ndarray, eta_ratio: float) -> np.ndarray:
    """Bends the unit direction uv through a surface with normal N (facing against uv).

    eta_ratio is n_incident / n_transmitted. Must not be called under total
    internal reflection; check with reflectance()/the critical angle first.
    """
    cos_theta = min(vector_dot(-uv, N), 1.0)
    r_out_perp = eta_ratio * (uv + cos_theta * N)
    r_out_parallel = -np.sqrt(abs(1.0 - vector_dot(r_out_perp, r_out_perp))) * N
    return r_out_perp + r_out_parallel


def reflectance(cosine: float, eta_ratio: float) -> float:
    """Schlick's approximation of the Fresnel reflectance."""
    r0 = (1.0 - eta_ratio) / (1.0 + eta_ratio)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * (1.0 - cosine) ** 5


def random_unit_vector(rng: np.random.Generator) -> np.ndarray:
    """Uniformly distributed point on the unit sphere."""
    while True:
        candidate = rng.standard_normal(3)
        magnitude = np.linalg.norm(candidate)
        if magnitude > NEAR_ZERO:
            return candidate / magnitude


def clamp_color01(color_rgb: np.ndarray) -> np.ndarray:
    """Clamps an RGB color array to the range [0.0, 1.0]."""
    color_array = np.asarray(color_rgb, dtype=float)
    return np.clip(color_array, 0.0, 1.0)


def color_to_uint8(color_rgb: np.ndarray) -> np.ndarray:
    """Converts a floating-point RGB color array (clamped to [0, 1]) to 8-bit integer [0, 255]."""
    clamped_color = clamp_color01(color_rgb)
    return (clamped_color * 255.0).astype(np.uint8) # truncates toward zero
