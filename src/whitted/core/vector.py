"""Host-side (NumPy) vector helpers.

These are the Python-scope counterparts of the taichi.math operations used in
kernels. They are used for camera bookkeeping, argument validation and the
host-facing API, never inside kernels.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

Vec3 = tuple[float, float, float]

# Below this length a vector is treated as zero
ZERO_LENGTH = 1e-12


def as_vec3(values: Sequence[float] | npt.NDArray[np.floating], name: str = "vector") -> Vec3:
    """Convert a 3-element sequence to a tuple of floats.

    Raises:
        ValueError: If the input does not have exactly three finite components.
    """
    array = np.asarray(values, dtype=np.float64)
    if array.shape != (3,):
        raise ValueError(f"{name} must have exactly 3 components, got shape {array.shape}")
    if not np.all(np.isfinite(array)):
        raise ValueError(f"{name} must be finite, got {tuple(array.tolist())}")
    return (float(array[0]), float(array[1]), float(array[2]))


def to_array(v: Sequence[float]) -> npt.NDArray[np.float64]:
    """Convert a vector to a float64 NumPy array."""
    return np.asarray(v, dtype=np.float64)


def normalize(v: Sequence[float]) -> npt.NDArray[np.float64]:
    """Normalize a vector to unit length.

    Raises:
        ValueError: If the vector has (near) zero length.
    """
    array = to_array(v)
    norm = np.linalg.norm(array)
    if norm < ZERO_LENGTH:
        raise ValueError("Cannot normalize a zero-length vector")
    return array / norm


def cross(a: Sequence[float], b: Sequence[float]) -> npt.NDArray[np.float64]:
    """Cross product a x b."""
    return np.cross(to_array(a), to_array(b))


def reflect(direction: Sequence[float], normal: Sequence[float]) -> Vec3:
    """Mirror a direction about a unit normal: d - 2 * dot(n, d) * n."""
    d = to_array(direction)
    n = to_array(normal)
    r = d - 2.0 * np.dot(n, d) * n
    return (float(r[0]), float(r[1]), float(r[2]))


def rotate_about_axis(
    v: Sequence[float], axis: Sequence[float], angle: float
) -> npt.NDArray[np.float64]:
    """Rotate v about a unit axis by angle radians (Rodrigues' formula)."""
    v_arr = to_array(v)
    k = to_array(axis)
    cos_a = np.cos(angle)
    sin_a = np.sin(angle)
    return v_arr * cos_a + np.cross(k, v_arr) * sin_a + k * np.dot(k, v_arr) * (1.0 - cos_a)
