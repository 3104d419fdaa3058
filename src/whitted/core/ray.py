"""Ray data structure and kernel-side vector utilities.

This module provides the host-side Ray dataclass consumed by the Python API
(camera, scene queries, color_for_ray) and the small set of Taichi functions
the shading kernels share.

Example:
    >>> from whitted.core.ray import Ray, make_ray
    >>> ray = make_ray((0.0, 0.0, 5.0), (0.0, 0.0, -2.0))
    >>> ray.direction
    (0.0, 0.0, -1.0)
"""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from whitted.core.vector import Vec3, as_vec3, normalize

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@dataclass(frozen=True)
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of the ray. Must already be unit length;
            the tracer never renormalizes it. Use make_ray() to build a ray
            from an arbitrary direction.
    """

    origin: Vec3
    direction: Vec3

    def at(self, distance: float) -> Vec3:
        """Point reached after travelling distance along the ray."""
        return (
            self.origin[0] + self.direction[0] * distance,
            self.origin[1] + self.direction[1] * distance,
            self.origin[2] + self.direction[2] * distance,
        )

    def as_array(self) -> npt.NDArray[np.float32]:
        """Pack the ray as [ox, oy, oz, dx, dy, dz] for kernel arguments."""
        return np.array(self.origin + self.direction, dtype=np.float32)


def make_ray(origin: Sequence[float], direction: Sequence[float]) -> Ray:
    """Create a ray, normalizing the direction.

    Raises:
        ValueError: If the direction has zero length or a component is not
            finite.
    """
    unit = normalize(as_vec3(direction, "direction"))
    return Ray(origin=as_vec3(origin, "origin"), direction=as_vec3(unit, "direction"))


# =============================================================================
# Kernel-side utilities
# =============================================================================


@ti.func
def ray_at(origin: vec3, direction: vec3, t: ti.f32) -> vec3:
    """Compute the point origin + t * direction."""
    return origin + t * direction


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    The normal should be unit length for correct results.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal.

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def unpack_vec3(table: ti.template(), row: ti.i32, column: ti.i32) -> vec3:
    """Read three consecutive columns of a packed float table as a vec3."""
    return vec3(table[row, column], table[row, column + 1], table[row, column + 2])
