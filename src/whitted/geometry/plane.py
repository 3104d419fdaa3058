"""Infinite plane primitive.

The plane is the set of points p with dot(normal, p) == offset. Ground planes
are usually built with normal (0, 1, 0) and offset equal to the ground height.

Example:
    >>> from whitted.geometry.plane import Plane
    >>> from whitted.surfaces.checkerboard import CheckerboardSurface
    >>> ground = Plane(normal=(0.0, 1.0, 0.0), offset=-1.0, surface=CheckerboardSurface())
"""

from collections.abc import Sequence

import taichi as ti
import taichi.math as tm

from whitted.core.vector import Vec3, as_vec3, normalize
from whitted.geometry.base import ObjectKind, SceneObject
from whitted.geometry.sphere import NO_HIT
from whitted.surfaces.base import Surface
from whitted.surfaces.basic import BasicSurface

# Type alias for 3D vectors
vec3 = tm.vec3

# Rays with |dot(normal, direction)| at or below this are treated as parallel
PARALLEL_EPSILON = 1e-6


class Plane(SceneObject):
    """An infinite plane.

    Args:
        normal: Normal of the plane. Normalized at construction.
        offset: Signed distance of the plane from the origin along the normal.
        surface: The surface used for shading. Defaults to BasicSurface().

    Raises:
        ValueError: If the normal has zero length.
        TypeError: If surface is not a Surface.
    """

    kind = ObjectKind.PLANE

    def __init__(self, normal: Sequence[float], offset: float, surface: Surface | None = None):
        self._unit_normal = as_vec3(normalize(as_vec3(normal, "normal")), "normal")
        self._offset = float(offset)
        if surface is None:
            surface = BasicSurface()
        if not isinstance(surface, Surface):
            raise TypeError(f"surface must be a Surface, got {type(surface).__name__}")
        self._surface = surface

    @property
    def unit_normal(self) -> Vec3:
        """The plane's unit normal."""
        return self._unit_normal

    @property
    def offset(self) -> float:
        return self._offset

    @property
    def surface(self) -> Surface:
        return self._surface

    def geometry(self) -> tuple[Vec3, float]:
        return self._unit_normal, self._offset

    def normal(self, position: Sequence[float]) -> Vec3:
        """The plane's normal is the same at every point."""
        return self._unit_normal

    def __repr__(self) -> str:
        return f"Plane(normal={self._unit_normal}, offset={self._offset}, surface={self._surface!r})"


@ti.func
def hit_plane(ray_origin: vec3, ray_direction: vec3, normal: vec3, offset: ti.f32) -> ti.f32:
    """Distance along the ray to the plane dot(normal, p) = offset.

    Returns:
        t >= 0 where the ray meets the plane, or NO_HIT when the ray is
        parallel to the plane or the plane lies behind the origin.
    """
    denom = tm.dot(normal, ray_direction)
    result = NO_HIT

    if ti.abs(denom) > PARALLEL_EPSILON:
        t = (offset - tm.dot(normal, ray_origin)) / denom
        if t >= 0.0:
            result = t

    return result
