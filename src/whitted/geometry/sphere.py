"""Sphere scene object and its kernel-side ray test.

Roots of the ray-sphere quadratic are computed in the cancellation-free form
(q = -(h + sign(h) * sqrt(d)), roots q/a and c/q), which keeps grazing and
distant hits stable in float32.

Example:
    >>> from whitted.geometry.sphere import Sphere
    >>> from whitted.core.ray import make_ray
    >>> sphere = Sphere(center=(0.0, 0.0, 0.0), radius=1.0)
    >>> sphere.intersect(make_ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0)))
    4.0
"""

from collections.abc import Sequence

import taichi as ti
import taichi.math as tm

from whitted.core.vector import Vec3, as_vec3
from whitted.geometry.base import ObjectKind, SceneObject
from whitted.surfaces.base import Surface
from whitted.surfaces.basic import BasicSurface

# Type alias for 3D vectors
vec3 = tm.vec3

# Returned by the kernel-side intersection routines when nothing is hit
NO_HIT = -1.0


class Sphere(SceneObject):
    """A sphere defined by center point and radius.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (strictly positive).
        surface: The surface used for shading. Defaults to BasicSurface().

    Raises:
        ValueError: If radius is not positive.
        TypeError: If surface is not a Surface.
    """

    kind = ObjectKind.SPHERE

    def __init__(self, center: Sequence[float], radius: float, surface: Surface | None = None):
        if not radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        if surface is None:
            surface = BasicSurface()
        if not isinstance(surface, Surface):
            raise TypeError(f"surface must be a Surface, got {type(surface).__name__}")
        self._center = as_vec3(center, "center")
        self._radius = float(radius)
        self._surface = surface

    @property
    def center(self) -> Vec3:
        return self._center

    @property
    def radius(self) -> float:
        return self._radius

    @property
    def surface(self) -> Surface:
        return self._surface

    def geometry(self) -> tuple[Vec3, float]:
        return self._center, self._radius

    def __repr__(self) -> str:
        return f"Sphere(center={self._center}, radius={self._radius}, surface={self._surface!r})"



@ti.func
def _sphere_roots(h: ti.f32, a: ti.f32, c: ti.f32, root_d: ti.f32):
    """Ordered roots (near, far) of a*t^2 + 2*h*t + c = 0, given sqrt(h^2 - a*c)."""
    q = -(h + ti.select(h < 0.0, -root_d, root_d))

    near = (-h - root_d) / a
    far = (-h + root_d) / a
    # q vanishes only when h and the discriminant are both ~0
    if ti.abs(q) >= 1e-10:
        near = ti.min(q / a, c / q)
        far = ti.max(q / a, c / q)

    return near, far


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, center: vec3, radius: ti.f32) -> ti.f32:
    """Distance to the nearest positive root of the ray-sphere quadratic.

    The ray-sphere intersection is found by solving:
        |ray_origin + t * ray_direction - center|^2 = radius^2

    which expands to a*t^2 + 2*h*t + c = 0 with
        a = dot(direction, direction)
        h = dot(direction, oc)
        c = dot(oc, oc) - radius^2
        oc = origin - center

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        center: Center of the sphere.
        radius: Radius of the sphere.

    Returns:
        The smallest root t > 0, or NO_HIT if the ray misses the sphere or
        the sphere lies entirely behind the origin.
    """
    oc = ray_origin - center

    a = tm.dot(ray_direction, ray_direction)
    h = tm.dot(ray_direction, oc)
    c = tm.dot(oc, oc) - radius * radius

    discriminant = h * h - a * c

    result = NO_HIT

    if discriminant >= 0.0 and a > 0.0:
        near, far = _sphere_roots(h, a, c, ti.sqrt(discriminant))

        if near > 0.0:
            result = near
        elif far > 0.0:
            result = far

    return result


@ti.func
def sphere_normal(center: vec3, position: vec3) -> vec3:
    """Outward unit normal of a sphere at a point on its surface."""
    return tm.normalize(position - center)
