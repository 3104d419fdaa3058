"""Kernel-side dispatch over packed scene objects.

Reads object rows packed by SceneObject.pack() and routes the intersection
and normal queries to the matching primitive. The one-object kernels at the
bottom back the host-side SceneObject.intersect() and SceneObject.normal()
methods, so the Python API and the tracer share the same arithmetic.
"""

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from whitted.core.ray import Ray, unpack_vec3
from whitted.core.vector import Vec3, as_vec3
from whitted.geometry.base import COL_KIND, COL_SCALAR, COL_VECTOR, OBJECT_COLUMNS, ObjectKind
from whitted.geometry.plane import hit_plane
from whitted.geometry.sphere import NO_HIT, hit_sphere, sphere_normal
from whitted.runtime import kernel_lock

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def object_kind(objects: ti.template(), index: ti.i32) -> ti.i32:
    """Kind tag of packed object index."""
    return ti.cast(objects[index, COL_KIND], ti.i32)


@ti.func
def intersect_object(objects: ti.template(), index: ti.i32, origin: vec3, direction: vec3) -> ti.f32:
    """Distance to packed object index along a ray, or NO_HIT.

    Light markers are intersected as spheres.
    """
    kind = object_kind(objects, index)
    vector = unpack_vec3(objects, index, COL_VECTOR)
    scalar = objects[index, COL_SCALAR]

    t = NO_HIT
    if kind == int(ObjectKind.PLANE):
        t = hit_plane(origin, direction, vector, scalar)
    else:
        t = hit_sphere(origin, direction, vector, scalar)

    return t


@ti.func
def normal_at(objects: ti.template(), index: ti.i32, position: vec3) -> vec3:
    """Outward unit normal of packed object index at position.

    Never called for light markers, which are not shaded.
    """
    kind = object_kind(objects, index)
    vector = unpack_vec3(objects, index, COL_VECTOR)

    normal = vector
    if kind != int(ObjectKind.PLANE):
        normal = sphere_normal(vector, position)

    return normal


@ti.kernel
def _intersect_kernel(
    objects: ti.types.ndarray(dtype=ti.f32, ndim=2),
    ray: ti.types.ndarray(dtype=ti.f32, ndim=1),
) -> ti.f32:
    origin = vec3(ray[0], ray[1], ray[2])
    direction = vec3(ray[3], ray[4], ray[5])
    return intersect_object(objects, 0, origin, direction)


@ti.kernel
def _normal_kernel(
    objects: ti.types.ndarray(dtype=ti.f32, ndim=2),
    point: ti.types.ndarray(dtype=ti.f32, ndim=1),
) -> vec3:
    return normal_at(objects, 0, vec3(point[0], point[1], point[2]))


def intersect_packed(row: npt.NDArray[np.float32], ray: Ray) -> float | None:
    """Intersect one packed object row with a ray on the active Taichi backend."""
    objects = np.ascontiguousarray(row, dtype=np.float32).reshape(1, OBJECT_COLUMNS)
    with kernel_lock():
        t = float(_intersect_kernel(objects, ray.as_array()))
    if t >= 0.0:
        return t
    return None


def normal_packed(row: npt.NDArray[np.float32], position: Sequence[float]) -> Vec3:
    """Normal of one packed object row at position."""
    objects = np.ascontiguousarray(row, dtype=np.float32).reshape(1, OBJECT_COLUMNS)
    point = np.asarray(as_vec3(position, "position"), dtype=np.float32)
    with kernel_lock():
        normal = _normal_kernel(objects, point)
    return (float(normal[0]), float(normal[1]), float(normal[2]))
