"""Kernel-side surface evaluation.

Reads surface rows packed by Surface.pack() and dispatches on the surface
kind, mirroring the host-side methods of BasicSurface and
CheckerboardSurface.
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import unpack_vec3
from whitted.surfaces.base import (
    COL_ALT_DIFFUSE,
    COL_DIFFUSE,
    COL_KIND,
    COL_REFLECTIVITY,
    COL_SHININESS,
    COL_SPECULAR,
    SurfaceKind,
)

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def surface_reflect(surfaces: ti.template(), index: ti.i32, position: vec3) -> ti.f32:
    """Mirror reflectivity of surface index at position."""
    return surfaces[index, COL_REFLECTIVITY]


@ti.func
def surface_shininess(surfaces: ti.template(), index: ti.i32) -> ti.f32:
    """Specular exponent of surface index."""
    return surfaces[index, COL_SHININESS]


@ti.func
def surface_specular(surfaces: ti.template(), index: ti.i32, position: vec3) -> vec3:
    """Specular color of surface index at position."""
    return unpack_vec3(surfaces, index, COL_SPECULAR)


@ti.func
def surface_diffuse(surfaces: ti.template(), index: ti.i32, position: vec3) -> vec3:
    """Diffuse color of surface index at position.

    Checkerboard surfaces switch to their alternate color on squares where
    floor(x) + floor(z) is odd.
    """
    kind = ti.cast(surfaces[index, COL_KIND], ti.i32)
    color = unpack_vec3(surfaces, index, COL_DIFFUSE)

    if kind == int(SurfaceKind.CHECKERBOARD):
        parity = (ti.cast(ti.floor(position.x), ti.i32) + ti.cast(ti.floor(position.z), ti.i32)) % 2
        if parity != 0:
            color = unpack_vec3(surfaces, index, COL_ALT_DIFFUSE)

    return color
