"""Whitted-style shading for Taichi kernels.

This module implements the recursive color resolution used by the tracer:

    color(ray, depth) =
        black                                   if the ray hits nothing
        marker color                            if it hits a light marker
        direct(p) + TERMINAL_COLOR              if depth >= MAX_DEPTH
        direct(p) + reflect(p) * color(r, depth + 1)   otherwise

where p is the closest hit point, r the mirror ray leaving p and direct(p)
the ambient plus diffuse plus specular light arriving at p from every
unoccluded light. Taichi functions cannot recurse, so trace_color() unrolls
the recursion into a loop that carries the product of the reflectivities
seen so far; the result is the same sum.

Soft shadows come from jittering each light's position inside a small box.
Samples 0 and 1 use the exact light position, so a single-sample trace is
deterministic and keeps hard shadows. Jitter values come from a hash of the
pixel, sample, light and seed, so results do not depend on thread scheduling.

All tables (objects, surfaces, lights) are the float32 arrays produced by
whitted.scene.packing, passed down from the calling kernel.
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import ray_at, reflect, unpack_vec3
from whitted.geometry.base import COL_EMISSION, COL_SURFACE, ObjectKind
from whitted.geometry.dispatch import intersect_object, normal_at, object_kind
from whitted.scene.packing import LIGHT_COLOR, LIGHT_INTENSITY, LIGHT_POSITION
from whitted.surfaces.dispatch import (
    surface_diffuse,
    surface_reflect,
    surface_shininess,
    surface_specular,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Shading Constants
# =============================================================================

# Reflection depth at which the recursion stops
MAX_DEPTH = 4

# Offset applied to secondary and shadow ray origins to avoid self-hits
RAY_EPSILON = 1e-3

# Light every surface receives regardless of the scene's lights
AMBIENT = 0.1

# Flat term added at the recursion cutoff instead of truncating to black
TERMINAL = 0.5

# Half-size of the box light positions are jittered in (per axis)
SHADOW_JITTER = 0.1

# Larger than any distance in a scene
T_MAX = 1e30


@ti.dataclass
class Hit:
    """Closest intersection found along a ray.

    Attributes:
        index: Row of the hit object in the object table (-1 on a miss).
        distance: Distance along the ray to the hit.
    """

    index: ti.i32
    distance: ti.f32


@ti.func
def closest_hit(objects: ti.template(), num_objects: ti.i32, origin: vec3, direction: vec3) -> Hit:
    """Linear scan for the nearest object along a ray.

    Ties keep the object that comes first in the table.
    """
    hit = Hit(index=-1, distance=0.0)
    best = T_MAX

    for i in range(num_objects):
        t = intersect_object(objects, i, origin, direction)
        if t >= 0.0 and t < best:
            best = t
            hit.index = i
            hit.distance = t

    return hit


@ti.func
def occluded(
    objects: ti.template(), num_objects: ti.i32, origin: vec3, direction: vec3, max_distance: ti.f32
) -> ti.i32:
    """1 if any shadow-casting object lies within max_distance along the ray.

    Light markers never cast shadows.
    """
    blocked = 0

    for i in range(num_objects):
        if blocked == 0 and object_kind(objects, i) != int(ObjectKind.LIGHT_MARKER):
            t = intersect_object(objects, i, origin, direction)
            if t >= 0.0 and t <= max_distance:
                blocked = 1

    return blocked


@ti.func
def _hash01(key: vec3, salt: vec3) -> ti.f32:
    return tm.fract(ti.sin(tm.dot(key, salt)) * 43758.5453)


@ti.func
def shadow_jitter(px: ti.i32, py: ti.i32, sample_index: ti.i32, light: ti.i32, seed: ti.i32) -> vec3:
    """Deterministic offset in [-SHADOW_JITTER, SHADOW_JITTER)^3."""
    key = vec3(
        ti.cast(px, ti.f32) + 0.37 * ti.cast(light, ti.f32),
        ti.cast(py, ti.f32) + 0.71 * ti.cast(seed % 1024, ti.f32),
        ti.cast(sample_index, ti.f32),
    )
    u = vec3(
        _hash01(key, vec3(12.9898, 78.233, 37.719)),
        _hash01(key, vec3(39.3468, 11.135, 83.155)),
        _hash01(key, vec3(73.156, 52.235, 9.151)),
    )
    return (2.0 * u - 1.0) * SHADOW_JITTER


@ti.func
def natural_color(
    objects: ti.template(),
    num_objects: ti.i32,
    surfaces: ti.template(),
    surface_index: ti.i32,
    lights: ti.template(),
    num_lights: ti.i32,
    point: vec3,
    normal: vec3,
    sample_index: ti.i32,
    px: ti.i32,
    py: ti.i32,
    seed: ti.i32,
) -> vec3:
    """Ambient plus direct light at a surface point.

    Each light that is not occluded contributes
        radiance * illumination * diffuse
        radiance * illumination^shininess * specular
    where illumination = dot(light_dir, normal) and only positive values
    count. The result is not clamped.
    """
    color = vec3(AMBIENT, AMBIENT, AMBIENT)
    diffuse = surface_diffuse(surfaces, surface_index, point)
    specular = surface_specular(surfaces, surface_index, point)
    shininess = surface_shininess(surfaces, surface_index)

    for li in range(num_lights):
        light_pos = unpack_vec3(lights, li, LIGHT_POSITION)
        if sample_index > 1:
            light_pos += shadow_jitter(px, py, sample_index, li, seed)

        to_light = light_pos - point
        light_distance = tm.length(to_light)

        if light_distance > 0.0:
            light_dir = to_light / light_distance
            shadow_origin = point + RAY_EPSILON * light_dir

            if occluded(objects, num_objects, shadow_origin, light_dir, light_distance) == 0:
                illumination = tm.dot(light_dir, normal)
                if illumination > 0.0:
                    radiance = unpack_vec3(lights, li, LIGHT_COLOR) * lights[li, LIGHT_INTENSITY]
                    color += radiance * illumination * diffuse
                    color += radiance * ti.pow(illumination, shininess) * specular

    return color


@ti.func
def trace_color(
    objects: ti.template(),
    num_objects: ti.i32,
    surfaces: ti.template(),
    lights: ti.template(),
    num_lights: ti.i32,
    origin: vec3,
    direction: vec3,
    start_depth: ti.i32,
    sample_index: ti.i32,
    px: ti.i32,
    py: ti.i32,
    seed: ti.i32,
) -> vec3:
    """Color seen along a ray entering the recursion at start_depth.

    Args:
        objects: Packed object table.
        num_objects: Valid rows in the object table.
        surfaces: Packed surface table.
        lights: Packed light table.
        num_lights: Valid rows in the light table.
        origin: Ray origin.
        direction: Unit ray direction.
        start_depth: Reflection depth of this ray (0 for primary rays).
        sample_index: Index of the sample being computed.
        px: Pixel x used to key the shadow jitter.
        py: Pixel y used to key the shadow jitter.
        seed: Seed mixed into the shadow jitter.

    Returns:
        The unclamped RGB color.
    """
    color = vec3(0.0, 0.0, 0.0)
    weight = 1.0
    ray_origin = origin
    ray_direction = direction

    # Active flag (Taichi doesn't support break in ti.func loops)
    active = 1

    for step in range(MAX_DEPTH + 1):
        if active == 1:
            depth = start_depth + step
            hit = closest_hit(objects, num_objects, ray_origin, ray_direction)

            if hit.index < 0:
                # Background is black
                active = 0
            elif object_kind(objects, hit.index) == int(ObjectKind.LIGHT_MARKER):
                color += weight * unpack_vec3(objects, hit.index, COL_EMISSION)
                active = 0
            else:
                point = ray_at(ray_origin, ray_direction, hit.distance)
                normal = normal_at(objects, hit.index, point)
                reflection = reflect(ray_direction, normal)
                surface_index = ti.cast(objects[hit.index, COL_SURFACE], ti.i32)

                direct = natural_color(
                    objects,
                    num_objects,
                    surfaces,
                    surface_index,
                    lights,
                    num_lights,
                    point,
                    normal,
                    sample_index,
                    px,
                    py,
                    seed,
                )

                if depth >= MAX_DEPTH:
                    color += weight * (direct + vec3(TERMINAL, TERMINAL, TERMINAL))
                    active = 0
                else:
                    color += weight * direct
                    weight *= surface_reflect(surfaces, surface_index, point)
                    if weight == 0.0:
                        active = 0
                    ray_origin = point + RAY_EPSILON * reflection
                    ray_direction = reflection

    return color
