"""Outer tracing driver and host-facing shading entry points.

trace_scene() fills a caller-owned buffer with an image of the scene. The
image is divided into square raster blocks of config.raster_block pixels;
each block is traced once per sample through its center, the clamped samples
are averaged, and the result is written to every pixel of the block.

Blocks are dispatched to the Taichi backend in batches of whole block-rows.
Cancellation is cooperative: the token is polled before every batch, and a
cancelled trace returns False with the buffer partially written. Kernel
launches are serialized through the runtime kernel lock so two traces
running in different threads (a coarse preview and a fine background pass)
interleave batch by batch.

Example:
    >>> from whitted.core.options import TracingConfig
    >>> from whitted.core.tracer import trace_scene
    >>> from whitted.scene.demo import create_demo_scene
    >>> scene, camera = create_demo_scene()
    >>> config = TracingConfig.allocate(160, 120, sample_count=4)
    >>> trace_scene(scene, camera, config)
    True
"""

import logging
import math
from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti
import taichi.math as tm

from whitted.core.options import CancellationToken, TracingConfig
from whitted.core.ray import Ray, unpack_vec3
from whitted.core.shading import natural_color as _natural_color
from whitted.core.shading import trace_color
from whitted.core.vector import Vec3, as_vec3
from whitted.runtime import kernel_lock
from whitted.surfaces.base import Surface

if TYPE_CHECKING:
    from whitted.camera.camera import Camera, CameraState
    from whitted.scene.scene import Scene

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# Upper bound on raster cells handled per kernel launch
CELLS_PER_BATCH = 4096

# Packed camera rows
CAMERA_POSITION = 0
CAMERA_FACING = 1
CAMERA_RIGHT = 2
CAMERA_UP = 3


# =============================================================================
# Kernels
# =============================================================================


@ti.kernel
def _trace_rows(
    target: ti.types.ndarray(dtype=ti.f32, ndim=2),
    objects: ti.types.ndarray(dtype=ti.f32, ndim=2),
    num_objects: ti.i32,
    surfaces: ti.types.ndarray(dtype=ti.f32, ndim=2),
    lights: ti.types.ndarray(dtype=ti.f32, ndim=2),
    num_lights: ti.i32,
    camera: ti.types.ndarray(dtype=ti.f32, ndim=2),
    width: ti.i32,
    height: ti.i32,
    block: ti.i32,
    row_start: ti.i32,
    row_end: ti.i32,
    sample_count: ti.i32,
    seed: ti.i32,
):
    """Trace block-rows [row_start, row_end) of the raster grid into target."""
    columns = (width + block - 1) // block
    position = unpack_vec3(camera, CAMERA_POSITION, 0)
    facing = unpack_vec3(camera, CAMERA_FACING, 0)
    right = unpack_vec3(camera, CAMERA_RIGHT, 0)
    up = unpack_vec3(camera, CAMERA_UP, 0)

    for cx, cy in ti.ndrange(columns, row_end - row_start):
        x0 = cx * block
        y0 = (row_start + cy) * block
        # Blocks on the right and bottom edges are clipped to the image
        bw = ti.min(block, width - x0)
        bh = ti.min(block, height - y0)

        fx = ti.cast(x0, ti.f32) + 0.5 * ti.cast(bw, ti.f32)
        fy = ti.cast(y0, ti.f32) + 0.5 * ti.cast(bh, ti.f32)
        sx = -1.0 + 2.0 * fx / ti.cast(width, ti.f32)
        sy = 1.0 - 2.0 * fy / ti.cast(height, ti.f32)
        direction = tm.normalize(facing + sx * right + sy * up)

        total = vec3(0.0, 0.0, 0.0)
        for sample in range(sample_count):
            color = trace_color(
                objects,
                num_objects,
                surfaces,
                lights,
                num_lights,
                position,
                direction,
                0,
                sample,
                x0,
                y0,
                seed,
            )
            total += tm.clamp(color, 0.0, 1.0)

        average = total / ti.cast(sample_count, ti.f32)

        for i, j in ti.ndrange(bw, bh):
            index = (x0 + i) + (y0 + j) * width
            for c in ti.static(range(3)):
                target[index, c] = average[c]


@ti.kernel
def _color_for_ray_kernel(
    objects: ti.types.ndarray(dtype=ti.f32, ndim=2),
    num_objects: ti.i32,
    surfaces: ti.types.ndarray(dtype=ti.f32, ndim=2),
    lights: ti.types.ndarray(dtype=ti.f32, ndim=2),
    num_lights: ti.i32,
    ray: ti.types.ndarray(dtype=ti.f32, ndim=1),
    depth: ti.i32,
    sample_index: ti.i32,
    px: ti.i32,
    py: ti.i32,
    seed: ti.i32,
) -> vec3:
    origin = vec3(ray[0], ray[1], ray[2])
    direction = vec3(ray[3], ray[4], ray[5])
    return trace_color(
        objects,
        num_objects,
        surfaces,
        lights,
        num_lights,
        origin,
        direction,
        depth,
        sample_index,
        px,
        py,
        seed,
    )


@ti.kernel
def _natural_color_kernel(
    objects: ti.types.ndarray(dtype=ti.f32, ndim=2),
    num_objects: ti.i32,
    surface: ti.types.ndarray(dtype=ti.f32, ndim=2),
    lights: ti.types.ndarray(dtype=ti.f32, ndim=2),
    num_lights: ti.i32,
    point_normal: ti.types.ndarray(dtype=ti.f32, ndim=1),
    sample_index: ti.i32,
    px: ti.i32,
    py: ti.i32,
    seed: ti.i32,
) -> vec3:
    point = vec3(point_normal[0], point_normal[1], point_normal[2])
    normal = vec3(point_normal[3], point_normal[4], point_normal[5])
    return _natural_color(
        objects,
        num_objects,
        surface,
        0,
        lights,
        num_lights,
        point,
        normal,
        sample_index,
        px,
        py,
        seed,
    )


# =============================================================================
# Public API
# =============================================================================


def _check_non_negative(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return int(value)


def _to_rgb(color) -> Vec3:
    return (float(color[0]), float(color[1]), float(color[2]))


def trace_scene(
    scene: "Scene",
    camera: "Camera | CameraState",
    config: TracingConfig,
    cancellation: CancellationToken | None = None,
    *,
    cells_per_batch: int | None = None,
) -> bool:
    """Trace the scene from the camera into config.target.

    Args:
        scene: The scene to render. Not modified.
        camera: Camera or camera snapshot. A snapshot is taken on entry, so
            later changes to a live camera do not affect this trace.
        config: Validated tracing configuration holding the target buffer.
        cancellation: Token overriding config.cancellation.
        cells_per_batch: Raster cells per kernel launch; defaults to
            CELLS_PER_BATCH. Batches always hold whole block-rows.

    Returns:
        True if every raster cell was traced, False if the trace was
        cancelled. The buffer of a cancelled trace must be discarded.

    Raises:
        TypeError: If config is not a TracingConfig or the token has no
            is_set() method.
        ValueError: If cells_per_batch is not positive.
    """
    if not isinstance(config, TracingConfig):
        raise TypeError(f"config must be a TracingConfig, got {type(config).__name__}")
    token = cancellation if cancellation is not None else config.cancellation
    if token is not None and not isinstance(token, CancellationToken):
        raise TypeError("cancellation must provide an is_set() method")
    batch_cells = CELLS_PER_BATCH if cells_per_batch is None else cells_per_batch
    if batch_cells < 1:
        raise ValueError(f"cells_per_batch must be positive, got {batch_cells}")

    if token is not None and token.is_set():
        logger.debug("Trace cancelled before start")
        return False

    width, height, block = config.width, config.height, config.raster_block
    if width == 0 or height == 0:
        return True

    state = camera.snapshot()
    packed = scene.pack()
    camera_table = state.as_array()

    columns = math.ceil(width / block)
    rows = math.ceil(height / block)
    rows_per_batch = max(1, batch_cells // columns)

    logger.debug(
        "Tracing %dx%d (block %d, %d samples) in batches of %d block-rows",
        width,
        height,
        block,
        config.sample_count,
        rows_per_batch,
    )

    for row_start in range(0, rows, rows_per_batch):
        if token is not None and token.is_set():
            logger.debug("Trace cancelled at block-row %d of %d", row_start, rows)
            return False
        row_end = min(rows, row_start + rows_per_batch)
        with kernel_lock():
            _trace_rows(
                config.target,
                packed.objects,
                packed.num_objects,
                packed.surfaces,
                packed.lights,
                packed.num_lights,
                camera_table,
                width,
                height,
                block,
                row_start,
                row_end,
                config.sample_count,
                config.seed,
            )

    logger.debug("Trace finished: %dx%d", width, height)
    return True


def color_for_ray(
    scene: "Scene",
    ray: Ray,
    depth: int = 0,
    sample_index: int = 0,
    *,
    pixel: tuple[int, int] = (0, 0),
    seed: int = 0,
) -> Vec3:
    """Unclamped color seen along a single ray.

    Runs the same code as trace_scene() for one ray, starting the reflection
    recursion at depth.

    Raises:
        ValueError: If depth or sample_index is negative.
    """
    _check_non_negative(depth, "depth")
    _check_non_negative(sample_index, "sample_index")
    packed = scene.pack()
    with kernel_lock():
        color = _color_for_ray_kernel(
            packed.objects,
            packed.num_objects,
            packed.surfaces,
            packed.lights,
            packed.num_lights,
            ray.as_array(),
            depth,
            sample_index,
            int(pixel[0]),
            int(pixel[1]),
            seed,
        )
    return _to_rgb(color)


def natural_color(
    scene: "Scene",
    point: Sequence[float],
    normal: Sequence[float],
    surface: Surface,
    sample_index: int = 0,
    *,
    pixel: tuple[int, int] = (0, 0),
    seed: int = 0,
) -> Vec3:
    """Ambient plus direct illumination at a point, without reflections.

    Raises:
        TypeError: If surface is not a Surface (light markers have none).
        ValueError: If sample_index is negative.
    """
    if not isinstance(surface, Surface):
        raise TypeError(f"surface must be a Surface, got {type(surface).__name__}")
    _check_non_negative(sample_index, "sample_index")
    packed = scene.pack()
    point_normal = np.array(
        as_vec3(point, "point") + as_vec3(normal, "normal"), dtype=np.float32
    )
    surface_table = surface.pack().reshape(1, -1)
    with kernel_lock():
        color = _natural_color_kernel(
            packed.objects,
            packed.num_objects,
            surface_table,
            packed.lights,
            packed.num_lights,
            point_normal,
            sample_index,
            int(pixel[0]),
            int(pixel[1]),
            seed,
        )
    return _to_rgb(color)
