"""Core rendering module.

Components:
    ray: Host-side Ray dataclass and kernel-side vector utilities
    vector: NumPy helpers used outside kernels
    options: TracingConfig, the validated per-trace parameter bundle
    shading: Whitted-style shading (direct light, shadows, mirror recursion)
    tracer: trace_scene and the host entry points into the shading kernels
    dual_pass: Coarse interactive pass plus cancellable background pass

The shading model is a simplified Phong approximation: an ambient term, a
diffuse term and a specular term per visible light, plus mirror reflection
bounded by MAX_DEPTH.
"""

from .ray import Ray, make_ray, ray_at, reflect, vec3

# Note: shading, tracer and dual_pass are NOT imported here because they import
# the geometry and scene packages, which themselves import core.ray.
# Import directly from whitted.core.tracer or whitted.core.dual_pass when needed.

__all__ = [
    "Ray",
    "make_ray",
    "ray_at",
    "reflect",
    "vec3",
]
