"""Unit tests for plane intersection and light markers.

Tests cover:
- Ray hitting a plane from either side
- Parallel rays and planes behind the origin
- Zero-distance hits
- Light marker intersection and its missing normal
"""

import pytest
import taichi as ti


class TestPlane:
    """Tests for Plane construction and queries."""

    def test_normal_is_normalized(self):
        from whitted.geometry import Plane

        plane = Plane(normal=(0.0, 2.0, 0.0), offset=1.0)
        assert plane.unit_normal == pytest.approx((0.0, 1.0, 0.0))
        assert plane.normal((5.0, 1.0, -3.0)) == pytest.approx((0.0, 1.0, 0.0))

    def test_zero_normal_raises(self):
        from whitted.geometry import Plane

        with pytest.raises(ValueError):
            Plane(normal=(0.0, 0.0, 0.0), offset=0.0)

    def test_default_surface(self):
        from whitted.geometry import Plane
        from whitted.surfaces import BasicSurface

        assert isinstance(Plane(normal=(0.0, 1.0, 0.0), offset=0.0).surface, BasicSurface)

    def test_hit_from_above(self):
        """dot(n, p) = offset with n = +Y and offset = -1 is the plane y = -1."""
        from whitted.core.ray import make_ray
        from whitted.geometry import Plane

        plane = Plane(normal=(0.0, 1.0, 0.0), offset=-1.0)
        t = plane.intersect(make_ray((0.0, 1.0, 0.0), (0.0, -1.0, 0.0)))
        assert t == pytest.approx(2.0, abs=1e-6)

    def test_hit_from_below(self):
        """Planes are two-sided for intersection purposes."""
        from whitted.core.ray import make_ray
        from whitted.geometry import Plane

        plane = Plane(normal=(0.0, 1.0, 0.0), offset=-1.0)
        t = plane.intersect(make_ray((0.0, -4.0, 0.0), (0.0, 1.0, 0.0)))
        assert t == pytest.approx(3.0, abs=1e-6)

    def test_oblique_hit(self):
        from whitted.core.ray import make_ray
        from whitted.geometry import Plane

        plane = Plane(normal=(0.0, 1.0, 0.0), offset=0.0)
        t = plane.intersect(make_ray((0.0, 1.0, 0.0), (1.0, -1.0, 0.0)))
        assert t == pytest.approx(2.0**0.5, abs=1e-5)

    def test_parallel_ray_misses(self):
        """A ray parallel to the plane returns no intersection."""
        from whitted.core.ray import make_ray
        from whitted.geometry import Plane

        plane = Plane(normal=(0.0, 1.0, 0.0), offset=-1.0)
        assert plane.intersect(make_ray((0.0, 1.0, 0.0), (1.0, 0.0, 0.0))) is None
        # Parallel and lying in the plane is still a miss
        assert plane.intersect(make_ray((0.0, -1.0, 0.0), (0.0, 0.0, 1.0))) is None

    def test_plane_behind_origin_misses(self):
        from whitted.core.ray import make_ray
        from whitted.geometry import Plane

        plane = Plane(normal=(0.0, 1.0, 0.0), offset=-1.0)
        assert plane.intersect(make_ray((0.0, 1.0, 0.0), (0.0, 1.0, 0.0))) is None

    def test_origin_on_plane_hits_at_zero(self):
        """A ray starting on the plane hits it at distance 0."""
        from whitted.core.ray import make_ray
        from whitted.geometry import Plane

        plane = Plane(normal=(0.0, 1.0, 0.0), offset=-1.0)
        t = plane.intersect(make_ray((0.0, -1.0, 0.0), (0.0, -1.0, 0.0)))
        assert t == 0.0

    def test_kernel_hit_plane_parallel(self):
        from whitted.geometry.plane import hit_plane
        from whitted.geometry.sphere import NO_HIT, vec3

        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            t_val[None] = hit_plane(
                vec3(0.0, 1.0, 0.0), vec3(0.0, 1e-8, 1.0), vec3(0.0, 1.0, 0.0), 0.0
            )

        test_kernel()
        assert t_val[None] == NO_HIT


class TestLightMarker:
    """Tests for the light visualization marker."""

    def test_intersects_small_sphere_at_light(self):
        from whitted.core.ray import make_ray
        from whitted.geometry import MARKER_RADIUS, LightMarker
        from whitted.scene import Light

        marker = LightMarker(Light(position=(0.0, 0.0, 0.0)))
        t = marker.intersect(make_ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0)))
        assert t == pytest.approx(5.0 - MARKER_RADIUS, abs=1e-5)

    def test_has_no_surface(self):
        from whitted.geometry import LightMarker
        from whitted.scene import Light

        assert LightMarker(Light(position=(0.0, 1.0, 0.0))).surface is None

    def test_normal_raises(self):
        """Markers are never shaded, so asking for a normal is an error."""
        from whitted.geometry import LightMarker
        from whitted.scene import Light

        marker = LightMarker(Light(position=(0.0, 1.0, 0.0)))
        with pytest.raises(TypeError):
            marker.normal((0.0, 1.1, 0.0))

    def test_requires_light(self):
        from whitted.geometry import LightMarker

        with pytest.raises(TypeError):
            LightMarker((0.0, 1.0, 0.0))

    def test_packs_light_color_as_emission(self):
        from whitted.geometry import LightMarker
        from whitted.geometry.base import COL_EMISSION, COL_SURFACE
        from whitted.scene import Light

        marker = LightMarker(Light(position=(0.0, 1.0, 0.0), color=(0.2, 0.4, 0.6)))
        row = marker.pack()
        assert row[COL_SURFACE] == -1.0
        assert row[COL_EMISSION : COL_EMISSION + 3].tolist() == pytest.approx([0.2, 0.4, 0.6])
