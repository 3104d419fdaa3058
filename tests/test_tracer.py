"""Unit tests for the outer tracing driver.

Tests cover:
- Pixel layout and block replication (including clipped edge blocks)
- Agreement with the single-ray entry point
- Cooperative cancellation
- Multi-sample averaging and determinism
- Coarse and fine traces running concurrently on separate buffers
"""

import threading

import numpy as np
import pytest


class CountingToken:
    """Cancellation token that reports set after a number of polls."""

    def __init__(self, polls_before_set):
        self.polls = 0
        self.polls_before_set = polls_before_set

    def is_set(self):
        self.polls += 1
        return self.polls > self.polls_before_set


def _trace(scene, camera, width, height, **kwargs):
    from whitted.core.options import TracingConfig
    from whitted.core.tracer import trace_scene

    cells_per_batch = kwargs.pop("cells_per_batch", None)
    config = TracingConfig.allocate(width, height, **kwargs)
    assert trace_scene(scene, camera, config, cells_per_batch=cells_per_batch)
    return config.image()


class TestTraceScene:
    """Tests for full-image traces."""

    def test_single_pixel_sees_sphere_center(self, sphere_scene):
        scene, camera = sphere_scene
        image = _trace(scene, camera, 1, 1)
        expected = 0.1 + 1.0 / 5.0**0.5
        np.testing.assert_allclose(image[0, 0], (expected,) * 3, atol=1e-4)

    def test_corners_miss(self, sphere_scene):
        scene, camera = sphere_scene
        image = _trace(scene, camera, 16, 16)
        for x, y in [(0, 0), (15, 0), (0, 15), (15, 15)]:
            assert image[y, x].tolist() == [0.0, 0.0, 0.0]
        assert image[8, 8].max() > 0.1

    def test_matches_color_for_ray(self, sphere_scene):
        """Each pixel is traced through its center and clamped."""
        from whitted.core.tracer import color_for_ray

        scene, camera = sphere_scene
        image = _trace(scene, camera, 8, 8)
        for x, y in [(3, 3), (4, 3), (3, 4), (4, 4)]:
            ray = camera.ray_for_raster(x + 0.5, y + 0.5, 8, 8)
            expected = np.clip(color_for_ray(scene, ray), 0.0, 1.0)
            np.testing.assert_allclose(image[y, x], expected, atol=1e-3)

    def test_zero_size_completes(self, sphere_scene):
        from whitted.core.options import TracingConfig
        from whitted.core.tracer import trace_scene

        scene, camera = sphere_scene
        assert trace_scene(scene, camera, TracingConfig.allocate(0, 4))
        assert trace_scene(scene, camera, TracingConfig.allocate(4, 0))

    def test_accepts_camera_snapshot(self, sphere_scene):
        scene, camera = sphere_scene
        live = _trace(scene, camera, 8, 6)
        frozen = _trace(scene, camera.snapshot(), 8, 6)
        np.testing.assert_array_equal(live, frozen)

    def test_output_is_clamped(self, mirror_box):
        from whitted.camera import Camera

        camera = Camera(position=(0.0, 0.0, 0.0), look_at=(0.3, -0.2, -1.0))
        image = _trace(mirror_box, camera, 12, 12)
        assert image.min() >= 0.0
        assert image.max() <= 1.0
        assert image.max() > 0.0

    def test_batch_size_does_not_change_result(self, sphere_scene):
        scene, camera = sphere_scene
        default = _trace(scene, camera, 10, 7)
        tiny = _trace(scene, camera, 10, 7, cells_per_batch=1)
        np.testing.assert_array_equal(default, tiny)

    def test_invalid_arguments(self, sphere_scene):
        from whitted.core.options import TracingConfig
        from whitted.core.tracer import trace_scene

        scene, camera = sphere_scene
        with pytest.raises(TypeError):
            trace_scene(scene, camera, object())
        with pytest.raises(TypeError):
            trace_scene(scene, camera, TracingConfig.allocate(2, 2), cancellation=object())
        with pytest.raises(ValueError):
            trace_scene(scene, camera, TracingConfig.allocate(2, 2), cells_per_batch=0)


class TestRasterBlocks:
    """Tests for block tracing."""

    def test_blocks_share_one_color(self, sphere_scene):
        scene, camera = sphere_scene
        image = _trace(scene, camera, 8, 8, raster_block=4)
        for by in range(2):
            for bx in range(2):
                block = image[by * 4 : by * 4 + 4, bx * 4 : bx * 4 + 4]
                assert (block == block[0, 0]).all()

    def test_edge_blocks_are_clipped(self, sphere_scene):
        """A 6x5 image with 4-pixel blocks has partial blocks on the right and bottom."""
        from whitted.core.options import TracingConfig
        from whitted.core.tracer import trace_scene

        scene, camera = sphere_scene
        config = TracingConfig.allocate(6, 5, raster_block=4)
        config.target[:] = np.nan
        assert trace_scene(scene, camera, config)

        image = config.image()
        assert not np.isnan(image).any()
        for ys, xs in [
            (slice(0, 4), slice(0, 4)),
            (slice(0, 4), slice(4, 6)),
            (slice(4, 5), slice(0, 4)),
            (slice(4, 5), slice(4, 6)),
        ]:
            block = image[ys, xs]
            assert (block == block[0, 0]).all()

    def test_block_one_is_full_resolution(self, sphere_scene):
        """At 32x32 the lit sphere covers dozens of pixels with varying shade."""
        scene, camera = sphere_scene
        fine = _trace(scene, camera, 32, 32, raster_block=1)
        coarse = _trace(scene, camera, 32, 32, raster_block=2)
        assert len(np.unique(fine.reshape(-1, 3), axis=0)) > 10
        assert not np.array_equal(fine, coarse)


class TestCancellation:
    """Tests for cooperative cancellation."""

    def test_cancelled_before_start_leaves_buffer(self, sphere_scene):
        from whitted.core.options import TracingConfig
        from whitted.core.tracer import trace_scene

        scene, camera = sphere_scene
        event = threading.Event()
        event.set()
        config = TracingConfig.allocate(4, 4)
        config.target[:] = 0.25
        assert not trace_scene(scene, camera, config, event)
        assert (config.target == 0.25).all()

    def test_cancelled_between_batches(self, sphere_scene):
        from whitted.core.options import TracingConfig
        from whitted.core.tracer import trace_scene

        scene, camera = sphere_scene
        token = CountingToken(polls_before_set=3)
        config = TracingConfig.allocate(16, 16)
        assert not trace_scene(scene, camera, config, token, cells_per_batch=16)
        assert token.polls == 4

    def test_config_token_is_used(self, sphere_scene):
        from whitted.core.options import TracingConfig
        from whitted.core.tracer import trace_scene

        scene, camera = sphere_scene
        event = threading.Event()
        config = TracingConfig.allocate(4, 4, cancellation=event)
        assert trace_scene(scene, camera, config)
        event.set()
        assert not trace_scene(scene, camera, config)

    def test_uncancelled_token_completes(self, sphere_scene):
        from whitted.core.options import TracingConfig
        from whitted.core.tracer import trace_scene

        scene, camera = sphere_scene
        token = CountingToken(polls_before_set=1000)
        config = TracingConfig.allocate(16, 16)
        assert trace_scene(scene, camera, config, token, cells_per_batch=16)
        # One poll up front, then one per block-row
        assert token.polls == 17


class TestSampling:
    """Tests for multi-sample averaging."""

    def test_two_samples_equal_one(self, sphere_scene):
        """Samples 0 and 1 both use the exact light positions."""
        scene, camera = sphere_scene
        one = _trace(scene, camera, 8, 8, sample_count=1)
        two = _trace(scene, camera, 8, 8, sample_count=2)
        np.testing.assert_array_equal(one, two)

    def test_many_samples_are_deterministic(self, sphere_scene):
        from whitted.preview import compute_rmse

        scene, camera = sphere_scene
        first = _trace(scene, camera, 12, 12, sample_count=8, seed=3)
        second = _trace(scene, camera, 12, 12, sample_count=8, seed=3)
        np.testing.assert_array_equal(first, second)

        hard = _trace(scene, camera, 12, 12, sample_count=1)
        assert compute_rmse(first, hard) < 0.05

    def test_largest_seed_traces(self, sphere_scene):
        from whitted.core.options import I32_MAX

        scene, camera = sphere_scene
        image = _trace(scene, camera, 8, 8, sample_count=3, seed=I32_MAX)
        assert image.max() > 0.1


class GatedToken:
    """Never set on the first poll; the second poll waits for the gate, then reads cancel."""

    def __init__(self, gate, cancel):
        self.gate = gate
        self.cancel = cancel
        self.polls = 0

    def is_set(self):
        self.polls += 1
        if self.polls == 1:
            return False
        if self.polls == 2:
            self.gate.wait(timeout=30)
        return self.cancel.is_set()


class TestConcurrentTraces:
    """A coarse and a fine trace running at the same time in different threads."""

    def test_concurrent_results_match_sequential(self, sphere_scene):
        from concurrent.futures import ThreadPoolExecutor

        from whitted.core.options import TracingConfig
        from whitted.core.tracer import trace_scene

        scene, camera = sphere_scene
        coarse_expected = _trace(scene, camera, 24, 16, raster_block=4)
        fine_expected = _trace(scene, camera, 24, 16, sample_count=4, seed=5)

        coarse = TracingConfig.allocate(24, 16, raster_block=4)
        fine = TracingConfig.allocate(
            24, 16, sample_count=4, seed=5, cancellation=threading.Event()
        )
        with ThreadPoolExecutor(max_workers=1) as pool:
            fine_future = pool.submit(
                trace_scene, scene, camera.snapshot(), fine, None, cells_per_batch=24
            )
            assert trace_scene(scene, camera, coarse, threading.Event(), cells_per_batch=6)
            assert fine_future.result(timeout=60)

        np.testing.assert_array_equal(coarse.image(), coarse_expected)
        np.testing.assert_array_equal(fine.image(), fine_expected)

    def test_cancelling_fine_trace_leaves_coarse_intact(self, sphere_scene):
        from concurrent.futures import ThreadPoolExecutor

        from whitted.core.options import TracingConfig
        from whitted.core.tracer import trace_scene

        scene, camera = sphere_scene
        coarse_expected = _trace(scene, camera, 24, 16, raster_block=4)

        gate = threading.Event()
        cancel = threading.Event()
        token = GatedToken(gate, cancel)
        coarse = TracingConfig.allocate(24, 16, raster_block=4)
        fine = TracingConfig.allocate(24, 16, sample_count=4)
        with ThreadPoolExecutor(max_workers=1) as pool:
            # The fine trace is held mid-image until the coarse trace has finished
            fine_future = pool.submit(
                trace_scene, scene, camera.snapshot(), fine, token, cells_per_batch=24
            )
            try:
                assert trace_scene(scene, camera, coarse, cells_per_batch=6)
                cancel.set()
            finally:
                gate.set()
            assert not fine_future.result(timeout=60)

        assert token.polls == 2
        np.testing.assert_array_equal(coarse.image(), coarse_expected)
