"""Coarse foreground pass plus fine background pass.

Interactive rendering traces every frame twice. A realtime pass with large
raster blocks runs synchronously so camera input stays responsive. When it
completes, a background pass at full quality starts in a worker thread,
writing into its own buffer, watching its own cancellation event and using a
frozen snapshot of the camera. When the camera moves again, the stale
background pass is signalled to stop and keeps running until its next
cancellation poll, concurrently with the new realtime pass. It is awaited
before the next background pass reuses its buffer, so two traces never write
the same buffer.

Example:
    >>> from whitted.config import PassSettings
    >>> from whitted.core.dual_pass import DualPassRenderer
    >>> from whitted.scene.demo import create_demo_scene
    >>> scene, camera = create_demo_scene()
    >>> with DualPassRenderer(scene, 320, 240) as renderer:
    ...     renderer.render_frame(camera)
    ...     renderer.wait_background()
    ...     image = renderer.final_image()
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from whitted.config import PassSettings
from whitted.core.options import TracingConfig
from whitted.core.tracer import trace_scene

if TYPE_CHECKING:
    from whitted.camera.camera import Camera, CameraState
    from whitted.scene.scene import Scene

logger = logging.getLogger(__name__)


class DualPassRenderer:
    """Runs realtime and background passes over a scene.

    Args:
        scene: The scene to render.
        width: Image width in pixels.
        height: Image height in pixels.
        realtime: Parameters of the synchronous pass.
        background: Parameters of the background pass.
        seed: Seed for the soft-shadow jitter.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(
        self,
        scene: Scene,
        width: int,
        height: int,
        *,
        realtime: PassSettings | None = None,
        background: PassSettings | None = None,
        seed: int = 0,
    ) -> None:
        self._scene = scene
        self._realtime = realtime if realtime is not None else PassSettings(8, 1)
        self._background = background if background is not None else PassSettings(1, 32)

        # Validates the size once; the buffers are reused for every frame
        self._preview = TracingConfig.allocate(
            width,
            height,
            sample_count=self._realtime.sample_count,
            raster_block=self._realtime.raster_block,
            seed=seed,
        )
        self._final_target = np.zeros_like(self._preview.target)
        self.width = width
        self.height = height
        self._seed = seed

        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="whitted-background")
        self._future: Future[bool] | None = None
        self._cancel_event: threading.Event | None = None
        self._closed = False

    @property
    def realtime(self) -> PassSettings:
        return self._realtime

    @property
    def background(self) -> PassSettings:
        return self._background

    def render_frame(self, camera: Camera | CameraState) -> bool:
        """Render a new frame for the camera's current state.

        Signals any running background pass to stop, traces the realtime pass
        synchronously while the stale pass winds down, waits for the stale
        pass to exit, then starts a new background pass if the realtime pass
        completed.

        Returns:
            True if the realtime pass completed.

        Raises:
            RuntimeError: If the renderer has been closed.
        """
        if self._closed:
            raise RuntimeError("DualPassRenderer is closed")

        stale = self._signal_background()
        state = camera.snapshot()
        try:
            completed = trace_scene(self._scene, state, self._preview)
        finally:
            # The final buffer is reused, so the stale pass must be gone first
            if stale is not None:
                stale.result()
        if not completed:
            return False

        self._cancel_event = threading.Event()
        config = TracingConfig(
            width=self.width,
            height=self.height,
            target=self._final_target,
            sample_count=self._background.sample_count,
            raster_block=self._background.raster_block,
            cancellation=self._cancel_event,
            seed=self._seed,
        )
        self._future = self._executor.submit(self._run_background, state, config)
        return True

    def _run_background(self, state: CameraState, config: TracingConfig) -> bool:
        completed = trace_scene(self._scene, state, config)
        if completed:
            logger.info("Background pass finished (%dx%d)", self.width, self.height)
        else:
            logger.debug("Background pass cancelled")
        return completed

    def background_done(self) -> bool:
        """True if the latest background pass has finished (or none exists)."""
        return self._future is None or self._future.done()

    def wait_background(self, timeout: float | None = None) -> bool:
        """Block until the latest background pass ends.

        Returns:
            True if the pass completed without cancellation, False if it was
            cancelled, did not finish within timeout, or was never started.

        Raises:
            Exception: Whatever the background trace raised.
        """
        if self._future is None:
            return False
        try:
            return self._future.result(timeout=timeout)
        except FutureTimeoutError:
            return False

    def _signal_background(self) -> Future[bool] | None:
        """Set the running pass's cancellation event and detach it."""
        future = self._future
        if future is None:
            return None
        if not future.done():
            logger.debug("Cancelling stale background pass")
        if self._cancel_event is not None:
            self._cancel_event.set()
        self._future = None
        self._cancel_event = None
        return future

    def cancel_background(self) -> None:
        """Cancel the running background pass and wait for it to stop."""
        future = self._signal_background()
        if future is not None:
            # Re-raises any exception from the background trace
            future.result()

    def preview_image(self) -> npt.NDArray[np.float32]:
        """The realtime pass buffer as a (height, width, 3) view."""
        return self._preview.image()

    def final_image(self) -> npt.NDArray[np.float32] | None:
        """Copy of the background pass result, or None if it has not completed."""
        if self._future is None or not self._future.done():
            return None
        if not self._future.result():
            return None
        return self._final_target.reshape(self.height, self.width, 3).copy()

    def close(self) -> None:
        """Cancel background work and shut the worker thread down."""
        if self._closed:
            return
        try:
            self.cancel_background()
        finally:
            self._executor.shutdown(wait=True)
            self._closed = True

    def __enter__(self) -> DualPassRenderer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"DualPassRenderer(width={self.width}, height={self.height}, "
            f"realtime={self._realtime}, background={self._background})"
        )
