"""Taichi runtime initialization and kernel launch coordination.

Taichi keeps a single process-wide runtime. The tracer launches kernels from
whichever thread calls it (the interactive thread for the coarse pass, an
executor thread for the background pass), so launches are serialized through
one re-entrant lock. A trace holds the lock for one batch at a time, which
lets two concurrent traces interleave instead of one starving the other.

Example:
    >>> from whitted.runtime import init_taichi
    >>> backend = init_taichi("cpu")
"""

from __future__ import annotations

import logging
import os
import threading

import taichi as ti
from taichi.lang.impl import current_cfg

logger = logging.getLogger(__name__)

_kernel_lock = threading.RLock()


def default_worker_count() -> int:
    """Number of CPU workers used by default.

    Half the available hardware parallelism, since a coarse and a fine pass
    may be in flight at the same time.
    """
    return max(1, (os.cpu_count() or 2) // 2)


def kernel_lock() -> threading.RLock:
    """Get the lock that must be held while launching a kernel."""
    return _kernel_lock


def init_taichi(
    arch: str | None = None,
    *,
    max_workers: int | None = None,
    multithreaded: bool = True,
    random_seed: int = 0,
) -> str:
    """Initialize Taichi with the requested (or best available) backend.

    Args:
        arch: "cpu", "gpu", or None to try the GPU first and fall back to CPU.
        max_workers: Cap on CPU worker threads. Defaults to
            default_worker_count().
        multithreaded: If False, the CPU backend runs on a single thread.
        random_seed: Seed for Taichi's internal generator.

    Returns:
        Name of the backend being used ("CPU" or "GPU").

    Raises:
        ValueError: If arch is not one of the supported names or
            max_workers is not positive.
    """
    if arch not in (None, "cpu", "gpu"):
        raise ValueError(f"Unsupported arch: {arch!r} (expected 'cpu', 'gpu' or None)")
    if max_workers is not None and max_workers < 1:
        raise ValueError(f"max_workers must be positive, got {max_workers}")

    workers = max_workers if max_workers is not None else default_worker_count()
    if not multithreaded:
        workers = 1

    with _kernel_lock:
        # Taichi falls back to the CPU by itself when no GPU backend exists
        ti.init(
            arch=ti.cpu if arch == "cpu" else ti.gpu,
            cpu_max_num_threads=workers,
            random_seed=random_seed,
        )
        backend = "CPU" if current_cfg().arch in (ti.x64, ti.arm64) else "GPU"

    if backend == "CPU":
        logger.info("Taichi initialized on CPU with %d worker(s)", workers)
    else:
        logger.info("Taichi initialized on GPU")
    return backend
