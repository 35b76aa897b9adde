"""Execution strategies for the step kernel.

Every backend is a callable ``kernel(current, out, params)`` that writes all
of ``out`` from ``current`` and returns only once the whole grid is done.
They differ in how the per-cell work is dispatched, not in what is computed.
"""
import logging
import os
from concurrent.futures import ThreadPoolExecutor

import numpy as np
from scipy import ndimage

from .errors import BackendUnavailableError, UnknownBackendError
from .grid import SPECIES_A, SPECIES_B
from .kernel import STENCIL, advance_rows, react, step_cell
from .params import kill_rate_profile, resolve_feed_rate

logger = logging.getLogger(__name__)


class SequentialKernel:
    """One cell at a time, in row-major order."""

    name = "sequential"

    def __call__(self, current, out, params):
        height, width = current.shape[:2]
        for y in range(height):
            for x in range(width):
                out[y, x, SPECIES_A], out[y, x, SPECIES_B] = step_cell(current, x, y, params)


class NumpyKernel:
    """The whole grid as one vectorised pass."""

    name = "numpy"

    def __call__(self, current, out, params):
        advance_rows(current, out, params, 0, current.shape[0])


class ThreadedKernel:
    """Row bands of the numpy pass spread over a thread pool.

    numpy drops the GIL inside its ufuncs, so bands run concurrently. The
    call waits on every band before returning; that wait is the barrier in
    front of the buffer swap.
    """

    name = "threaded"

    def __init__(self, workers=None):
        self.workers = workers or os.cpu_count() or 1
        self._executor = ThreadPoolExecutor(max_workers=self.workers,
                                            thread_name_prefix="grayscott")

    def bands(self, height):
        edges = np.linspace(0, height, min(self.workers, height) + 1).astype(int)
        return [(int(start), int(stop)) for start, stop in zip(edges[:-1], edges[1:]) if stop > start]

    def __call__(self, current, out, params):
        futures = [
            self._executor.submit(advance_rows, current, out, params, start, stop)
            for start, stop in self.bands(current.shape[0])
        ]
        for future in futures:
            future.result()

    def close(self):
        self._executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class ScipyKernel:
    """Laplacian by 2D convolution with wrap-around boundaries."""

    name = "scipy"

    def __call__(self, current, out, params):
        width = current.shape[1]
        a = current[..., SPECIES_A]
        b = current[..., SPECIES_B]
        react(
            a, b,
            ndimage.convolve(a, STENCIL, mode="wrap"),
            ndimage.convolve(b, STENCIL, mode="wrap"),
            params,
            resolve_feed_rate(params),
            kill_rate_profile(params, width),
            out[..., SPECIES_A],
            out[..., SPECIES_B],
        )


def _torch_kernel(**options):
    try:
        from .torch_kernel import TorchKernel
    except ImportError as exc:
        raise BackendUnavailableError(f"torch backend needs PyTorch: {exc}") from exc
    return TorchKernel(**options)


def _triton_kernel(**options):
    try:
        from .triton_kernel import TritonKernel
    except ImportError as exc:
        raise BackendUnavailableError(
            f"triton backend needs the 'gpu' extra (triton): {exc}") from exc
    return TritonKernel(**options)


KERNELS = {
    "sequential": SequentialKernel,
    "numpy": NumpyKernel,
    "threaded": ThreadedKernel,
    "scipy": ScipyKernel,
    "torch": _torch_kernel,
    "triton": _triton_kernel,
}


def get_kernel(name="numpy", **options):
    """Instantiate the backend registered under ``name``."""
    try:
        factory = KERNELS[name]
    except KeyError:
        raise UnknownBackendError(
            f"unknown backend {name!r}, expected one of {', '.join(KERNELS)}") from None
    kernel = factory(**options)
    logger.debug("Using %s backend", name)
    return kernel
