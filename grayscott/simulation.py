"""Simulation session: grid state, a kernel backend and the last parameters."""
import logging

import numpy as np

from .backends import get_kernel
from .grid import SEED_SPOTS, SPOT_RADIUS, SPECIES_A, SPECIES_B, GridState
from .intensity import map_to_intensity
from .params import coerce_parameters

logger = logging.getLogger(__name__)


class Simulation:
    """Advance a Gray-Scott grid in batches and expose its intensity field.

    Callers supply a parameter set with each ``advance``; the set is frozen
    for that batch, so edits made while it runs only apply to the next one.
    ``reset`` and ``advance`` must not run concurrently.
    """

    def __init__(self, width, height, backend="numpy", seed=None, dtype=np.float64,
                 spots=SEED_SPOTS, radius=SPOT_RADIUS, **backend_options):
        self.grid = GridState(width, height, dtype=dtype, rng=np.random.default_rng(seed),
                              spots=spots, radius=radius)
        self.kernel = get_kernel(backend, **backend_options) if isinstance(backend, str) else backend
        self.params = coerce_parameters(None)
        self.steps_taken = 0
        self.batches = 0
        logger.info("Started %dx%d session on the %s backend", width, height,
                    getattr(self.kernel, "name", type(self.kernel).__name__))

    @property
    def width(self):
        return self.grid.width

    @property
    def height(self):
        return self.grid.height

    def initialize(self, width, height):
        """Reallocate for a new grid size and seed it."""
        self.grid.initialize(width, height)
        self.steps_taken = 0
        self.batches = 0

    def reset(self):
        """Discard the current state and seed fresh random spots."""
        self.grid.reset()
        self.steps_taken = 0
        self.batches = 0

    def advance(self, params=None):
        """Run ``params.iterations`` steps and return the current buffer (read-only)."""
        params = coerce_parameters(params)
        self.params = params
        for _ in range(params.iterations):
            self.grid.step(self.kernel, params)
        self.steps_taken += params.iterations
        self.batches += 1

        if logger.isEnabledFor(logging.DEBUG):
            current = self.grid.current
            U, V = current[..., SPECIES_A], current[..., SPECIES_B]
            logger.debug("Step %d: U range [%.4f, %.4f], V range [%.4f, %.4f]",
                         self.steps_taken, U.min(), U.max(), V.min(), V.max())
        return self.grid.read_current()

    def read_current(self):
        return self.grid.read_current()

    def map_to_intensity(self, params=None):
        """Intensity field of the current buffer.

        Uses the curve of ``params`` if given, else of the last advanced batch.
        """
        params = self.params if params is None else coerce_parameters(params)
        return map_to_intensity(self.grid.current, params.threshold, params.sharpness)

    def close(self):
        close = getattr(self.kernel, "close", None)
        if close is not None:
            close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
