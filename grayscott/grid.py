"""Double-buffered concentration state on a toroidal grid."""
from __future__ import annotations

import logging
import numbers

import numpy as np

from .errors import GridAllocationError, InvalidGridSizeError

logger = logging.getLogger(__name__)

SPECIES_A = 0
SPECIES_B = 1

SEED_SPOTS = 20
SPOT_RADIUS = 3


def _check_size(name, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidGridSizeError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidGridSizeError(f"{name} must be >= 1, got {value}")
    return int(value)


def spot_offsets(radius: int) -> np.ndarray:
    """(dy, dx) pairs of every lattice point with dx^2 + dy^2 <= radius^2."""
    dy, dx = np.ogrid[-radius:radius + 1, -radius:radius + 1]
    ys, xs = np.nonzero(dx * dx + dy * dy <= radius * radius)
    return np.stack([ys - radius, xs - radius], axis=1)


class GridState:
    """Two (H, W, 2) concentration buffers in one arena, addressed by index.

    ``current`` is ``arena[active]`` and ``next`` is ``arena[1 - active]``.
    The active index only flips after a kernel has written every cell of
    ``next``, so nothing ever observes a half-updated grid.
    """

    def __init__(self, width, height, dtype=np.float64, rng=None,
                 spots=SEED_SPOTS, radius=SPOT_RADIUS):
        self.dtype = np.dtype(dtype)
        self.spots = spots
        self.radius = radius
        self.rng = rng if rng is not None else np.random.default_rng()
        self.arena = None
        self.active = 0
        self.initialize(width, height)

    @property
    def width(self):
        return self.arena.shape[2]

    @property
    def height(self):
        return self.arena.shape[1]

    @property
    def shape(self):
        return self.arena.shape[1:]

    @property
    def current(self):
        return self.arena[self.active]

    @property
    def next(self):
        return self.arena[1 - self.active]

    def initialize(self, width, height):
        width = _check_size("width", width)
        height = _check_size("height", height)
        try:
            arena = np.zeros((2, height, width, 2), dtype=self.dtype)
        except (MemoryError, ValueError) as exc:
            raise GridAllocationError(
                f"cannot allocate a {width}x{height} grid: {exc}") from exc
        self.arena = arena
        self.active = 0
        logger.info("Allocated %dx%d grid (%s, %.1f MiB)", width, height,
                    self.dtype.name, arena.nbytes / 2**20)
        self.seed()

    def seed(self):
        """Fill current with pure A and stamp random B spots onto it."""
        current = self.current
        current[..., SPECIES_A] = 1
        current[..., SPECIES_B] = 0
        self.next[...] = 0

        height, width = self.height, self.width
        offsets = spot_offsets(self.radius)
        for _ in range(self.spots):
            x = int(self.rng.integers(0, width))
            y = int(self.rng.integers(0, height))
            py = (y + offsets[:, 0] + height) % height
            px = (x + offsets[:, 1] + width) % width
            current[py, px, SPECIES_A] = 0
            current[py, px, SPECIES_B] = 1

    def reset(self):
        self.active = 0
        self.seed()
        logger.info("Reset %dx%d grid with %d seed spots", self.width, self.height, self.spots)

    def swap(self):
        self.active = 1 - self.active

    def step(self, kernel, params):
        kernel(self.current, self.next, params)
        self.swap()

    def read_current(self) -> np.ndarray:
        view = self.current.view()
        view.flags.writeable = False
        return view

    def species_a(self) -> np.ndarray:
        return self.read_current()[..., SPECIES_A]

    def species_b(self) -> np.ndarray:
        return self.read_current()[..., SPECIES_B]

    def total_b(self) -> float:
        return float(self.current[..., SPECIES_B].sum())
