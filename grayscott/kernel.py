"""Explicit finite-difference Gray-Scott step on a toroidal grid.

Each cell reads a 3x3 neighbourhood of ``current`` and writes only its own
cell of ``out``:

    lap  = 0.2 * (edge neighbours) + 0.05 * (corner neighbours) - center
    A'   = a + (dA * lapA - a*b*b + feedRate * (1 - a))
    B'   = b + (dB * lapB + a*b*b - (feedRate + killRate) * b)

and clamps A', B' to [0, 1]. Intermediate values are never clamped.

``step_cell`` is the scalar form, ``advance_rows`` the vectorised one. Both
evaluate the same floating point operations in the same order, so in float64
they agree bit for bit and any split of the rows gives the same grid.
"""
import numpy as np

from .grid import SPECIES_A, SPECIES_B
from .params import kill_rate_profile, resolve_feed_rate, resolve_rates

EDGE_WEIGHT = 0.2
CORNER_WEIGHT = 0.05
CENTER_WEIGHT = -1.0

STENCIL = np.array([
    [CORNER_WEIGHT, EDGE_WEIGHT, CORNER_WEIGHT],
    [EDGE_WEIGHT, CENTER_WEIGHT, EDGE_WEIGHT],
    [CORNER_WEIGHT, EDGE_WEIGHT, CORNER_WEIGHT],
])


def _laplacian_rows(field, start, stop):
    height = field.shape[0]
    rows = np.arange(start, stop)
    up = field[(rows - 1 + height) % height]
    mid = field[start:stop]
    down = field[(rows + 1) % height]

    # np.roll(z, 1, axis=1)[:, x] is z[:, x - 1]
    edges = up + down + np.roll(mid, 1, axis=1) + np.roll(mid, -1, axis=1)
    corners = (np.roll(up, 1, axis=1) + np.roll(up, -1, axis=1)
               + np.roll(down, 1, axis=1) + np.roll(down, -1, axis=1))
    return edges * EDGE_WEIGHT + corners * CORNER_WEIGHT + mid * CENTER_WEIGHT


def laplacian(field):
    """9-point Laplacian with periodic boundaries.

    ``field`` is (H, W) or (H, W, species); the stencil runs over the first
    two axes.
    """
    return _laplacian_rows(field, 0, field.shape[0])


def react(a, b, lap_a, lap_b, params, feed_rate, kill_rate, out_a, out_b):
    """Gray-Scott update of already computed Laplacians, clamped into out_a/out_b."""
    reaction = a * b * b
    next_a = a + (params.d_a * lap_a - reaction + feed_rate * (1 - a))
    next_b = b + (params.d_b * lap_b + reaction - (feed_rate + kill_rate) * b)
    np.clip(next_a, 0, 1, out=out_a)
    np.clip(next_b, 0, 1, out=out_b)


def advance_rows(current, out, params, start, stop):
    """Write rows [start, stop) of ``out`` from the whole of ``current``."""
    width = current.shape[1]
    lap = _laplacian_rows(current, start, stop)
    react(
        current[start:stop, :, SPECIES_A],
        current[start:stop, :, SPECIES_B],
        lap[..., SPECIES_A],
        lap[..., SPECIES_B],
        params,
        resolve_feed_rate(params),
        kill_rate_profile(params, width),
        out[start:stop, :, SPECIES_A],
        out[start:stop, :, SPECIES_B],
    )


def _clamp(value):
    return max(0.0, min(1.0, value))


def step_cell(current, x, y, params):
    """New (a, b) of cell (x, y), computed one scalar at a time."""
    height, width = current.shape[:2]
    feed_rate, kill_rate = resolve_rates(params, x, width)

    x_left = (x - 1 + width) % width
    x_right = (x + 1) % width
    y_up = (y - 1 + height) % height
    y_down = (y + 1) % height

    def lap(species):
        c = current
        edges = (float(c[y_up, x, species]) + float(c[y_down, x, species])
                 + float(c[y, x_left, species]) + float(c[y, x_right, species]))
        corners = (float(c[y_up, x_left, species]) + float(c[y_up, x_right, species])
                   + float(c[y_down, x_left, species]) + float(c[y_down, x_right, species]))
        return edges * EDGE_WEIGHT + corners * CORNER_WEIGHT + float(c[y, x, species]) * CENTER_WEIGHT

    a = float(current[y, x, SPECIES_A])
    b = float(current[y, x, SPECIES_B])
    reaction = a * b * b
    next_a = a + (params.d_a * lap(SPECIES_A) - reaction + feed_rate * (1 - a))
    next_b = b + (params.d_b * lap(SPECIES_B) + reaction - (feed_rate + kill_rate) * b)
    return _clamp(next_a), _clamp(next_b)
