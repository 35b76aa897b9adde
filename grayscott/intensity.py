"""Concentration buffer -> grayscale intensity field.

Only species A is shown. The transfer curve is

    mapped    = clip((a - threshold) / (0.9 - threshold), 0, 1)
    intensity = mapped ** sharpness

so ``threshold`` sets the black point, 0.9 the white point, and
``sharpness`` is a contrast exponent (< 1 lifts midtones, > 1 crushes them).
"""
import matplotlib
import numpy as np
from matplotlib.colors import LinearSegmentedColormap

from .errors import DegenerateThresholdError, InvalidParameterError
from .grid import SPECIES_A

WHITE_POINT = 0.9

# Vibrant cyberpunk colormap
CYBERPUNK = LinearSegmentedColormap.from_list("cyberpunk", [
    (0.02, 0.02, 0.1),    # Deep dark blue-black
    (0.1, 0.0, 0.3),      # Dark purple
    (0.0, 0.2, 0.8),      # Electric blue
    (0.0, 0.8, 0.9),      # Bright cyan
    (0.4, 1.0, 0.6),      # Bright green-cyan
    (1.0, 0.8, 0.0),      # Electric yellow
    (1.0, 0.2, 0.8),      # Hot pink
], N=256)


def check_curve(threshold, sharpness):
    if not threshold < WHITE_POINT:
        raise DegenerateThresholdError(
            f"threshold must be below {WHITE_POINT}, got {threshold}")
    if not sharpness > 0:
        raise InvalidParameterError(f"sharpness must be > 0, got {sharpness}")


def map_to_intensity(buffer, threshold, sharpness):
    """Intensity in [0, 1] for every cell of an (H, W, 2) buffer, float64."""
    check_curve(threshold, sharpness)
    gs = np.asarray(buffer, dtype=np.float64)[..., SPECIES_A]
    gs_map = (gs - threshold) / (WHITE_POINT - threshold)
    return np.power(np.clip(gs_map, 0, 1), sharpness)


def to_display(intensity):
    """Scale to uint8 0..255, rounding halves up."""
    return np.floor(np.asarray(intensity) * 255 + 0.5).astype(np.uint8)


def colorize(intensity, cmap="gray"):
    """(H, W, 3) uint8 RGB image of an intensity field."""
    if isinstance(cmap, str):
        cmap = CYBERPUNK if cmap == "cyberpunk" else matplotlib.colormaps[cmap]
    rgb = cmap(np.asarray(intensity))[..., :3]
    return np.floor(rgb * 255 + 0.5).astype(np.uint8)
