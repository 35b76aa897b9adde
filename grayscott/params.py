"""Parameter set and the per-cell feed/kill rates derived from it.

The step kernel never reads ``feed`` or ``killMin``/``killMax`` directly. It asks
this module for the two rates of the column it is updating:

    feedRate = feed + ((feedVariation - 50) * feedDiff) / 100
    killRate = killMin + (x / W) * (killMax - killMin)

The feed rate is uniform over the grid, the kill rate only changes along the
horizontal axis, so one run sweeps spots -> stripes -> mazes from left to right.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Mapping

import numpy as np

from .errors import InvalidParameterError

# external (camelCase) key -> dataclass field
KEY_ALIASES = {
    "dA": "d_a",
    "dB": "d_b",
    "feed": "feed",
    "feedDiff": "feed_diff",
    "feedVariation": "feed_variation",
    "killMin": "kill_min",
    "killMax": "kill_max",
    "iterations": "iterations",
    "sharpness": "sharpness",
    "threshold": "threshold",
}


@dataclass(frozen=True)
class ParameterSet:
    d_a: float = 1.0            # diffusion rate of A
    d_b: float = 0.5            # diffusion rate of B
    feed: float = 0.03
    feed_diff: float = 0.015    # feed variation scale
    feed_variation: float = 50  # 0..100, 50 = no variation
    kill_min: float = 0.056
    kill_max: float = 0.059
    iterations: int = 8         # steps per advance() call
    sharpness: float = 0.1      # contrast exponent of the intensity curve
    threshold: float = 0.5      # intensity curve lower edge, < 0.9

    def __post_init__(self):
        iterations = self.iterations
        # sliders hand back floats, 8.0 is fine
        if isinstance(iterations, float) and iterations.is_integer():
            iterations = int(iterations)
        if isinstance(iterations, bool) or not isinstance(iterations, (int, np.integer)):
            raise InvalidParameterError(f"iterations must be an integer, got {iterations!r}")
        if iterations < 1:
            raise InvalidParameterError(f"iterations must be >= 1, got {iterations}")
        object.__setattr__(self, "iterations", int(iterations))
        for field in dataclasses.fields(self):
            if field.name == "iterations":
                continue
            value = getattr(self, field.name)
            try:
                object.__setattr__(self, field.name, float(value))
            except (TypeError, ValueError) as exc:
                raise InvalidParameterError(f"{field.name} must be a number, got {value!r}") from exc

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], base: ParameterSet | None = None) -> ParameterSet:
        """Build a parameter set from camelCase or snake_case keys.

        Keys missing from ``mapping`` are taken from ``base`` (defaults if None).
        """
        values = dataclasses.asdict(base if base is not None else cls())
        field_names = set(values)
        for key, value in mapping.items():
            name = KEY_ALIASES.get(key, key)
            if name not in field_names:
                raise InvalidParameterError(f"unknown parameter {key!r}")
            values[name] = value
        return cls(**values)

    def to_mapping(self) -> dict:
        return {key: getattr(self, name) for key, name in KEY_ALIASES.items()}

    def replace(self, **changes) -> ParameterSet:
        return dataclasses.replace(self, **changes)


def coerce_parameters(params: ParameterSet | Mapping[str, Any] | None) -> ParameterSet:
    if params is None:
        return ParameterSet()
    if isinstance(params, ParameterSet):
        return params
    return ParameterSet.from_mapping(params)


def resolve_feed_rate(params: ParameterSet) -> float:
    return params.feed + ((params.feed_variation - 50) * params.feed_diff) / 100


def resolve_kill_rate(params: ParameterSet, x: int, width: int) -> float:
    normalized_x = x / width
    return params.kill_min + normalized_x * (params.kill_max - params.kill_min)


def resolve_rates(params: ParameterSet, x: int, width: int) -> tuple[float, float]:
    """(feedRate, killRate) for column ``x`` of a grid ``width`` cells wide."""
    return resolve_feed_rate(params), resolve_kill_rate(params, x, width)


def kill_rate_profile(params: ParameterSet, width: int) -> np.ndarray:
    """Kill rate of every column, shape (width,), float64.

    Evaluates the same expression as resolve_kill_rate element by element so
    the vectorised kernels match the per-cell reference bit for bit.
    """
    normalized_x = np.arange(width, dtype=np.float64) / width
    return params.kill_min + normalized_x * (params.kill_max - params.kill_min)
