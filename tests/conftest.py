import numpy as np
import pytest

from grayscott.params import ParameterSet


def random_state(height, width, seed=0):
    """An (H, W, 2) float64 buffer of uniform random concentrations."""
    rng = np.random.default_rng(seed)
    return rng.random((height, width, 2))


class FixedRng:
    """Stands in for a numpy Generator, handing out preset integers."""

    def __init__(self, values):
        self.values = list(values)

    def integers(self, low, high):
        value = self.values.pop(0)
        assert low <= value < high
        return value


@pytest.fixture
def params():
    return ParameterSet()


@pytest.fixture
def adversarial_params():
    return ParameterSet(d_a=2.0, d_b=2.0, feed=-0.5, feed_diff=10.0, feed_variation=100,
                        kill_min=-1.0, kill_max=3.0, iterations=20)
