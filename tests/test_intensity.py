import numpy as np
import pytest

from grayscott.errors import DegenerateThresholdError, InvalidParameterError
from grayscott.intensity import colorize, map_to_intensity, to_display


def buffer_from_a(values, b=0.0):
    a = np.asarray(values, dtype=np.float64)
    return np.stack([a, np.full_like(a, b)], axis=-1)


def test_threshold_and_sharpness_example():
    buf = buffer_from_a([[0.5, 0.9, 0.7]])
    intensity = map_to_intensity(buf, threshold=0.5, sharpness=1)
    assert intensity[0, 0] == 0.0
    assert intensity[0, 1] == 1.0
    assert intensity[0, 2] == pytest.approx(0.5)


def test_values_outside_curve_saturate():
    buf = buffer_from_a([[0.0, 0.2, 0.95, 1.0]])
    intensity = map_to_intensity(buf, threshold=0.3, sharpness=2.0)
    np.testing.assert_array_equal(intensity, [[0.0, 0.0, 1.0, 1.0]])


def test_sharpness_is_an_exponent():
    buf = buffer_from_a([[0.25]])
    assert map_to_intensity(buf, threshold=0.0, sharpness=1.0)[0, 0] == pytest.approx(0.25 / 0.9)
    soft = map_to_intensity(buf, threshold=0.0, sharpness=0.5)[0, 0]
    hard = map_to_intensity(buf, threshold=0.0, sharpness=2.0)[0, 0]
    assert soft == pytest.approx((0.25 / 0.9) ** 0.5)
    assert hard == pytest.approx((0.25 / 0.9) ** 2)
    assert hard < 0.25 / 0.9 < soft


def test_species_b_is_ignored():
    a = np.linspace(0, 1, 12).reshape(3, 4)
    first = map_to_intensity(buffer_from_a(a, b=0.0), 0.2, 0.7)
    second = map_to_intensity(buffer_from_a(a, b=1.0), 0.2, 0.7)
    np.testing.assert_array_equal(first, second)
    assert first.shape == (3, 4)
    assert first.dtype == np.float64


def test_output_range_and_repeatability():
    rng = np.random.default_rng(0)
    buf = rng.random((16, 16, 2))
    first = map_to_intensity(buf, 0.1, 0.1)
    assert first.min() >= 0 and first.max() <= 1
    np.testing.assert_array_equal(first, map_to_intensity(buf.copy(), 0.1, 0.1))


@pytest.mark.parametrize("threshold", [0.9, 0.95, 2.0, float("nan")])
def test_degenerate_threshold_rejected(threshold):
    with pytest.raises(DegenerateThresholdError):
        map_to_intensity(buffer_from_a([[0.5]]), threshold, 1.0)


def test_degenerate_threshold_is_a_value_error():
    with pytest.raises(ValueError):
        map_to_intensity(buffer_from_a([[0.5]]), 0.9, 1.0)


@pytest.mark.parametrize("sharpness", [0, -1.0])
def test_non_positive_sharpness_rejected(sharpness):
    with pytest.raises(InvalidParameterError):
        map_to_intensity(buffer_from_a([[0.5]]), 0.5, sharpness)


def test_float32_buffer_accepted():
    buf = buffer_from_a([[0.7]]).astype(np.float32)
    assert map_to_intensity(buf, 0.5, 1.0)[0, 0] == pytest.approx(0.5, abs=1e-6)


def test_to_display_rounds_half_up():
    pixels = to_display(np.array([0.0, 0.5, 1.0, 1 / 255 * 0.49]))
    assert pixels.dtype == np.uint8
    assert pixels.tolist() == [0, 128, 255, 0]


@pytest.mark.parametrize("cmap", ["gray", "cyberpunk", "inferno"])
def test_colorize(cmap):
    rgb = colorize(np.linspace(0, 1, 20).reshape(4, 5), cmap)
    assert rgb.shape == (4, 5, 3)
    assert rgb.dtype == np.uint8


def test_colorize_gray_endpoints():
    rgb = colorize(np.array([[0.0, 1.0]]), "gray")
    assert rgb[0, 0].tolist() == [0, 0, 0]
    assert rgb[0, 1].tolist() == [255, 255, 255]


def test_colorize_gray_rounds_like_display_scaling():
    levels = np.arange(256) / 255
    rgb = colorize(levels.reshape(16, 16), "gray")
    np.testing.assert_array_equal(rgb[..., 0].ravel(), to_display(levels))
    np.testing.assert_array_equal(rgb[..., 0].ravel(), np.arange(256))
