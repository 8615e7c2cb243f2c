from pathlib import Path
import sys

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from audio_spectrogram.colormap import (
    GRADIENT_STOPS,
    ColorMapper,
    gradient_color,
    logarithmic_scale,
)


def test_logarithmic_scale_endpoints():
    assert logarithmic_scale(0.0) == pytest.approx(0.0)
    assert logarithmic_scale(0.99) == pytest.approx(1.0)
    # unclamped above the top of the range
    assert logarithmic_scale(10.0) > 1.0


@pytest.mark.parametrize("bin_index", [0, 1, 17, 2047])
def test_zero_amplitude_is_black(bin_index):
    assert ColorMapper().to_color(0.0, bin_index) == (0, 0, 0)


def test_dc_bin_is_always_black():
    assert ColorMapper(amplitude_scale=100.0).to_color(5.0, 0) == (0, 0, 0)


def test_loud_input_saturates_to_white():
    assert ColorMapper().to_color(1e6, 4) == (255, 255, 255)


@pytest.mark.parametrize("index", range(6))
def test_gradient_hits_each_stop(index):
    assert np.allclose(gradient_color(index / 5.0), GRADIENT_STOPS[index])


def test_gradient_interpolates_linearly():
    midpoint = gradient_color(0.1)
    assert np.allclose(midpoint, (GRADIENT_STOPS[0] + GRADIENT_STOPS[1]) / 2)


def test_gradient_clamps_out_of_range():
    assert np.allclose(gradient_color(-3.0), GRADIENT_STOPS[0])
    assert np.allclose(gradient_color(7.5), GRADIENT_STOPS[-1])


def test_dark_blue_stop_bytes():
    # intensity exactly 0.2 selects the dark blue stop: 0.75 * 255 rounds to 191
    mapper = ColorMapper()
    amplitude = (np.exp(0.2 * np.log(100.0)) - 1.0) * 0.01
    assert mapper.intensity(amplitude, 1) == pytest.approx(0.2)
    r, g, b = mapper.to_color(amplitude, 1)
    assert (r, g) == (0, 0)
    assert b in (190, 191)


def test_bin_boost_and_scale():
    mapper = ColorMapper(amplitude_scale=2.0)
    assert mapper.intensity(0.01, 16) == pytest.approx(logarithmic_scale(0.08))
    assert ColorMapper().intensity(0.01, 4) == pytest.approx(logarithmic_scale(0.02))


def test_intensity_monotonic_in_amplitude():
    mapper = ColorMapper()
    amplitudes = np.linspace(0.0, 2.0, 200)
    values = mapper.intensity(amplitudes, 9)
    assert np.all(np.diff(values) > 0)


def test_column_colors_match_scalar_mapping():
    mapper = ColorMapper(amplitude_scale=1.5)
    rng = np.random.default_rng(seed=3)
    spectrum = rng.uniform(0.0, 0.1, size=32)
    colors = mapper.column_colors(spectrum, 20)
    assert colors.shape == (20, 3)
    assert colors.dtype == np.uint8
    for bin_index in range(20):
        assert tuple(colors[bin_index]) == mapper.to_color(spectrum[bin_index], bin_index)


def test_mapping_is_deterministic():
    mapper = ColorMapper()
    assert mapper.to_color(0.0123, 77) == mapper.to_color(0.0123, 77)


def test_nan_intensity_maps_to_black():
    assert np.array_equal(gradient_color(np.nan), GRADIENT_STOPS[0])
    colors = ColorMapper().column_colors(np.array([0.5, np.nan, 0.5]), 3)
    assert tuple(colors[1]) == (0, 0, 0)


def test_negative_scale_does_not_crash():
    with np.errstate(invalid="ignore"):
        assert ColorMapper(amplitude_scale=-1.0).to_color(0.5, 4) == (0, 0, 0)
