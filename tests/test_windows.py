from pathlib import Path
import sys

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from audio_spectrogram.windows import build_window, gaussian_sine, raised_sine


@pytest.mark.parametrize("name", ["raised-sine", "gaussian-sine"])
def test_window_length_matches_fft_size(name):
    for size in (2, 8, 1024):
        window = build_window(name, size, 3.0)
        assert window.shape == (size,)
        assert window.dtype == np.float32


def test_raised_sine_is_zero_outside_centre():
    window = build_window("raised-sine", 64, 2.0)
    # width 1/2 around the centre: indices 16..48
    assert np.all(window[:16] == 0.0)
    assert np.all(window[49:] == 0.0)
    assert np.isclose(window[32], np.sqrt(2.0))
    assert window[0] == 0.0 and window[-1] == 0.0


def test_raised_sine_with_unit_tradeoff_is_half_sine():
    x = np.arange(16) / 16
    assert np.allclose(raised_sine(x, 1.0), np.sin(x * np.pi))


def test_gaussian_sine_peak_and_taper():
    tradeoff = 3.0
    window = build_window("gaussian-sine", 256, tradeoff)
    expected_peak = 4.0 * np.sqrt(tradeoff) / np.sqrt(2.0 * np.pi)
    assert np.isclose(window[128], expected_peak, rtol=1e-6)
    assert window[0] == 0.0
    assert window[1] < window[64] < window[128]


def test_gaussian_sine_is_symmetric():
    x = np.arange(1, 128) / 128
    assert np.allclose(gaussian_sine(x, 5.0), gaussian_sine(1.0 - x, 5.0))


def test_unknown_window_rejected():
    with pytest.raises(ValueError):
        build_window("hann", 16, 1.0)
