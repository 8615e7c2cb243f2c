"""Amplitude to RGB mapping used for every spectrogram pixel."""

from __future__ import annotations

from typing import Tuple

import numpy as np

LOG_MIN = 1e-2
LOG_MAX = 1.0

GRADIENT_STOPS = np.array(
    [
        [0.0, 0.0, 0.0],
        [0.0, 0.0, 0.75],
        [0.0, 0.75, 0.0],
        [0.8, 0.8, 0.0],
        [0.9, 0.2, 0.2],
        [1.0, 1.0, 1.0],
    ],
    dtype=np.float64,
)


def logarithmic_scale(amplitude):
    """Compress ``amplitude`` so 0 maps to 0 and ``LOG_MAX`` maps to about 1.

    The result is not clamped.
    """
    amplitude = np.asarray(amplitude, dtype=np.float64)
    scaled = (np.log(amplitude + LOG_MIN) - np.log(LOG_MIN)) / (
        np.log(LOG_MAX) - np.log(LOG_MIN)
    )
    return scaled if scaled.ndim else float(scaled)


def gradient_color(x) -> np.ndarray:
    """Interpolate the six-stop gradient at ``x``; values outside [0, 1] clamp.

    NaN maps to the first stop (black).
    """
    x = np.nan_to_num(np.asarray(x, dtype=np.float64), nan=0.0)
    x = np.clip(x, 0.0, 1.0)
    segments = len(GRADIENT_STOPS) - 1
    position = x * segments
    index = np.minimum(position.astype(np.int64), segments - 1)
    frac = np.asarray(position - index)[..., np.newaxis]
    return GRADIENT_STOPS[index] * (1.0 - frac) + GRADIENT_STOPS[index + 1] * frac


def to_bytes(rgb: np.ndarray) -> np.ndarray:
    return np.rint(np.clip(rgb, 0.0, 1.0) * 255.0).astype(np.uint8)


class ColorMapper:
    """Map spectrum magnitudes to 8-bit RGB.

    Each magnitude is boosted by ``sqrt(bin) * amplitude_scale`` before the
    log compression, which lifts the naturally weaker high-frequency bins.
    Stateless apart from ``amplitude_scale``.
    """

    def __init__(self, amplitude_scale: float = 1.0) -> None:
        self.amplitude_scale = float(amplitude_scale)

    def intensity(self, amplitude, bin_index):
        boosted = (
            np.asarray(amplitude, dtype=np.float64)
            * np.sqrt(np.asarray(bin_index, dtype=np.float64))
            * self.amplitude_scale
        )
        return logarithmic_scale(boosted)

    def to_color(self, amplitude: float, bin_index: int) -> Tuple[int, int, int]:
        rgb = to_bytes(gradient_color(self.intensity(amplitude, bin_index)))
        return int(rgb[0]), int(rgb[1]), int(rgb[2])

    def column_colors(self, spectrum: np.ndarray, height: int) -> np.ndarray:
        """Colors of the first ``height`` bins, lowest frequency first."""
        spectrum = np.asarray(spectrum, dtype=np.float64)[:height]
        bins = np.arange(spectrum.size)
        return to_bytes(gradient_color(self.intensity(spectrum, bins)))


__all__ = [
    "ColorMapper",
    "GRADIENT_STOPS",
    "LOG_MAX",
    "LOG_MIN",
    "gradient_color",
    "logarithmic_scale",
    "to_bytes",
]
