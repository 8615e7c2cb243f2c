"""Overlapping short-time spectral analysis."""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from audio_spectrogram.config import ConfigurationError
from audio_spectrogram.utils import is_power_of_two


class SpectralAnalyzer:
    """Accumulate mono samples into a block and emit one spectrum per hop.

    The first spectrum is emitted once ``fft_size`` samples have arrived;
    after that one spectrum follows every ``hop_size`` samples, so
    consecutive blocks overlap by ``fft_size - hop_size`` samples.
    """

    def __init__(self, fft_size: int, hop_size: int, window: np.ndarray) -> None:
        if fft_size <= 1 or not is_power_of_two(fft_size):
            raise ConfigurationError(
                f"fft_size must be a power of two greater than 1, got {fft_size}."
            )
        if hop_size <= 0 or hop_size > fft_size:
            raise ConfigurationError(
                f"hop_size must be in 1..{fft_size}, got {hop_size}."
            )
        window = np.asarray(window, dtype=np.float32)
        if window.shape != (fft_size,):
            raise ConfigurationError(
                f"window has {window.size} weights, expected {fft_size}."
            )

        self.fft_size = int(fft_size)
        self.hop_size = int(hop_size)
        self.window = window
        self.block = np.zeros(self.fft_size, dtype=np.float32)
        self.position = 0

    @property
    def bins(self) -> int:
        return self.fft_size // 2

    def reset(self) -> None:
        self.block[:] = 0.0
        self.position = 0

    def push(self, sample: float) -> Optional[np.ndarray]:
        """Add one sample; return the spectrum if this sample completed a block."""
        spectra = self.process(np.array([sample], dtype=np.float32))
        return spectra[0] if spectra else None

    def process(self, samples: np.ndarray) -> List[np.ndarray]:
        """Add ``samples`` in order and return every spectrum they complete."""
        samples = np.asarray(samples, dtype=np.float32).ravel()
        spectra: List[np.ndarray] = []
        offset = 0
        while offset < samples.size:
            take = min(self.fft_size - self.position, samples.size - offset)
            self.block[self.position : self.position + take] = samples[
                offset : offset + take
            ]
            self.position += take
            offset += take

            if self.position == self.fft_size:
                spectra.append(self.analyze(self.block))
                keep = self.fft_size - self.hop_size
                self.block[:keep] = self.block[self.hop_size :]
                self.position = keep
        return spectra

    def analyze(self, block: np.ndarray) -> np.ndarray:
        """Magnitude spectrum of one windowed block, ``fft_size / 2`` bins."""
        weighted = np.asarray(block, dtype=np.float64) * self.window
        coeffs = np.fft.rfft(weighted)[: self.bins]
        return (2.0 * np.abs(coeffs) / self.fft_size).astype(np.float32)


__all__ = ["SpectralAnalyzer"]
