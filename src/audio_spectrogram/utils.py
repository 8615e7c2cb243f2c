"""Utility helpers for spectrogram analysis."""

from __future__ import annotations

import numpy as np


def is_power_of_two(n: int) -> bool:
    """Return ``True`` when ``n`` is a positive power of two."""
    return n > 0 and (n & (n - 1)) == 0


def downmix(samples: np.ndarray, channels: int = 1) -> np.ndarray:
    """Average multi-channel audio into a normalized mono ``float32`` stream.

    ``samples`` may be interleaved (1-D) or shaped ``(frames, channels)``.
    Integer PCM is scaled so that full scale maps to [-1, 1); a trailing
    partial frame in interleaved input is dropped.
    """
    data = np.asarray(samples)
    if np.issubdtype(data.dtype, np.integer):
        scale = float(np.iinfo(data.dtype).max) + 1.0
        data = data.astype(np.float64) / scale
    else:
        data = data.astype(np.float64, copy=False)

    if data.ndim == 1:
        if channels <= 1:
            return data.astype(np.float32)
        frames = data.size // channels
        data = data[: frames * channels].reshape(frames, channels)
    if data.ndim != 2:
        raise ValueError(f"expected 1-D or 2-D audio, got shape {data.shape}")
    return data.mean(axis=1).astype(np.float32)


__all__ = ["downmix", "is_power_of_two"]
