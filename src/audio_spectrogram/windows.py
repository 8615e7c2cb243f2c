"""Tapering window shapes applied to each analysis block.

Both shapes take a position ``x`` in [0, 1] across the block and the
``tradeoff`` parameter; larger ``tradeoff`` values give narrower windows.
Their scale factors are empirically tuned and kept as is so images stay
comparable between batch and live rendering.
"""

from __future__ import annotations

from typing import Callable, Dict

import numpy as np

WindowShape = Callable[[np.ndarray, float], np.ndarray]


def raised_sine(x: np.ndarray, tradeoff: float) -> np.ndarray:
    """Half sine wave of width ``1 / tradeoff`` centred on the block, zero outside."""
    x = np.asarray(x, dtype=np.float64)
    width = 1.0 / tradeoff
    edge = 0.5 - 0.5 * width
    inside = (x >= edge) & (x <= edge + width)
    y = np.sin((x - edge) * tradeoff * np.pi) * np.sqrt(tradeoff)
    return np.where(inside, y, 0.0)


def gaussian_sine(x: np.ndarray, tradeoff: float) -> np.ndarray:
    """Gaussian bell multiplied by the square root of a full-block sine."""
    x = np.asarray(x, dtype=np.float64)
    tx = 2.0 * tradeoff * (x - 0.5)
    bell = np.exp(-0.5 * tx**2) / np.sqrt(2.0 * np.pi) * np.sqrt(tradeoff) * 4.0
    # sin(x*pi) dips a hair below zero at x=1 in floating point
    return bell * np.sqrt(np.clip(np.sin(x * np.pi), 0.0, None))


WINDOW_FUNCTIONS: Dict[str, WindowShape] = {
    "raised-sine": raised_sine,
    "gaussian-sine": gaussian_sine,
}


def build_window(name: str, size: int, tradeoff: float) -> np.ndarray:
    """Sample window ``name`` at ``i / size`` for ``i`` in ``range(size)``."""
    try:
        shape = WINDOW_FUNCTIONS[name]
    except KeyError:
        raise ValueError(f"unknown window shape {name!r}") from None
    if size <= 0:
        raise ValueError("window size must be positive")
    positions = np.arange(size, dtype=np.float64) / size
    return shape(positions, float(tradeoff)).astype(np.float32)


__all__ = ["WINDOW_FUNCTIONS", "build_window", "gaussian_sine", "raised_sine"]
