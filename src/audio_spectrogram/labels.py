"""Placement of frequency and time grid labels."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, NamedTuple

FREQUENCY_GRID_HZ = 1000.0
TIME_GRID_SEC = 1.0


class Label(NamedTuple):
    position: int
    text: str


@dataclass(frozen=True)
class LabelPlan:
    """Rows of frequency labels and columns of time labels inside the raster."""

    frequency: List[Label] = field(default_factory=list)
    time: List[Label] = field(default_factory=list)


def _pixel(coordinate: float) -> int:
    # tolerate float error so exact grid positions don't land one pixel early
    return int(math.floor(coordinate + 1e-6))


def plan_labels(
    total_scrolled: int,
    width: int,
    height: int,
    freq_resolution: float,
    time_resolution: float,
    upper_frequency_limit: float,
    frequency_grid: float = FREQUENCY_GRID_HZ,
    time_grid: float = TIME_GRID_SEC,
) -> LabelPlan:
    """Compute which grid lines are visible and where.

    Time labels are anchored to absolute recording time, so a raster that
    has scrolled by ``total_scrolled`` columns shows the labels shifted
    left by the same amount.
    """
    frequency: List[Label] = []
    steps = int(math.ceil(upper_frequency_limit / frequency_grid))
    for i in range(1, steps):
        row = _pixel(height - i * frequency_grid / freq_resolution)
        if 0 <= row < height:
            frequency.append(Label(row, f"{i * frequency_grid / 1000.0:g}kHz"))

    time_start = total_scrolled * time_resolution
    time_end = (total_scrolled + width) * time_resolution
    first = int(math.floor(time_start / time_grid)) - 1
    last = int(math.ceil(time_end / time_grid))

    time: List[Label] = []
    for i in range(first, last + 1):
        column = _pixel(i * time_grid / time_resolution - total_scrolled)
        if 0 <= column < width:
            time.append(Label(column, f"{i * time_grid:g}s"))

    return LabelPlan(frequency=frequency, time=time)


__all__ = ["FREQUENCY_GRID_HZ", "Label", "LabelPlan", "TIME_GRID_SEC", "plan_labels"]
