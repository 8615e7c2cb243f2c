"""Incremental raster painting with left scrolling."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from audio_spectrogram.colormap import ColorMapper
from audio_spectrogram.config import validate_raster_dimensions

logger = logging.getLogger(__name__)


class RasterBoundsError(RuntimeError):
    """A pixel write fell outside the raster; column bookkeeping is broken."""


class ScrollCompositor:
    """Own a fixed-size RGB raster and append one column per spectrum.

    Row 0 is the top of the image and holds the highest drawn frequency.
    When new columns do not fit, existing content is copied left and the
    number of discarded columns is added to ``total_scrolled`` so that
    raster column ``c`` always shows absolute column ``total_scrolled + c``.
    """

    def __init__(
        self,
        width: int,
        height: int,
        color_mapper: Optional[ColorMapper] = None,
        scroll: bool = True,
    ) -> None:
        validate_raster_dimensions(width, height)
        self.width = int(width)
        self.height = int(height)
        self.color_mapper = color_mapper or ColorMapper()
        self.scroll = scroll
        self.raster = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        self.cursor_column = 0
        self.total_scrolled = 0

    def reset(self) -> None:
        self.raster[:] = 0
        self.cursor_column = 0
        self.total_scrolled = 0

    def append_columns(self, spectra: Sequence[np.ndarray]) -> None:
        count = len(spectra)
        if count == 0:
            return

        overflow = self.cursor_column + count - self.width
        if overflow > 0 and self.scroll:
            self._shift_left(overflow)
            # only the newest ``width`` columns can still be on screen
            if count > self.width:
                spectra = spectra[count - self.width :]

        for spectrum in spectra:
            self.write_column(self.cursor_column, spectrum)
            self.cursor_column += 1

    def _shift_left(self, shift: int) -> None:
        moved = min(shift, self.width)
        if moved < self.width:
            self.raster[:, : self.width - moved] = self.raster[:, moved:]
        self.cursor_column = max(self.cursor_column - shift, 0)
        self.total_scrolled += shift
        logger.debug("scrolled %d columns (total %d)", shift, self.total_scrolled)

    def write_column(self, column: int, spectrum: np.ndarray) -> None:
        colors = self.color_mapper.column_colors(spectrum, self.height)
        rows = self.height - np.arange(colors.shape[0]) - 1
        self.set_pixels(column, rows, colors)

    def set_pixels(self, column: int, rows: np.ndarray, colors: np.ndarray) -> None:
        rows = np.asarray(rows)
        if not 0 <= column < self.width or (
            rows.size and (rows.min() < 0 or rows.max() >= self.height)
        ):
            raise RasterBoundsError(
                f"pixel write at column {column} outside {self.width}x{self.height} raster"
            )
        self.raster[rows, column] = colors


__all__ = ["RasterBoundsError", "ScrollCompositor"]
