"""PNG encoding and label text drawing on top of a finished raster."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib.image as mpimg
import numpy as np
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.transforms import IdentityTransform

from audio_spectrogram.labels import LabelPlan

LABEL_COLOR = "white"
LABEL_FONT_SIZE = 10
_DPI = 100


def annotate_raster(
    raster: np.ndarray, labels: LabelPlan, font_size: float = LABEL_FONT_SIZE
) -> np.ndarray:
    """Return a copy of ``raster`` with the label text drawn into it.

    Frequency labels sit at the left edge centred on their row; time labels
    sit on the bottom edge starting at their column.
    """
    height, width = raster.shape[:2]
    # half a pixel of slack keeps Agg from truncating the canvas by one pixel
    fig = Figure(
        figsize=((width + 0.5) / _DPI, (height + 0.5) / _DPI),
        dpi=_DPI,
        facecolor="black",
    )
    canvas = FigureCanvasAgg(fig)
    fig.figimage(raster, xo=0, yo=0, origin="upper")

    pixels = IdentityTransform()
    for row, text in labels.frequency:
        fig.text(
            0,
            height - row,
            text,
            transform=pixels,
            color=LABEL_COLOR,
            fontsize=font_size,
            ha="left",
            va="center",
        )
    for column, text in labels.time:
        fig.text(
            column,
            0,
            text,
            transform=pixels,
            color=LABEL_COLOR,
            fontsize=font_size,
            ha="left",
            va="bottom",
        )

    canvas.draw()
    rgba = np.asarray(canvas.buffer_rgba())
    # the image is anchored bottom-left
    return rgba[rgba.shape[0] - height :, :width, :3].copy()


def save_png(
    raster: np.ndarray,
    path: Path,
    labels: Optional[LabelPlan] = None,
    font_size: float = LABEL_FONT_SIZE,
) -> Path:
    """Encode ``raster`` (``height x width x 3`` uint8) as a PNG file."""
    path = Path(path)
    image = raster if labels is None else annotate_raster(raster, labels, font_size)
    mpimg.imsave(path, image, format="png")
    return path


__all__ = ["LABEL_COLOR", "LABEL_FONT_SIZE", "annotate_raster", "save_png"]
