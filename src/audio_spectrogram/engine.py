"""Spectrogram engine tying analysis, colouring and compositing together."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import numpy as np

from audio_spectrogram.analyzer import SpectralAnalyzer
from audio_spectrogram.colormap import ColorMapper
from audio_spectrogram.compositor import ScrollCompositor
from audio_spectrogram.config import SpectrogramSettings, validate_raster_dimensions
from audio_spectrogram.labels import LabelPlan, plan_labels
from audio_spectrogram.utils import downmix
from audio_spectrogram.windows import build_window

logger = logging.getLogger(__name__)


class SpectrogramEngine:
    """Stream mono samples into a raster of ``width`` columns.

    One engine holds all mutable state for one view: the analysis block,
    the raster and its cursor. ``reset`` returns it to the freshly
    constructed state at any time.
    """

    def __init__(
        self,
        settings: SpectrogramSettings,
        width: int,
        height: Optional[int] = None,
        scroll: bool = True,
    ) -> None:
        if height is None:
            height = settings.raster_height
        validate_raster_dimensions(width, height)

        self.settings = settings
        self.window = build_window(
            settings.window, settings.fft_size, settings.tradeoff
        )
        self.analyzer = SpectralAnalyzer(
            settings.fft_size, settings.hop_size, self.window
        )
        self.compositor = ScrollCompositor(
            width,
            height,
            color_mapper=ColorMapper(settings.amplitude_scale),
            scroll=scroll,
        )
        self.samples_processed = 0

    @property
    def raster(self) -> np.ndarray:
        return self.compositor.raster

    @property
    def cursor_column(self) -> int:
        return self.compositor.cursor_column

    @property
    def total_scrolled(self) -> int:
        return self.compositor.total_scrolled

    def feed(self, samples: np.ndarray) -> int:
        """Analyse normalized mono ``samples`` and paint the resulting columns.

        Chunks may have any length; partial blocks carry over to the next
        call. Returns the number of columns painted.
        """
        samples = np.asarray(samples, dtype=np.float32).ravel()
        spectra = self.analyzer.process(samples)
        self.samples_processed += samples.size
        self.compositor.append_columns(spectra)
        return len(spectra)

    def feed_frames(self, frames: np.ndarray) -> int:
        """Down-mix interleaved or ``(frames, channels)`` audio and feed it."""
        return self.feed(downmix(frames, self.settings.channels))

    def reset(self) -> None:
        self.analyzer.reset()
        self.compositor.reset()
        self.samples_processed = 0

    def label_plan(self) -> LabelPlan:
        return plan_labels(
            total_scrolled=self.total_scrolled,
            width=self.compositor.width,
            height=self.compositor.height,
            freq_resolution=self.settings.freq_resolution,
            time_resolution=self.settings.time_resolution,
            upper_frequency_limit=self.settings.upper_frequency_limit,
        )


def batch_raster_size(
    frame_count: int, settings: SpectrogramSettings
) -> Tuple[int, int]:
    """Width and height of the image for ``frame_count`` mono frames."""
    width = max(1, (frame_count - settings.fft_size) // settings.hop_size + 1)
    return width, settings.raster_height


def convert(samples: np.ndarray, settings: SpectrogramSettings) -> np.ndarray:
    """Render a whole recording into an exactly sized raster.

    ``samples`` holds interleaved or ``(frames, channels)`` audio using
    ``settings.channels`` channels. The raster is sized so that it never
    has to scroll, and the audio is fed one second at a time.
    """
    return convert_with_engine(samples, settings).raster


def convert_with_engine(
    samples: np.ndarray, settings: SpectrogramSettings
) -> SpectrogramEngine:
    mono = downmix(samples, settings.channels)
    frames = mono.size
    width, height = batch_raster_size(frames, settings)

    logger.info("Frames: %d", frames)
    logger.info("Length: %.3f sec", frames / settings.sample_rate)
    logger.info("Frequency resolution: %g Hz", settings.freq_resolution)
    logger.info("Time resolution: %g sec", settings.time_resolution)
    logger.info("Compute image of size %dx%d", width, height)

    engine = SpectrogramEngine(settings, width, height, scroll=False)
    step = settings.sample_rate
    for start in range(0, frames, step):
        engine.feed(mono[start : start + step])
        logger.debug("processed %d sec", start // step + 1)
    logger.info("Complete!")
    return engine


__all__ = ["SpectrogramEngine", "batch_raster_size", "convert", "convert_with_engine"]
