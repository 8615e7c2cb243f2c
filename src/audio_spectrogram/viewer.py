"""Matplotlib-based live scrolling spectrogram."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np

from audio_spectrogram.audio import AudioSource, RecordingBuffer, save_recording
from audio_spectrogram.config import ConfigurationError, SpectrogramSettings
from audio_spectrogram.engine import SpectrogramEngine, convert_with_engine
from audio_spectrogram.rendering import LABEL_COLOR, LABEL_FONT_SIZE, save_png

logger = logging.getLogger(__name__)


class LiveSpectrogram:
    """Interactive view fed by a capture source.

    Keys: space toggles recording, ``r`` clears the recording, ``s`` saves
    the clip as OGG plus a full PNG, ``q``/escape quits.
    """

    def __init__(
        self,
        source: AudioSource,
        settings: SpectrogramSettings,
        width: int = 1200,
        refresh_ms: int = 40,
        output_dir: Path = Path("."),
    ) -> None:
        self.source = source
        self.settings = settings
        self.refresh_ms = int(refresh_ms)
        self.output_dir = Path(output_dir)

        self.engine = SpectrogramEngine(settings, width)
        self.buffer = RecordingBuffer(settings.channels)

        height = self.engine.compositor.height
        self.fig = plt.figure(figsize=(width / 100.0, height / 100.0 + 0.4))
        self.ax = self.fig.add_axes((0.0, 0.0, 1.0, 1.0))
        self.ax.set_axis_off()
        self.im = self.ax.imshow(
            self.engine.raster, aspect="auto", interpolation="nearest"
        )
        self.status = self.ax.text(
            0.0,
            1.0,
            "",
            transform=self.ax.transAxes,
            color=LABEL_COLOR,
            fontsize=LABEL_FONT_SIZE,
            ha="left",
            va="top",
        )
        self._label_artists: list = []
        self._set_status()
        self.fig.canvas.mpl_connect("key_press_event", self.on_key)

    # ------------------------------------------------------------------
    # Event handlers & UI updates
    # ------------------------------------------------------------------
    def _set_status(self) -> None:
        seconds = self.settings.time_resolution * self.engine.compositor.width
        hertz = self.settings.freq_resolution * self.engine.compositor.height
        state = "REC" if self.buffer.recording else "paused"
        self.status.set_text(
            f"Last {seconds:g} sec, 0 - {hertz:g} Hz [{state}]"
            "  Keys: Space = record, s = Save, r = Reset"
        )

    def on_key(self, event) -> None:
        if event.key in ("q", "escape"):
            plt.close(self.fig)
        elif event.key == " ":
            recording = self.buffer.toggle_recording()
            logger.info("Recording %s", "started" if recording else "stopped")
            self._set_status()
        elif event.key == "r":
            self.clear_recording()
        elif event.key == "s":
            self.save(time.strftime("%Y%m%d%H%M%S"))

    def clear_recording(self) -> None:
        self.buffer.clear()
        self.engine.reset()
        logger.info("Recording cleared")
        self.update_plot()

    def save(self, stamp: str) -> Optional[tuple[Path, Optional[Path]]]:
        """Write ``recording-<stamp>.ogg`` and a batch-rendered PNG of it.

        The image path is ``None`` when the clip is too long to render.
        """
        frames = self.buffer.snapshot()
        if frames.shape[0] == 0:
            logger.warning("Nothing recorded yet; press space to start recording")
            return None
        base = self.output_dir / f"recording-{stamp}"
        audio_path = save_recording(
            base.with_suffix(".ogg"), frames, self.settings.sample_rate
        )

        try:
            engine = convert_with_engine(frames, self.settings)
        except ConfigurationError as exc:
            logger.error("Could not render spectrum image: %s", exc)
            return audio_path, None
        labels = engine.label_plan() if self.settings.labels else None
        image_path = save_png(engine.raster, base.with_suffix(".png"), labels=labels)
        logger.info("Saved spectrum image: %s", image_path)
        return audio_path, image_path

    def _draw_labels(self) -> None:
        for artist in self._label_artists:
            artist.remove()
        self._label_artists = []
        if not self.settings.labels:
            return
        plan = self.engine.label_plan()
        height = self.engine.compositor.height
        style = dict(color=LABEL_COLOR, fontsize=LABEL_FONT_SIZE)
        for row, text in plan.frequency:
            self._label_artists.append(
                self.ax.text(0, row, text, va="center", **style)
            )
        for column, text in plan.time:
            self._label_artists.append(
                self.ax.text(column, height - 1, text, va="bottom", **style)
            )

    # ------------------------------------------------------------------
    # Main processing loop
    # ------------------------------------------------------------------
    def process_pending(self) -> int:
        frames = self.buffer.drain()
        if frames.size == 0:
            return 0
        return self.engine.feed_frames(frames)

    def update_plot(self) -> None:
        self.im.set_data(self.engine.raster)
        self._draw_labels()
        self._set_status()
        self.fig.canvas.draw_idle()

    def run(self, record: bool = True) -> None:
        self.buffer.set_recording(record)
        self._set_status()
        self.source.start(self.buffer.append)
        try:

            def _on_timer(_: Optional[object] = None) -> None:
                if self.process_pending():
                    self.update_plot()

            timer = self.fig.canvas.new_timer(interval=self.refresh_ms)
            timer.add_callback(_on_timer, None)
            timer.start()
            plt.show()
        finally:
            self.source.stop()


__all__ = ["LiveSpectrogram"]
