"""Audio collaborators: file I/O, capture sources and the shared capture buffer."""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional

import numpy as np
from scipy.io import wavfile

try:  # Optional dependency - may not be available in CI
    import soundfile as sf  # type: ignore
except Exception:  # pragma: no cover - soundfile is optional
    sf = None  # type: ignore

try:  # Optional dependency
    import sounddevice as sd
except Exception:  # pragma: no cover - optional dependency may be absent in CI
    sd = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

FrameSink = Callable[[np.ndarray], None]


def load_audio(path: Path) -> tuple[np.ndarray, int, int]:
    """Read an audio file as ``(frames, channels)`` samples.

    Returns the frames, the sample rate and the channel count. Integer PCM
    read through the WAV fallback keeps its integer dtype.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)

    if sf is not None:
        audio, sr = sf.read(str(path), dtype="float32", always_2d=True)
    else:
        sr, audio = wavfile.read(path)
        if audio.ndim == 1:
            audio = audio[:, np.newaxis]
    return audio, int(sr), int(audio.shape[1])


def save_recording(path: Path, frames: np.ndarray, sample_rate: int) -> Path:
    """Write captured ``(frames, channels)`` audio; OGG files use Vorbis."""
    path = Path(path)
    frames = np.asarray(frames)
    if sf is not None:
        if path.suffix.lower() == ".ogg":
            sf.write(str(path), frames, sample_rate, format="OGG", subtype="VORBIS")
        else:
            sf.write(str(path), frames, sample_rate)
    elif path.suffix.lower() == ".wav":
        wavfile.write(path, sample_rate, frames)
    else:
        raise RuntimeError(
            f"soundfile is required to write {path.suffix or 'extensionless'} files."
        )
    logger.info("Saved audio recording: %s", path)
    return path


class RecordingBuffer:
    """Captured interleaved frames shared between the capture and GUI threads.

    Every access holds ``lock``; frames are only kept while ``recording``
    is set. ``drain`` hands out the frames not yet analysed, while the
    whole clip stays available to ``snapshot`` until ``clear``.
    """

    def __init__(self, channels: int) -> None:
        self.channels = int(channels)
        self.lock = threading.Lock()
        self.recording = False
        self._chunks: list[np.ndarray] = []
        self._frames = 0
        self._processed = 0

    def __len__(self) -> int:
        with self.lock:
            return self._frames

    def set_recording(self, enabled: bool) -> None:
        with self.lock:
            self.recording = bool(enabled)

    def toggle_recording(self) -> bool:
        with self.lock:
            self.recording = not self.recording
            return self.recording

    def append(self, frames: np.ndarray) -> None:
        data = np.asarray(frames).reshape(-1, self.channels)
        with self.lock:
            if not self.recording or data.size == 0:
                return
            self._chunks.append(data.copy())
            self._frames += data.shape[0]

    def _concatenate(self, chunks: list[np.ndarray]) -> np.ndarray:
        if not chunks:
            return np.zeros((0, self.channels), dtype=np.int16)
        return np.concatenate(chunks, axis=0)

    def drain(self) -> np.ndarray:
        """Frames appended since the previous ``drain`` (or ``clear``).

        Only the chunks not yet drained are joined; the stored clip is left
        as appended.
        """
        with self.lock:
            pending = self._chunks[self._processed :]
            self._processed = len(self._chunks)
        return self._concatenate(pending)

    def snapshot(self) -> np.ndarray:
        with self.lock:
            chunks = list(self._chunks)
        return self._concatenate(chunks)

    def clear(self) -> None:
        with self.lock:
            self._chunks = []
            self._frames = 0
            self._processed = 0


class AudioSource:
    """Abstract capture stream delivering ``(frames, channels)`` blocks to a sink."""

    def start(self, sink: FrameSink) -> None:  # pragma: no cover - interface method
        raise NotImplementedError

    def stop(self) -> None:  # pragma: no cover - interface method
        raise NotImplementedError


class MicSource(AudioSource):
    """Audio source backed by a system input device."""

    def __init__(
        self,
        samplerate: int,
        channels: int,
        blocksize: int = 1024,
        device: Optional[str] = None,
    ) -> None:
        if sd is None:
            raise RuntimeError("sounddevice is not available. Install it or use --demo.")

        self.samplerate = samplerate
        self.channels = channels
        self.blocksize = blocksize
        self.device = device
        self.stream = None
        self._sink: Optional[FrameSink] = None

    def _callback(self, indata, frames, time_info, status):  # pragma: no cover - sounddevice callback
        if status:
            logger.warning("input stream status: %s", status)
        if self._sink is not None:
            self._sink(indata.copy())

    def start(self, sink: FrameSink) -> None:
        if sd is None:  # pragma: no cover - checked in __init__
            raise RuntimeError("sounddevice is not available.")
        self._sink = sink
        self.stream = sd.InputStream(
            channels=self.channels,
            samplerate=self.samplerate,
            blocksize=self.blocksize,
            device=self.device,
            callback=self._callback,
            dtype="int16",
        )
        self.stream.start()

    def stop(self) -> None:
        if self.stream is not None:
            try:  # pragma: no cover - depends on audio backend
                self.stream.stop()
                self.stream.close()
            finally:
                self.stream = None


class DemoSource(AudioSource):
    """Synthetic audio source used when no microphone is available.

    A background thread produces ``blocksize`` frames at real-time pace,
    standing in for the capture callback thread.
    """

    def __init__(self, samplerate: int, channels: int, blocksize: int = 1024) -> None:
        self.samplerate = samplerate
        self.channels = channels
        self.blocksize = blocksize
        self.t = 0
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def generate(self, n: int) -> np.ndarray:
        sr = self.samplerate
        t = (self.t + np.arange(n)) / sr
        sweep = (t % 8.0) / 8.0
        chirp = np.sin(2 * np.pi * (200 + 3000 * sweep) * t) * 0.3
        tone1 = 0.25 * np.sin(2 * np.pi * 440 * t)
        tone2 = 0.2 * np.sin(2 * np.pi * 880 * t + 0.3)
        noise = 0.02 * np.random.randn(n)
        y = np.tanh(1.5 * (chirp + tone1 + tone2 + noise))
        self.t += n
        pcm = np.round(y * 32767).astype(np.int16)
        return np.repeat(pcm[:, np.newaxis], self.channels, axis=1)

    def _run(self, sink: FrameSink) -> None:
        period = self.blocksize / self.samplerate
        next_time = time.monotonic()
        while not self._stopped.is_set():
            sink(self.generate(self.blocksize))
            next_time += period
            self._stopped.wait(max(0.0, next_time - time.monotonic()))

    def start(self, sink: FrameSink) -> None:
        self._stopped.clear()
        self._thread = threading.Thread(target=self._run, args=(sink,), daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stopped.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None


__all__ = [
    "AudioSource",
    "DemoSource",
    "MicSource",
    "RecordingBuffer",
    "load_audio",
    "save_recording",
    "sd",
    "sf",
]
