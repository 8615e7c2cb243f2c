"""Audio spectrogram engine with batch PNG export and a live scrolling view."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "ColorMapper",
    "ConfigurationError",
    "LabelPlan",
    "LiveSpectrogram",
    "RasterBoundsError",
    "RecordingBuffer",
    "ScrollCompositor",
    "SpectralAnalyzer",
    "SpectrogramEngine",
    "SpectrogramSettings",
    "build_window",
    "convert",
    "downmix",
    "load_audio",
    "plan_labels",
    "save_png",
]

_EXPORT_MAP = {
    "ColorMapper": ("audio_spectrogram.colormap", "ColorMapper"),
    "ConfigurationError": ("audio_spectrogram.config", "ConfigurationError"),
    "LabelPlan": ("audio_spectrogram.labels", "LabelPlan"),
    "LiveSpectrogram": ("audio_spectrogram.viewer", "LiveSpectrogram"),
    "RasterBoundsError": ("audio_spectrogram.compositor", "RasterBoundsError"),
    "RecordingBuffer": ("audio_spectrogram.audio", "RecordingBuffer"),
    "ScrollCompositor": ("audio_spectrogram.compositor", "ScrollCompositor"),
    "SpectralAnalyzer": ("audio_spectrogram.analyzer", "SpectralAnalyzer"),
    "SpectrogramEngine": ("audio_spectrogram.engine", "SpectrogramEngine"),
    "SpectrogramSettings": ("audio_spectrogram.config", "SpectrogramSettings"),
    "build_window": ("audio_spectrogram.windows", "build_window"),
    "convert": ("audio_spectrogram.engine", "convert"),
    "downmix": ("audio_spectrogram.utils", "downmix"),
    "load_audio": ("audio_spectrogram.audio", "load_audio"),
    "plan_labels": ("audio_spectrogram.labels", "plan_labels"),
    "save_png": ("audio_spectrogram.rendering", "save_png"),
}


if TYPE_CHECKING:  # pragma: no cover - only for type checkers
    from audio_spectrogram.analyzer import SpectralAnalyzer
    from audio_spectrogram.audio import RecordingBuffer, load_audio
    from audio_spectrogram.colormap import ColorMapper
    from audio_spectrogram.compositor import RasterBoundsError, ScrollCompositor
    from audio_spectrogram.config import ConfigurationError, SpectrogramSettings
    from audio_spectrogram.engine import SpectrogramEngine, convert
    from audio_spectrogram.labels import LabelPlan, plan_labels
    from audio_spectrogram.rendering import save_png
    from audio_spectrogram.utils import downmix
    from audio_spectrogram.viewer import LiveSpectrogram
    from audio_spectrogram.windows import build_window


def __getattr__(name: str) -> Any:
    """Lazily import heavy submodules on demand."""

    if name in _EXPORT_MAP:
        module_name, attribute = _EXPORT_MAP[name]
        module = import_module(module_name)
        value = getattr(module, attribute)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return sorted(set(__all__))
