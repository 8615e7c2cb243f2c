"""Configuration for the spectrogram engine and its command-line front ends."""

from __future__ import annotations

import dataclasses
import json
import math
from pathlib import Path
from typing import Any, Dict, Mapping

from audio_spectrogram.utils import is_power_of_two

_DEFAULTS_NAME = "spectrogram_defaults.json"

WINDOW_NAMES = ("gaussian-sine", "raised-sine")

MAX_RASTER_WIDTH = 2**20
MAX_RASTER_HEIGHT = 32768
MAX_RASTER_PIXELS = 2**28


class ConfigurationError(ValueError):
    """Raised when settings or raster dimensions cannot be used."""


@dataclasses.dataclass(frozen=True)
class SpectrogramSettings:
    """Immutable per-engine settings.

    ``hop_size`` is the number of new samples between two spectra (one
    raster column each); ``tradeoff`` narrows the analysis window, trading
    frequency resolution for time resolution.
    """

    sample_rate: int = 44100
    channels: int = 2
    fft_size: int = 4096
    hop_size: int = 200
    tradeoff: float = 7.0
    upper_frequency_limit: float = 7000.0
    amplitude_scale: float = 1.0
    labels: bool = True
    window: str = "gaussian-sine"

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.sample_rate <= 0:
            raise ConfigurationError("sample_rate must be positive.")
        if self.channels <= 0:
            raise ConfigurationError("channels must be positive.")
        if self.fft_size <= 1 or not is_power_of_two(self.fft_size):
            raise ConfigurationError(
                f"fft_size must be a power of two greater than 1, got {self.fft_size}."
            )
        if self.hop_size <= 0 or self.hop_size > self.fft_size:
            raise ConfigurationError(
                f"hop_size must be in 1..{self.fft_size}, got {self.hop_size}."
            )
        if not self.tradeoff >= 1.0:
            raise ConfigurationError(f"tradeoff must be >= 1, got {self.tradeoff}.")
        if not self.upper_frequency_limit > 0.0:
            raise ConfigurationError("upper_frequency_limit must be positive.")
        if not (math.isfinite(self.amplitude_scale) and self.amplitude_scale >= 0.0):
            raise ConfigurationError(
                f"amplitude_scale must be finite and >= 0, got {self.amplitude_scale}."
            )
        if self.window not in WINDOW_NAMES:
            raise ConfigurationError(
                f"unknown window {self.window!r}; choose from {', '.join(WINDOW_NAMES)}."
            )

    @property
    def freq_resolution(self) -> float:
        """Width of one frequency bin in Hz."""
        return self.sample_rate / self.fft_size

    @property
    def time_resolution(self) -> float:
        """Duration of one raster column in seconds."""
        return self.hop_size / self.sample_rate

    @property
    def raster_height(self) -> int:
        """Number of frequency bins drawn, capped at ``fft_size / 2``."""
        height = int(self.upper_frequency_limit / self.freq_resolution) + 1
        return min(self.fft_size // 2, height)

    def replace(self, **changes: Any) -> "SpectrogramSettings":
        return dataclasses.replace(self, **changes)

    @staticmethod
    def from_dict(raw: Mapping[str, Any]) -> "SpectrogramSettings":
        normalized = dict(raw)

        aliases = {
            "window_inc": "hop_size",
            "windowinc": "hop_size",
            "hop": "hop_size",
            "fft": "fft_size",
            "upper_freq": "upper_frequency_limit",
            "upperfreq": "upper_frequency_limit",
            "samplerate": "sample_rate",
            "amp_scale": "amplitude_scale",
        }
        for legacy_key, new_key in aliases.items():
            if legacy_key in normalized and new_key not in normalized:
                normalized[new_key] = normalized.pop(legacy_key)

        known = {f.name for f in dataclasses.fields(SpectrogramSettings)}
        filtered = {k: v for k, v in normalized.items() if k in known}
        return SpectrogramSettings(**filtered)


def load_defaults(mode: str = "convert") -> Dict[str, Any]:
    """Load the default option values for ``mode`` ("convert" or "live")."""
    config_path = Path(__file__).with_name(_DEFAULTS_NAME)
    with config_path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    if mode not in data:
        raise KeyError(f"no defaults for mode {mode!r}")
    return dict(data[mode])


def validate_raster_dimensions(
    width: int,
    height: int,
    max_width: int = MAX_RASTER_WIDTH,
    max_height: int = MAX_RASTER_HEIGHT,
    max_pixels: int = MAX_RASTER_PIXELS,
) -> None:
    """Reject raster sizes that are non-positive or unreasonably large.

    Batch images grow with the recording length, so the width cap is far
    looser than the height cap; the area cap bounds the allocation.
    """
    if width <= 0 or height <= 0:
        raise ConfigurationError(f"raster size {width}x{height} must be positive.")
    if width > max_width:
        raise ConfigurationError(
            f"raster width {width} exceeds the {max_width} pixel limit."
        )
    if height > max_height:
        raise ConfigurationError(
            f"raster height {height} exceeds the {max_height} pixel limit."
        )
    if width * height > max_pixels:
        raise ConfigurationError(
            f"raster size {width}x{height} exceeds {max_pixels} pixels."
        )


__all__ = [
    "ConfigurationError",
    "MAX_RASTER_HEIGHT",
    "MAX_RASTER_PIXELS",
    "MAX_RASTER_WIDTH",
    "SpectrogramSettings",
    "WINDOW_NAMES",
    "load_defaults",
    "validate_raster_dimensions",
]
