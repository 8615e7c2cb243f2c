"""Command-line entry points: file to PNG conversion and the live view."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from audio_spectrogram.audio import DemoSource, MicSource, load_audio, sd
from audio_spectrogram.config import (
    WINDOW_NAMES,
    ConfigurationError,
    SpectrogramSettings,
    load_defaults,
    validate_raster_dimensions,
)
from audio_spectrogram.engine import batch_raster_size, convert_with_engine
from audio_spectrogram.rendering import save_png


def _add_engine_options(parser: argparse.ArgumentParser, defaults: dict[str, Any]) -> None:
    parser.add_argument(
        "--fft",
        type=int,
        default=int(defaults.get("fft_size", 4096)),
        help="FFT window size, a power of two (default %(default)s)",
    )
    parser.add_argument(
        "--hop",
        type=int,
        default=int(defaults.get("hop_size", 200)),
        help="FFT window movement in samples (default %(default)s)",
    )
    parser.add_argument(
        "--tradeoff",
        type=float,
        default=float(defaults.get("tradeoff", 7.0)),
        help="frequency/time resolution tradeoff, 1 favours frequency, "
        "10 favours time (default %(default)s)",
    )
    parser.add_argument(
        "--upper-freq",
        type=float,
        default=float(defaults.get("upper_frequency_limit", 7000.0)),
        help="maximal frequency in the image in Hz (default %(default)s)",
    )
    parser.add_argument(
        "--amp-scale",
        type=float,
        default=float(defaults.get("amplitude_scale", 1.0)),
    )
    parser.add_argument(
        "--window",
        choices=WINDOW_NAMES,
        default=str(defaults.get("window", "gaussian-sine")),
    )
    parser.add_argument(
        "--no-labels",
        action="store_true",
        default=not bool(defaults.get("labels", True)),
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )


def parse_convert_args(argv: list[str] | None = None) -> argparse.Namespace:
    defaults = load_defaults("convert")
    parser = argparse.ArgumentParser(
        description="Render an audio file into a spectrogram PNG"
    )
    parser.add_argument("inputfile", type=Path)
    parser.add_argument("outputfile", type=Path)
    _add_engine_options(parser, defaults)
    return parser.parse_args(argv)


def parse_live_args(argv: list[str] | None = None) -> argparse.Namespace:
    defaults = load_defaults("live")
    parser = argparse.ArgumentParser(
        description="Live scrolling spectrogram of the default input device"
    )
    parser.add_argument(
        "--samplerate", type=int, default=int(defaults.get("sample_rate", 44100))
    )
    parser.add_argument(
        "--channels", type=int, default=int(defaults.get("channels", 2))
    )
    parser.add_argument("--width", type=int, default=int(defaults.get("width", 1200)))
    parser.add_argument(
        "--blocksize", type=int, default=int(defaults.get("blocksize", 1024))
    )
    parser.add_argument(
        "--refresh-ms", type=int, default=int(defaults.get("refresh_ms", 40))
    )
    parser.add_argument("--device", type=str, default=None)
    parser.add_argument("--demo", action="store_true")
    parser.add_argument("--output-dir", type=Path, default=Path("."))
    parser.add_argument(
        "--paused",
        action="store_true",
        help="start with recording off; press space to begin",
    )
    _add_engine_options(parser, defaults)
    return parser.parse_args(argv)


def build_settings(
    args: argparse.Namespace, sample_rate: int = 44100, channels: int = 2
) -> SpectrogramSettings:
    return SpectrogramSettings(
        sample_rate=sample_rate,
        channels=channels,
        fft_size=args.fft,
        hop_size=args.hop,
        tradeoff=args.tradeoff,
        upper_frequency_limit=args.upper_freq,
        amplitude_scale=args.amp_scale,
        labels=not args.no_labels,
        window=args.window,
    )


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def run_convert(args: argparse.Namespace) -> int:
    try:
        settings = build_settings(args)
        frames, sample_rate, channels = load_audio(args.inputfile)
        settings = settings.replace(sample_rate=sample_rate, channels=channels)
        validate_raster_dimensions(*batch_raster_size(frames.shape[0], settings))
    except ConfigurationError as exc:
        logging.error("parameters are invalid: %s", exc)
        return 1
    except FileNotFoundError as exc:
        logging.error("Could not read file %s", exc)
        return 1

    engine = convert_with_engine(frames, settings)
    labels = engine.label_plan() if settings.labels else None
    save_png(engine.raster, args.outputfile, labels=labels)
    logging.info("Wrote %s", args.outputfile)
    return 0


def create_source(args: argparse.Namespace):
    if args.demo or sd is None:
        return DemoSource(args.samplerate, args.channels, args.blocksize)
    try:
        return MicSource(
            args.samplerate, args.channels, args.blocksize, device=args.device
        )
    except Exception as exc:  # pragma: no cover - interactive fallback
        logging.warning("Could not initialize microphone input: %s", exc)
        logging.warning(
            "Falling back to demo mode. Use --device to select input or install sounddevice."
        )
        return DemoSource(args.samplerate, args.channels, args.blocksize)


def run_live(args: argparse.Namespace) -> int:
    from audio_spectrogram.viewer import LiveSpectrogram

    try:
        settings = build_settings(args, args.samplerate, args.channels)
        validate_raster_dimensions(args.width, settings.raster_height)
    except ConfigurationError as exc:
        logging.error("parameters are invalid: %s", exc)
        return 1

    source = create_source(args)
    view = LiveSpectrogram(
        source,
        settings,
        width=args.width,
        refresh_ms=args.refresh_ms,
        output_dir=args.output_dir,
    )
    view.run(record=not args.paused)
    return 0


def convert_main(argv: list[str] | None = None) -> None:
    args = parse_convert_args(argv if argv is not None else sys.argv[1:])
    _configure_logging(args.log_level)
    raise SystemExit(run_convert(args))


def live_main(argv: list[str] | None = None) -> None:
    args = parse_live_args(argv if argv is not None else sys.argv[1:])
    _configure_logging(args.log_level)
    raise SystemExit(run_live(args))


__all__ = [
    "build_settings",
    "convert_main",
    "create_source",
    "live_main",
    "parse_convert_args",
    "parse_live_args",
    "run_convert",
    "run_live",
]
