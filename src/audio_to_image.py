#!/usr/bin/env python3
"""Render an audio file into a spectrogram PNG."""

from audio_spectrogram.cli import convert_main


if __name__ == "__main__":
    convert_main()
