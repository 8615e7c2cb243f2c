#!/usr/bin/env python3
"""Canonical entry point for the live scrolling spectrogram."""

from audio_spectrogram.cli import live_main


if __name__ == "__main__":
    live_main()
