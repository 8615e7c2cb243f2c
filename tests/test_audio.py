from pathlib import Path
import sys
import threading
import time

import numpy as np
import pytest
from scipy.io import wavfile

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from audio_spectrogram import audio
from audio_spectrogram.audio import DemoSource, RecordingBuffer, load_audio, save_recording
from audio_spectrogram.utils import downmix


def test_downmix_interleaved_int16():
    interleaved = np.array([32767, -32768, 16384, 16384, 0, 0, 5], dtype=np.int16)
    mono = downmix(interleaved, 2)
    assert mono.dtype == np.float32
    # trailing partial frame dropped
    assert mono.shape == (3,)
    assert np.allclose(mono, [(32767 - 32768) / 65536, 0.5, 0.0])


def test_downmix_two_dimensional_float():
    frames = np.array([[0.5, -0.5], [1.0, 0.0]], dtype=np.float32)
    assert np.allclose(downmix(frames), [0.0, 0.5])


def test_downmix_mono_passthrough():
    data = np.linspace(-1, 1, 5)
    assert np.allclose(downmix(data), data)


def test_load_audio_wav(tmp_path):
    rate = 8000
    left = (np.sin(np.arange(800) * 0.1) * 10000).astype(np.int16)
    right = np.zeros_like(left)
    path = tmp_path / "clip.wav"
    wavfile.write(path, rate, np.stack([left, right], axis=1))

    frames, sample_rate, channels = load_audio(path)
    assert sample_rate == rate
    assert channels == 2
    assert frames.shape == (800, 2)
    assert np.allclose(downmix(frames), left / 65536.0, atol=1e-4)


def test_load_audio_without_soundfile(tmp_path, monkeypatch):
    monkeypatch.setattr(audio, "sf", None)
    path = tmp_path / "mono.wav"
    wavfile.write(path, 16000, np.arange(100, dtype=np.int16))
    frames, sample_rate, channels = load_audio(path)
    assert (sample_rate, channels) == (16000, 1)
    assert frames.dtype == np.int16
    assert frames.shape == (100, 1)


def test_load_audio_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_audio(tmp_path / "nope.wav")


def test_save_recording_round_trip(tmp_path):
    frames = (np.arange(200, dtype=np.int16).reshape(100, 2) * 50).astype(np.int16)
    path = save_recording(tmp_path / "take.wav", frames, 22050)
    loaded, sample_rate, channels = load_audio(path)
    assert (sample_rate, channels) == (22050, 2)
    assert np.allclose(downmix(loaded), downmix(frames), atol=1e-4)


def test_recording_buffer_ignores_frames_when_not_recording():
    buffer = RecordingBuffer(channels=2)
    buffer.append(np.ones(8, dtype=np.int16))
    assert len(buffer) == 0
    assert buffer.drain().shape == (0, 2)


def test_recording_buffer_drain_and_snapshot():
    buffer = RecordingBuffer(channels=2)
    assert buffer.toggle_recording() is True
    buffer.append(np.arange(8, dtype=np.int16))
    buffer.append(np.arange(8, 12, dtype=np.int16).reshape(2, 2))

    first = buffer.drain()
    assert first.shape == (6, 2)
    assert np.array_equal(first.ravel(), np.arange(12))
    assert buffer.drain().size == 0

    buffer.append(np.array([[100, 101]], dtype=np.int16))
    assert np.array_equal(buffer.drain(), [[100, 101]])
    assert buffer.snapshot().shape == (7, 2)

    buffer.clear()
    assert len(buffer) == 0
    assert buffer.snapshot().size == 0


def test_recording_buffer_concurrent_producer():
    buffer = RecordingBuffer(channels=2)
    buffer.set_recording(True)
    blocks = 200

    def produce():
        for i in range(blocks):
            start = i * 10
            buffer.append(np.arange(start, start + 10, dtype=np.int32).reshape(5, 2))

    thread = threading.Thread(target=produce)
    thread.start()
    drained = []
    while thread.is_alive():
        drained.append(buffer.drain())
    thread.join()
    drained.append(buffer.drain())

    joined = np.concatenate(drained, axis=0)
    assert np.array_equal(joined.ravel(), np.arange(blocks * 10))


def test_demo_source_delivers_blocks():
    source = DemoSource(samplerate=1000, channels=2, blocksize=10)
    block = source.generate(10)
    assert block.shape == (10, 2)
    assert block.dtype == np.int16

    received = []
    source.start(received.append)
    deadline = time.monotonic() + 2.0
    while not received and time.monotonic() < deadline:
        time.sleep(0.01)
    source.stop()
    assert received
    assert all(b.shape == (10, 2) for b in received)


def test_recording_buffer_drain_joins_only_new_chunks(monkeypatch):
    buffer = RecordingBuffer(channels=2)
    buffer.set_recording(True)
    for i in range(50):
        buffer.append(np.full((4, 2), i, dtype=np.int16))
    buffer.drain()

    joined_sizes = []
    original = RecordingBuffer._concatenate

    def spy(self, chunks):
        joined_sizes.append(len(chunks))
        return original(self, chunks)

    monkeypatch.setattr(RecordingBuffer, "_concatenate", spy)
    for i in range(50, 60):
        buffer.append(np.full((4, 2), i, dtype=np.int16))
        pending = buffer.drain()
        assert pending.shape == (4, 2)
        assert (pending == i).all()
    assert joined_sizes == [1] * 10

    clip = buffer.snapshot()
    assert clip.shape == (240, 2)
    assert np.array_equal(clip[::4, 0], np.arange(60))
