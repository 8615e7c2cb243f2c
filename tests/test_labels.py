from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from audio_spectrogram.labels import Label, plan_labels


def _plan(total_scrolled=0, width=25, upper=5000.0, **kwargs):
    return plan_labels(
        total_scrolled=total_scrolled,
        width=width,
        height=501,
        freq_resolution=10.0,
        time_resolution=0.1,
        upper_frequency_limit=upper,
        **kwargs,
    )


def test_frequency_rows_every_kilohertz():
    plan = _plan()
    assert plan.frequency == [
        Label(401, "1kHz"),
        Label(301, "2kHz"),
        Label(201, "3kHz"),
        Label(101, "4kHz"),
    ]


def test_frequency_limit_not_multiple_of_grid():
    plan = _plan(upper=4500.0)
    assert plan.frequency[-1] == Label(101, "4kHz")


def test_time_columns_without_scroll():
    assert _plan().time == [Label(0, "0s"), Label(10, "1s"), Label(20, "2s")]


def test_time_columns_follow_scroll_offset():
    assert _plan(total_scrolled=15).time == [Label(5, "2s"), Label(15, "3s")]


def test_fractional_grid_text():
    plan = _plan(frequency_grid=500.0, upper=1200.0)
    assert [label.text for label in plan.frequency] == ["0.5kHz", "1kHz"]


def test_labels_outside_raster_dropped():
    plan = plan_labels(
        total_scrolled=0,
        width=5,
        height=50,
        freq_resolution=10.0,
        time_resolution=0.1,
        upper_frequency_limit=5000.0,
    )
    assert plan.frequency == []
    assert plan.time == [Label(0, "0s")]
