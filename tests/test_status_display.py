import io

from p455w0rd.Models import ProgressContext
from p455w0rd.StatusDisplay import StatusDisplay, format_eta


def test_format_eta():
    assert format_eta(None) == "Unknown"
    assert format_eta(30) == "30s"
    assert format_eta(90) == "1.5m"
    assert format_eta(7200) == "2.0h"


def test_progress_percent():
    assert ProgressContext(estimated_total=100, emitted=50).percent == 50.0
    assert ProgressContext(estimated_total=100, emitted=150).percent == 95.0
    assert ProgressContext(estimated_total=100, emitted=400).percent is None
    assert ProgressContext(estimated_total=0, emitted=10).percent is None


def test_eta_unknown_once_estimate_exceeded():
    assert ProgressContext(estimated_total=100, emitted=150).eta is None
    assert ProgressContext(estimated_total=100, emitted=0).eta == 0.0


def test_render():
    progress = ProgressContext(estimated_total=100, emitted=50, combo_size=2)
    text = StatusDisplay(progress, "out.txt", 3).render()
    assert "Target...........: out.txt" in text
    assert "Words............: 3 words" in text
    assert "Current.Combo....: 2 word(s)" in text
    assert "Progress.........: 50/100 (50.00%)" in text
    assert "Status...........: Running" in text


def test_render_estimate_exceeded():
    progress = ProgressContext(estimated_total=100, emitted=400)
    text = StatusDisplay(progress, "out.txt", 1).render()
    assert "Progress.........: 400 passwords (estimate exceeded)" in text
    assert "Time.ETA.........: Unknown" in text


def test_redraw_moves_cursor_and_throttles():
    stream = io.StringIO()
    display = StatusDisplay(ProgressContext(estimated_total=10), "out.txt", 1, interval=3600, stream=stream)

    display(1, 10, 1)
    first = stream.getvalue()
    assert "\x1b[" not in first

    # throttled
    display(2, 10, 1)
    assert stream.getvalue() == first

    display.draw()
    assert "\x1b[" in stream.getvalue()[len(first):]
