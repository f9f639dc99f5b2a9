"""Tests for session text formatting."""

from sleeptrack.core.session import SessionRecord
from sleeptrack.tui.format import (
    format_duration,
    format_sessions,
    quality_label,
    session_row,
)
from tests.helpers import closed_night


def test_quality_labels():
    """Test every rating has a label and unrated shows a dash."""
    assert quality_label(0) == "Very bad"
    assert quality_label(3) == "OK"
    assert quality_label(5) == "Excellent"
    assert quality_label(-1) == "--"


def test_format_duration():
    """Test durations pick hours, minutes or seconds."""
    assert format_duration(8 * 3_600_000 + 5 * 60_000) == "8h 05m"
    assert format_duration(12 * 60_000 + 30_000) == "12m 30s"
    assert format_duration(4_000) == "4s"
    assert format_duration(-10) == "0s"


def test_session_row_open():
    """Test an open night shows as sleeping with no duration."""
    row = session_row(SessionRecord.begin(1_700_000_000_000))

    assert row[0] == "0"
    assert row[2] == "(sleeping...)"
    assert row[3:] == ("", "")


def test_session_row_closed():
    """Test a finished night shows duration and quality."""
    row = session_row(closed_night(1_700_000_000_000, hours=6, quality=1))

    assert row[3] == "6h 00m"
    assert row[4] == "Poor"


def test_format_sessions_empty():
    """Test the empty list message."""
    assert format_sessions([]) == "No sleep data yet."


def test_format_sessions_keeps_order():
    """Test nights are rendered in the order given."""
    first = SessionRecord(id=2, start_time=2_000_000, end_time=2_000_000)
    second = SessionRecord(id=1, start_time=1_000_000, end_time=1_000_000 + 3_600_000, quality=5)

    text = format_sessions([first, second])

    assert text.index("Night 2") < text.index("Night 1")
    assert "(sleeping...)" in text
    assert "Excellent" in text
    assert "1h 00m" in text
