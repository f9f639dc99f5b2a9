"""Tests for the SessionRecord dataclass."""

import pytest

from sleeptrack.core.session import UNRATED, SessionRecord, now_millis


def test_begin_creates_open_record():
    """Test begin() sets end_time equal to start_time."""
    record = SessionRecord.begin(1000)

    assert record.id == 0
    assert record.start_time == 1000
    assert record.end_time == 1000
    assert record.quality == UNRATED
    assert record.is_open
    assert not record.is_rated


def test_ended_closes_record():
    """Test ended() sets end_time and leaves the original untouched."""
    record = SessionRecord(id=1, start_time=1000, end_time=1000)
    ended = record.ended(5000)

    assert ended.end_time == 5000
    assert not ended.is_open
    assert ended.duration_ms == 4000
    assert record.is_open


def test_ended_same_millisecond_still_open():
    """Test a night stopped in its start millisecond still reads as open."""
    record = SessionRecord.begin(1000)

    assert record.ended(1000).is_open


def test_rated_sets_quality():
    """Test rated() sets quality."""
    record = SessionRecord(id=1, start_time=1000, end_time=2000)

    assert record.rated(4).quality == 4
    assert record.rated(4).is_rated


@pytest.mark.parametrize("quality", [-2, 6, 100])
def test_invalid_quality_rejected(quality):
    """Test quality outside -1 and 0..5 raises ValueError."""
    with pytest.raises(ValueError, match="Invalid quality"):
        SessionRecord(id=1, start_time=1000, end_time=2000, quality=quality)


def test_end_before_start_rejected():
    """Test end_time before start_time raises ValueError."""
    with pytest.raises(ValueError, match="before start_time"):
        SessionRecord(id=1, start_time=2000, end_time=1000)


def test_records_are_immutable():
    """Test SessionRecord is frozen."""
    record = SessionRecord.begin(1000)

    with pytest.raises(AttributeError):
        record.end_time = 2000


def test_now_millis_is_epoch_milliseconds():
    """Test now_millis returns a plausible epoch-ms value."""
    assert now_millis() > 1_600_000_000_000
