"""Text formatting for sleep sessions."""

from collections.abc import Sequence
from datetime import datetime

from sleeptrack.core.session import UNRATED, SessionRecord

QUALITY_LABELS = {
    0: "Very bad",
    1: "Poor",
    2: "So-so",
    3: "OK",
    4: "Pretty good",
    5: "Excellent",
}


def quality_label(quality: int) -> str:
    """Human-readable label for a quality rating."""
    if quality == UNRATED:
        return "--"
    return QUALITY_LABELS.get(quality, "--")


def format_timestamp(epoch_ms: int) -> str:
    """Format epoch milliseconds as local 'Mon 2024-01-01 22:30'."""
    return datetime.fromtimestamp(epoch_ms / 1000).strftime("%a %Y-%m-%d %H:%M")


def format_duration(duration_ms: int) -> str:
    """Format a duration as '7h 05m', or seconds/minutes when short."""
    seconds = max(duration_ms, 0) // 1000
    hours, remainder = divmod(seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{hours}h {minutes:02d}m"
    if minutes:
        return f"{minutes}m {seconds:02d}s"
    return f"{seconds}s"


def session_row(record: SessionRecord) -> tuple[str, str, str, str, str]:
    """Cells for one table row: id, start, end, duration, quality."""
    if record.is_open:
        return (str(record.id), format_timestamp(record.start_time), "(sleeping...)", "", "")
    return (
        str(record.id),
        format_timestamp(record.start_time),
        format_timestamp(record.end_time),
        format_duration(record.duration_ms),
        quality_label(record.quality),
    )


def format_sessions(records: Sequence[SessionRecord]) -> str:
    """Render a list of sessions as plain text, one block per night."""
    if not records:
        return "No sleep data yet."

    blocks = []
    for record in records:
        _, start, end, duration, quality = session_row(record)
        lines = [f"Night {record.id}", f"  Start:    {start}"]
        if record.is_open:
            lines.append("  End:      (sleeping...)")
        else:
            lines.append(f"  End:      {end}")
            lines.append(f"  Duration: {duration}")
            lines.append(f"  Quality:  {quality}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)
