"""Test helpers shared across sleeptrack tests."""

from sleeptrack.core.session import UNRATED, SessionRecord


class StepClock:
    """Deterministic clock that advances by a fixed step on every read."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 60_000) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> int:
        self.now += self.step
        return self.now


def closed_night(start: int, hours: int = 8, quality: int = UNRATED) -> SessionRecord:
    """Build an unsaved, already finished night."""
    return SessionRecord(
        id=0,
        start_time=start,
        end_time=start + hours * 3_600_000,
        quality=quality,
    )
