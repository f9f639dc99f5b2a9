"""SessionRecord dataclass for sleeptrack."""

import time
from dataclasses import dataclass, replace

UNRATED = -1
MIN_QUALITY = 0
MAX_QUALITY = 5


def now_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class SessionRecord:
    """Represents one tracked night of sleep.

    Attributes:
        id: Store-assigned identifier (0 until the record is inserted)
        start_time: Epoch milliseconds when tracking started
        end_time: Epoch milliseconds when tracking stopped (equals start_time while open)
        quality: Rating from 0 to 5, or UNRATED
    """

    id: int
    start_time: int
    end_time: int
    quality: int = UNRATED

    def __post_init__(self) -> None:
        """Validate timestamps and rating."""
        if self.end_time < self.start_time:
            raise ValueError(
                f"end_time {self.end_time} is before start_time {self.start_time}"
            )
        if self.quality != UNRATED and not MIN_QUALITY <= self.quality <= MAX_QUALITY:
            raise ValueError(
                f"Invalid quality: {self.quality}. "
                f"Must be {UNRATED} or between {MIN_QUALITY} and {MAX_QUALITY}"
            )

    @classmethod
    def begin(cls, now_ms: int) -> "SessionRecord":
        """Build an unsaved record that starts (and, for now, ends) at now_ms."""
        return cls(id=0, start_time=now_ms, end_time=now_ms)

    @property
    def is_open(self) -> bool:
        # A night stopped in the same millisecond it started also reads as open.
        return self.end_time == self.start_time

    @property
    def is_rated(self) -> bool:
        return self.quality != UNRATED

    @property
    def duration_ms(self) -> int:
        return self.end_time - self.start_time

    def ended(self, now_ms: int) -> "SessionRecord":
        """Return a copy with end_time set to now_ms."""
        return replace(self, end_time=now_ms)

    def rated(self, quality: int) -> "SessionRecord":
        """Return a copy with the given quality rating."""
        return replace(self, quality=quality)
