"""Absolute deadlines shared by shutdown steps."""

import time
from dataclasses import dataclass


@dataclass(frozen=True)
class Deadline:
    """A fixed point on the monotonic clock.

    Every step of a shutdown phase receives the same Deadline, so a slow
    step eats into the time left for the next one instead of extending it.
    """
    when: float

    @classmethod
    def after(cls, seconds: float) -> 'Deadline':
        """Create a deadline `seconds` from now."""
        return cls(time.monotonic() + seconds)

    def remaining(self) -> float:
        """Seconds left before the deadline, never negative."""
        return max(0.0, self.when - time.monotonic())

    @property
    def expired(self) -> bool:
        return time.monotonic() >= self.when
