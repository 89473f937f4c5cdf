"""Clock abstraction.

Services ask a clock for the current time instead of calling
``datetime.now`` so that decay and ordering can be tested deterministically.
"""

from datetime import datetime, timedelta, timezone


class Clock:
    """System clock returning timezone-aware UTC time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FrozenClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, now: datetime | None = None) -> None:
        self._now = now or datetime.now(timezone.utc)

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now

    def advance(self, **kwargs: float) -> datetime:
        """Move the clock forward by a ``timedelta(**kwargs)``."""
        self._now = self._now + timedelta(**kwargs)
        return self._now
