"""Clock adapters."""

from datetime import datetime, timedelta

from ubiqa.domain.utils import ensure_utc, utc_now
from ubiqa.interfaces.clock import Clock


class SystemClock(Clock):
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return utc_now()


class FixedClock(Clock):
    """A clock that only moves when told to; for tests and replays."""

    def __init__(self, start: datetime) -> None:
        self._now = ensure_utc(start)

    def now(self) -> datetime:
        return self._now

    def advance(self, delta: timedelta) -> datetime:
        """Move the clock forward by `delta` and return the new time."""
        self._now += delta
        return self._now

    def set(self, moment: datetime) -> None:
        """Jump to `moment`."""
        self._now = ensure_utc(moment)
