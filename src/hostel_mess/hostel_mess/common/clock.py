from __future__ import annotations

from datetime import date, datetime
from typing import Protocol

import pytz

from .datetime_utils import minutes_of


class Clock(Protocol):
    """Single source of "now" and "today" in the configured civil timezone."""

    def now(self) -> datetime:
        raise NotImplementedError

    def today(self) -> date:
        raise NotImplementedError

    def minutes_now(self) -> int:
        raise NotImplementedError


class ZoneClock:
    def __init__(self, timezone_name: str):
        self._tz = pytz.timezone(timezone_name)

    @property
    def timezone(self):
        return self._tz

    def now(self) -> datetime:
        return datetime.now(pytz.utc).astimezone(self._tz)

    def today(self) -> date:
        return self.now().date()

    def minutes_now(self) -> int:
        return minutes_of(self.now().time())


class FixedClock:
    """Clock pinned to one instant.

    Naive datetimes are localized into the given zone, so tests can write
    ``FixedClock(datetime(2024, 3, 10, 7, 30))`` and mean 07:30 local.
    """

    def __init__(self, instant: datetime, timezone_name: str = "Asia/Kolkata"):
        self._tz = pytz.timezone(timezone_name)
        self.set(instant)

    def set(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            self._instant = self._tz.localize(instant)
        else:
            self._instant = instant.astimezone(self._tz)

    def now(self) -> datetime:
        return self._instant

    def today(self) -> date:
        return self._instant.date()

    def minutes_now(self) -> int:
        return minutes_of(self._instant.time())
