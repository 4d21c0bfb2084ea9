from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..common.datetime_utils import minutes_of
from ..core.enums import MealSlot, WindowSource


@dataclass(frozen=True)
class MealWindow:
    """Clock-time range (plus grace) during which a meal may be scanned or edited.

    Windows never cross midnight: ``start <= end`` within one civil day.
    """

    meal: MealSlot
    start: time
    end: time
    grace_minutes: int = 0
    hostel_id: Optional[int] = None
    source: WindowSource = WindowSource.DEFAULT

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"{self.meal.value} window crosses midnight: {self.start}-{self.end}")
        if self.grace_minutes < 0:
            raise ValueError("grace_minutes must be >= 0")

    @property
    def start_minutes(self) -> int:
        return minutes_of(self.start)

    @property
    def closes_at_minutes(self) -> int:
        """Last minute (inclusive) at which the window still accepts scans."""
        return minutes_of(self.end) + self.grace_minutes

    def contains(self, now_minutes: int) -> bool:
        return self.start_minutes <= now_minutes <= self.closes_at_minutes

    def has_closed(self, now_minutes: int) -> bool:
        return now_minutes > self.closes_at_minutes

    def as_dict(self) -> dict:
        return {
            "meal": self.meal.value,
            "start_time": self.start.strftime("%H:%M"),
            "end_time": self.end.strftime("%H:%M"),
            "grace_minutes": self.grace_minutes,
            "source": self.source.value,
        }
