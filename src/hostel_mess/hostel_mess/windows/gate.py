from __future__ import annotations

from datetime import time
from typing import Mapping, Optional, Tuple

from ..core.constants import DEFAULT_MEAL_WINDOWS
from ..core.enums import MealSlot, WindowSource
from .model import MealWindow
from .repository import MealWindowRepository


def build_default_windows(table: Mapping[str, Tuple[time, time, int]]) -> dict[MealSlot, MealWindow]:
    windows = {}
    for meal in MealSlot:
        start, end, grace = table[meal.value]
        windows[meal] = MealWindow(meal=meal, start=start, end=end, grace_minutes=int(grace), source=WindowSource.DEFAULT)
    return windows


class MealWindowGate:
    """Per-hostel meal windows with a built-in fallback table.

    All comparisons are in minutes since midnight of the configured zone.
    """

    def __init__(
        self,
        windows: MealWindowRepository,
        *,
        defaults: Optional[Mapping[str, Tuple[time, time, int]]] = None,
    ):
        self._windows = windows
        self._defaults = build_default_windows(defaults or DEFAULT_MEAL_WINDOWS)

    def default_window(self, meal: MealSlot) -> MealWindow:
        return self._defaults[meal]

    def resolve_window(self, hostel_id: int, meal: MealSlot) -> MealWindow:
        return self._windows.get(hostel_id=int(hostel_id), meal=meal) or self._defaults[meal]

    def is_within_window(self, hostel_id: int, meal: MealSlot, now_minutes: int) -> bool:
        return self.resolve_window(hostel_id, meal).contains(now_minutes)

    def has_closed(self, hostel_id: int, meal: MealSlot, now_minutes: int) -> bool:
        return self.resolve_window(hostel_id, meal).has_closed(now_minutes)
