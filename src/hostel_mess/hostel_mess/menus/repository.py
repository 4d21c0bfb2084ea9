from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import MealSlot, MealStatus
from .model import DateOverride, WeeklyMenuTemplate


class MenuRepository(Protocol):
    def get_template(self, *, hostel_id: int, day_of_week: int, meal: MealSlot) -> Optional[WeeklyMenuTemplate]:
        raise NotImplementedError

    def list_templates(self, *, hostel_id: int, day_of_week: Optional[int] = None) -> Sequence[WeeklyMenuTemplate]:
        raise NotImplementedError

    def upsert_template(
        self,
        *,
        hostel_id: int,
        day_of_week: int,
        meal: MealSlot,
        status: MealStatus,
        note: Optional[str],
        items: Sequence[str],
    ) -> WeeklyMenuTemplate:
        """Insert or replace the row for the key; the store stamps updated_at."""

        raise NotImplementedError

    def get_override(self, *, hostel_id: int, menu_date: date, meal: MealSlot) -> Optional[DateOverride]:
        raise NotImplementedError

    def list_overrides(self, *, hostel_id: int, start: date, end: date) -> Sequence[DateOverride]:
        raise NotImplementedError

    def upsert_override(
        self,
        *,
        hostel_id: int,
        menu_date: date,
        meal: MealSlot,
        status: MealStatus,
        note: Optional[str],
        items: Sequence[str],
    ) -> DateOverride:
        raise NotImplementedError

    def replace_override_items(
        self, *, hostel_id: int, menu_date: date, meal: MealSlot, items: Sequence[str]
    ) -> Optional[DateOverride]:
        """Returns None when no override exists for the key."""

        raise NotImplementedError

    def delete_override(self, *, hostel_id: int, menu_date: date, meal: MealSlot) -> bool:
        raise NotImplementedError
