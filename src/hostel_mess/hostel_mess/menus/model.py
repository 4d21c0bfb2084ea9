from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Mapping, Optional

from ..common.datetime_utils import day_of_week
from ..core.enums import MealSlot, MealStatus, MenuSource


@dataclass(frozen=True)
class WeeklyMenuTemplate:
    """Recurring plan row keyed by (hostel, day_of_week, meal); 0=Sunday."""

    hostel_id: int
    day_of_week: int
    meal: MealSlot
    status: MealStatus
    note: Optional[str] = None
    items: tuple[str, ...] = ()
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class DateOverride:
    """One-off exception to the weekly template for a single date."""

    hostel_id: int
    menu_date: date
    meal: MealSlot
    status: MealStatus
    note: Optional[str] = None
    items: tuple[str, ...] = ()
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class EffectiveMeal:
    hostel_id: int
    menu_date: date
    meal: MealSlot
    status: MealStatus
    note: Optional[str]
    items: tuple[str, ...]
    source: MenuSource

    @property
    def is_open(self) -> bool:
        return self.status == MealStatus.OPEN

    def as_dict(self) -> dict:
        return {
            "hostel_id": self.hostel_id,
            "date": self.menu_date.isoformat(),
            "meal": self.meal.value,
            "status": self.status.value,
            "note": self.note,
            "items": list(self.items),
            "source": self.source.value,
        }


def merge_meal(
    *,
    hostel_id: int,
    menu_date: date,
    meal: MealSlot,
    override: Optional[DateOverride],
    template: Optional[WeeklyMenuTemplate],
) -> EffectiveMeal:
    """Override, then template, then open with no items."""
    if override is not None:
        return EffectiveMeal(hostel_id, menu_date, meal, override.status, override.note, override.items, MenuSource.OVERRIDE)
    if template is not None:
        return EffectiveMeal(hostel_id, menu_date, meal, template.status, template.note, template.items, MenuSource.TEMPLATE)
    return EffectiveMeal(hostel_id, menu_date, meal, MealStatus.OPEN, None, (), MenuSource.DEFAULT)


@dataclass(frozen=True)
class MenuSnapshot:
    """All template rows and the overrides of a date range for one hostel.

    Lets range readers merge many days without a query per day.
    """

    hostel_id: int
    templates: Mapping[tuple[int, MealSlot], WeeklyMenuTemplate]
    overrides: Mapping[tuple[date, MealSlot], DateOverride]

    def effective(self, menu_date: date, meal: MealSlot) -> EffectiveMeal:
        return merge_meal(
            hostel_id=self.hostel_id,
            menu_date=menu_date,
            meal=meal,
            override=self.overrides.get((menu_date, meal)),
            template=self.templates.get((day_of_week(menu_date), meal)),
        )
