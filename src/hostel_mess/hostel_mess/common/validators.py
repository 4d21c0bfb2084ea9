from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.constants import MAX_MENU_ITEMS, MAX_NOTE_LENGTH
from ..core.enums import MealSlot, MealStatus
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_positive_int(value: Any, field_name: str) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if n <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return n


def parse_meal_slot(value: Any) -> MealSlot:
    if isinstance(value, MealSlot):
        return value
    try:
        return MealSlot(str(value or "").strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in MealSlot)
        raise ValidationError(f"meal_type must be one of {allowed}")


def parse_meal_status(value: Any) -> MealStatus:
    if isinstance(value, MealStatus):
        return value
    try:
        return MealStatus(str(value or "").strip().lower())
    except ValueError:
        raise ValidationError("status must be open or holiday")


def parse_day_of_week(value: Any) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise ValidationError("day_of_week must be 0-6")
    if n < 0 or n > 6:
        raise ValidationError("day_of_week must be 0-6")
    return n


def clean_note(value: Optional[str]) -> Optional[str]:
    note = str(value).strip() if value is not None else ""
    if len(note) > MAX_NOTE_LENGTH:
        raise ValidationError(f"note must be at most {MAX_NOTE_LENGTH} characters")
    return note or None


def clean_items(value: Optional[Sequence[Any]]) -> tuple[str, ...]:
    """Items keep their order; blanks are dropped."""
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise ValidationError("items must be a list of strings")
    items = tuple(str(i).strip() for i in value if i is not None and str(i).strip())
    if len(items) > MAX_MENU_ITEMS:
        raise ValidationError(f"at most {MAX_MENU_ITEMS} items per meal")
    return items
