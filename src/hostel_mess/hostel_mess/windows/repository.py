from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import MealSlot
from .model import MealWindow


class MealWindowRepository(Protocol):
    def get(self, *, hostel_id: int, meal: MealSlot) -> Optional[MealWindow]:
        raise NotImplementedError
