from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional

from ..core.enums import MealSlot


@dataclass(frozen=True)
class MealStats:
    from_date: date
    to_date: date
    hostel_id: Optional[int]
    assigned_days: int
    attended: Mapping[MealSlot, int]
    eligible: Mapping[MealSlot, int]
    missed: Mapping[MealSlot, int]

    def as_dict(self) -> dict:
        def by_meal(counts: Mapping[MealSlot, int]) -> dict:
            return {m.value: int(counts.get(m, 0)) for m in MealSlot}

        return {
            "from": self.from_date.isoformat(),
            "to": self.to_date.isoformat(),
            "hostel_id": self.hostel_id,
            "assigned_days": self.assigned_days,
            "attended": by_meal(self.attended),
            "eligible": by_meal(self.eligible),
            "missed": by_meal(self.missed),
        }
