from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import MealSlot


@dataclass(frozen=True)
class AttendanceScan:
    """One confirmed meal attendance; unique on (hostel, date, meal, resident)."""

    hostel_id: int
    scan_date: date
    meal: MealSlot
    resident_id: int
    scanned_at: datetime
    scanned_by: int
    source: str = "qr"
    scan_id: Optional[int] = None

    @property
    def key(self) -> tuple[int, date, MealSlot, int]:
        return (self.hostel_id, self.scan_date, self.meal, self.resident_id)

    def as_dict(self) -> dict:
        return {
            "hostel_id": self.hostel_id,
            "date": self.scan_date.isoformat(),
            "meal": self.meal.value,
            "resident_id": self.resident_id,
            "scanned_at": self.scanned_at.isoformat(),
            "scanned_by": self.scanned_by,
            "source": self.source,
        }
