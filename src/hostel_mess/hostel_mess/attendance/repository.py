from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import MealSlot
from .model import AttendanceScan


class AttendanceRepository(Protocol):
    def insert_if_absent(self, scan: AttendanceScan) -> bool:
        """Atomically insert the scan unless its key already exists.

        Returns False when a row for the key is already stored. The store's
        unique key is the only mutual exclusion between racing scans.
        """

        raise NotImplementedError

    def get(self, *, hostel_id: int, scan_date: date, meal: MealSlot, resident_id: int) -> Optional[AttendanceScan]:
        raise NotImplementedError

    def list_for_resident(self, *, resident_id: int, start: date, end: date) -> Sequence[AttendanceScan]:
        raise NotImplementedError
