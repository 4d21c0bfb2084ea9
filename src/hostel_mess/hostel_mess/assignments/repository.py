from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import HostelAssignment


class AssignmentRepository(Protocol):
    def list_for_resident(self, resident_id: int) -> Sequence[HostelAssignment]:
        """All ranges for a resident, oldest first."""

        raise NotImplementedError

    def find_active(self, resident_id: int, on: date) -> Optional[HostelAssignment]:
        raise NotImplementedError

    def create(
        self,
        *,
        resident_id: int,
        hostel_id: int,
        start_date: date,
        end_date: Optional[date] = None,
        close_assignment_id: Optional[int] = None,
        close_on: Optional[date] = None,
    ) -> int:
        """Insert a range, closing ``close_assignment_id`` on ``close_on`` in the same transaction.

        Raises ConflictError when the range overlaps a stored one at write time.
        Returns assignment_id.
        """

        raise NotImplementedError

    def close(self, *, assignment_id: int, end_date: date) -> bool:
        raise NotImplementedError
