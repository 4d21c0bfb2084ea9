from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, Optional


@dataclass(frozen=True)
class HostelAssignment:
    """One residence range. ``end_date`` is None for the current assignment."""

    assignment_id: int
    resident_id: int
    hostel_id: int
    start_date: date
    end_date: Optional[date] = None

    @property
    def is_open(self) -> bool:
        return self.end_date is None

    def covers(self, day: date) -> bool:
        return self.start_date <= day and (self.end_date is None or day <= self.end_date)

    def overlaps(self, start: date, end: Optional[date]) -> bool:
        if end is not None and end < self.start_date:
            return False
        if self.end_date is not None and self.end_date < start:
            return False
        return True


def select_active(assignments: Iterable[HostelAssignment], day: date) -> Optional[HostelAssignment]:
    """The assignment covering ``day``; the latest start wins if ranges ever overlap."""
    best: Optional[HostelAssignment] = None
    for a in assignments:
        if a.covers(day) and (best is None or a.start_date > best.start_date):
            best = a
    return best


def find_overlap(
    assignments: Iterable[HostelAssignment],
    start: date,
    end: Optional[date],
    *,
    closing_id: Optional[int] = None,
    close_on: Optional[date] = None,
) -> Optional[HostelAssignment]:
    """First range that would overlap [start, end], after closing ``closing_id`` on ``close_on``."""
    for a in assignments:
        if closing_id is not None and a.assignment_id == closing_id:
            a = replace(a, end_date=close_on)
        if a.overlaps(start, end):
            return a
    return None
