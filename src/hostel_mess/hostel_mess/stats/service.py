from __future__ import annotations

from datetime import date
from typing import Any

from ..assignments.model import select_active
from ..assignments.repository import AssignmentRepository
from ..attendance.repository import AttendanceRepository
from ..common.clock import Clock
from ..common.datetime_utils import iter_dates
from ..common.flow_log import flow_log
from ..common.validators import require_positive_int
from ..core.enums import MealSlot, RejectReason
from ..core.exceptions import PreconditionError, ValidationError
from ..menus.model import MenuSnapshot
from ..menus.service import MealPlanService
from .model import MealStats


class EligibilityAggregator:
    """Attended / eligible / missed meal counts for a resident over a date range.

    Eligibility is recomputed per day from the hostel the resident belonged to
    on that day, so a mid-range move splits the range between both hostels'
    meal plans. Nothing is materialized.
    """

    def __init__(
        self,
        assignments: AssignmentRepository,
        meal_plans: MealPlanService,
        attendance: AttendanceRepository,
        clock: Clock,
    ):
        self._assignments = assignments
        self._meal_plans = meal_plans
        self._attendance = attendance
        self._clock = clock

    def stats(self, resident_id: Any, from_date: date, to_date: date) -> MealStats:
        resident_id = require_positive_int(resident_id, "resident_id")
        today = self._clock.today()
        to_capped = min(to_date, today)
        if from_date > to_capped:
            raise ValidationError("from must be <= to (after capping to today)")

        flow_log("STATS", "Request received", resident_id=resident_id, start=from_date.isoformat(), end=to_capped.isoformat())

        history = self._assignments.list_for_resident(resident_id)
        hostel_by_day: dict[date, int] = {}
        for day in iter_dates(from_date, to_capped):
            a = select_active(history, day)
            if a is not None:
                hostel_by_day[day] = a.hostel_id

        if not hostel_by_day:
            raise PreconditionError("Resident not enrolled in any hostel", reason=RejectReason.NOT_ENROLLED)

        snapshots: dict[int, MenuSnapshot] = {}
        for hostel_id in sorted(set(hostel_by_day.values())):
            snapshots[hostel_id] = self._meal_plans.snapshot(hostel_id, from_date, to_capped)

        eligible = {m: 0 for m in MealSlot}
        for day, hostel_id in hostel_by_day.items():
            snapshot = snapshots[hostel_id]
            for meal in MealSlot:
                if snapshot.effective(day, meal).is_open:
                    eligible[meal] += 1

        attended = {m: 0 for m in MealSlot}
        for scan in self._attendance.list_for_resident(resident_id=resident_id, start=from_date, end=to_capped):
            if hostel_by_day.get(scan.scan_date) == scan.hostel_id:
                attended[scan.meal] += 1

        missed = {m: max(0, eligible[m] - attended[m]) for m in MealSlot}

        current = select_active(history, to_capped)
        flow_log("STATS", "Returned", resident_id=resident_id, assigned_days=len(hostel_by_day))
        return MealStats(
            from_date=from_date,
            to_date=to_capped,
            hostel_id=current.hostel_id if current else None,
            assigned_days=len(hostel_by_day),
            attended=attended,
            eligible=eligible,
            missed=missed,
        )
