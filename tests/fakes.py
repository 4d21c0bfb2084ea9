"""In-memory repositories shared by the service tests."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import Optional

from src.hostel_mess.hostel_mess.assignments.model import HostelAssignment, find_overlap, select_active
from src.hostel_mess.hostel_mess.assignments.service import AssignmentService
from src.hostel_mess.hostel_mess.attendance.model import AttendanceScan
from src.hostel_mess.hostel_mess.attendance.service import AttendanceLedger
from src.hostel_mess.hostel_mess.audit.emitter import BestEffortAuditor
from src.hostel_mess.hostel_mess.common.clock import FixedClock
from src.hostel_mess.hostel_mess.container import Container
from src.hostel_mess.hostel_mess.core.enums import MealSlot, MealStatus, RejectReason
from src.hostel_mess.hostel_mess.core.exceptions import ConflictError
from src.hostel_mess.hostel_mess.hostels.model import Hostel, Resident
from src.hostel_mess.hostel_mess.menus.model import DateOverride, WeeklyMenuTemplate
from src.hostel_mess.hostel_mess.menus.service import MealPlanService
from src.hostel_mess.hostel_mess.stats.service import EligibilityAggregator
from src.hostel_mess.hostel_mess.tokens.codec import IdentityTokenCodec
from src.hostel_mess.hostel_mess.tokens.service import IdentityTokenService
from src.hostel_mess.hostel_mess.windows.gate import MealWindowGate
from src.hostel_mess.hostel_mess.windows.model import MealWindow

SECRET = "test-qr-secret-0123456789abcdef0123"


@dataclass
class InMemoryHostels:
    hostels: dict[int, Hostel] = field(default_factory=dict)

    def get_by_id(self, hostel_id: int) -> Optional[Hostel]:
        return self.hostels.get(int(hostel_id))


@dataclass
class InMemoryResidents:
    residents: dict[int, Resident] = field(default_factory=dict)

    def get_by_id(self, resident_id: int) -> Optional[Resident]:
        return self.residents.get(int(resident_id))


class InMemoryAssignments:
    """Writes are serialized and re-checked, like the row lock in the real store."""

    def __init__(self):
        self.rows: list[HostelAssignment] = []
        self._id = 0
        self._lock = threading.Lock()

    def add(self, resident_id: int, hostel_id: int, start: date, end: Optional[date] = None) -> HostelAssignment:
        self._id += 1
        row = HostelAssignment(self._id, resident_id, hostel_id, start, end)
        self.rows.append(row)
        return row

    def list_for_resident(self, resident_id: int):
        return sorted((a for a in self.rows if a.resident_id == resident_id), key=lambda a: a.start_date)

    def find_active(self, resident_id: int, on: date):
        return select_active(self.list_for_resident(resident_id), on)

    def create(self, *, resident_id, hostel_id, start_date, end_date=None, close_assignment_id=None, close_on=None) -> int:
        with self._lock:
            current = self.list_for_resident(resident_id)
            if find_overlap(current, start_date, end_date, closing_id=close_assignment_id, close_on=close_on):
                raise ConflictError("Assignment overlaps an existing range", reason=RejectReason.OVERLAPPING_ASSIGNMENT)
            if close_assignment_id is not None:
                self.close(assignment_id=close_assignment_id, end_date=close_on)
            return self.add(resident_id, hostel_id, start_date, end_date).assignment_id

    def close(self, *, assignment_id: int, end_date: date) -> bool:
        for i, a in enumerate(self.rows):
            if a.assignment_id == assignment_id and a.end_date is None:
                self.rows[i] = replace(a, end_date=end_date)
                return True
        return False


class InMemoryMenus:
    def __init__(self):
        self.templates: dict[tuple[int, int, MealSlot], WeeklyMenuTemplate] = {}
        self.overrides: dict[tuple[int, date, MealSlot], DateOverride] = {}
        self._tick = datetime(2024, 1, 1)

    def _stamp(self) -> datetime:
        self._tick += timedelta(seconds=1)
        return self._tick

    def get_template(self, *, hostel_id, day_of_week, meal):
        return self.templates.get((hostel_id, day_of_week, meal))

    def list_templates(self, *, hostel_id, day_of_week=None):
        rows = [t for (h, d, _), t in self.templates.items() if h == hostel_id and (day_of_week is None or d == day_of_week)]
        return sorted(rows, key=lambda t: (t.day_of_week, t.meal.value))

    def upsert_template(self, *, hostel_id, day_of_week, meal, status, note, items):
        row = WeeklyMenuTemplate(hostel_id, day_of_week, meal, status, note, tuple(items), self._stamp())
        self.templates[(hostel_id, day_of_week, meal)] = row
        return row

    def get_override(self, *, hostel_id, menu_date, meal):
        return self.overrides.get((hostel_id, menu_date, meal))

    def list_overrides(self, *, hostel_id, start, end):
        return [o for (h, d, _), o in self.overrides.items() if h == hostel_id and start <= d <= end]

    def upsert_override(self, *, hostel_id, menu_date, meal, status, note, items):
        row = DateOverride(hostel_id, menu_date, meal, status, note, tuple(items), self._stamp())
        self.overrides[(hostel_id, menu_date, meal)] = row
        return row

    def replace_override_items(self, *, hostel_id, menu_date, meal, items):
        current = self.overrides.get((hostel_id, menu_date, meal))
        if not current:
            return None
        row = replace(current, items=tuple(items), updated_at=self._stamp())
        self.overrides[(hostel_id, menu_date, meal)] = row
        return row

    def delete_override(self, *, hostel_id, menu_date, meal):
        return self.overrides.pop((hostel_id, menu_date, meal), None) is not None


@dataclass
class InMemoryWindows:
    windows: dict[tuple[int, MealSlot], MealWindow] = field(default_factory=dict)

    def get(self, *, hostel_id, meal):
        return self.windows.get((hostel_id, meal))


class InMemoryAttendance:
    """Insert-if-absent is atomic, like a unique key in the real store."""

    def __init__(self):
        self.rows: dict[tuple, AttendanceScan] = {}
        self._lock = threading.Lock()

    def insert_if_absent(self, scan: AttendanceScan) -> bool:
        with self._lock:
            if scan.key in self.rows:
                return False
            self.rows[scan.key] = scan
            return True

    def get(self, *, hostel_id, scan_date, meal, resident_id):
        return self.rows.get((hostel_id, scan_date, meal, resident_id))

    def list_for_resident(self, *, resident_id, start, end):
        return [s for s in self.rows.values() if s.resident_id == resident_id and start <= s.scan_date <= end]


class RecordingAuditSink:
    def __init__(self):
        self.events = []

    def write(self, event) -> None:
        self.events.append(event)


class FailingAuditSink:
    def write(self, event) -> None:
        raise ConnectionError("audit store unavailable")


def build_world(now: datetime, *, audit_sink=None) -> Container:
    """Services wired over in-memory stores, with two hostels and three residents."""
    clock = FixedClock(now)
    hostels = InMemoryHostels({1: Hostel(1, "H1", "North Block"), 2: Hostel(2, "H2", "South Block")})
    residents = InMemoryResidents(
        {
            7: Resident(7, "asha@example.edu", "Asha Rao"),
            8: Resident(8, "vikram@example.edu", "Vikram Das"),
            9: Resident(9, "gone@example.edu", "Former Resident", is_active=False),
        }
    )
    assignments = InMemoryAssignments()
    menus = InMemoryMenus()
    windows = InMemoryWindows()
    attendance = InMemoryAttendance()
    auditor = BestEffortAuditor(audit_sink or RecordingAuditSink())

    gate = MealWindowGate(windows)
    codec = IdentityTokenCodec(secret=SECRET, clock=clock, leeway_seconds=10)
    assignment_service = AssignmentService(assignments, hostels, auditor=auditor)
    meal_plans = MealPlanService(menus, hostels, gate, clock, auditor=auditor)
    return Container(
        conn=None,
        clock=clock,
        hostels_repo=hostels,
        residents_repo=residents,
        assignments_repo=assignments,
        menus_repo=menus,
        windows_repo=windows,
        attendance_repo=attendance,
        window_gate=gate,
        token_codec=codec,
        assignment_service=assignment_service,
        meal_plan_service=meal_plans,
        token_service=IdentityTokenService(codec, assignment_service, residents, clock),
        attendance_ledger=AttendanceLedger(attendance, assignment_service, meal_plans, gate, codec, clock, auditor=auditor),
        stats_service=EligibilityAggregator(assignments, meal_plans, attendance, clock),
    )


def holiday_template(world: Container, hostel_id: int, day_of_week: int, meal: MealSlot) -> None:
    world.menus_repo.upsert_template(
        hostel_id=hostel_id, day_of_week=day_of_week, meal=meal, status=MealStatus.HOLIDAY, note=None, items=()
    )
