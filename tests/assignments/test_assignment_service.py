from __future__ import annotations

import threading
from datetime import date, datetime

import pytest

from src.hostel_mess.hostel_mess.assignments.model import HostelAssignment, select_active
from src.hostel_mess.hostel_mess.core.enums import AuditAction, RejectReason
from src.hostel_mess.hostel_mess.core.exceptions import ConflictError, NotFoundError, ValidationError
from tests.fakes import RecordingAuditSink, build_world


def test_move_closes_previous_assignment_the_day_before():
    world = build_world(datetime(2024, 3, 1, 10, 0))
    world.assignments_repo.add(8, 1, date(2024, 1, 1))

    world.assignment_service.assign(resident_id=8, hostel_id=2, start_date=date(2024, 3, 10), actor_id=100)

    svc = world.assignment_service
    assert svc.active_hostel(8, date(2024, 3, 9)) == 1
    assert svc.active_hostel(8, date(2024, 3, 10)) == 2
    assert svc.active_hostel(8, date(2023, 12, 31)) is None

    history = svc.history(8)
    assert [(a.hostel_id, a.end_date) for a in history] == [(1, date(2024, 3, 9)), (2, None)]


def test_assign_emits_audit_event():
    sink = RecordingAuditSink()
    world = build_world(datetime(2024, 3, 1, 10, 0), audit_sink=sink)

    world.assignment_service.assign(resident_id=7, hostel_id=1, start_date=date(2024, 1, 1), actor_id=100)

    assert [e.action for e in sink.events] == [AuditAction.HOSTEL_ASSIGNED]
    assert sink.events[0].details["hostel"] == 1


def test_reassigning_to_same_open_hostel_is_rejected():
    world = build_world(datetime(2024, 3, 1, 10, 0))
    world.assignments_repo.add(7, 1, date(2024, 1, 1))

    with pytest.raises(ConflictError) as exc:
        world.assignment_service.assign(resident_id=7, hostel_id=1, start_date=date(2024, 2, 1))
    assert exc.value.reason == RejectReason.OVERLAPPING_ASSIGNMENT


def test_overlap_with_closed_range_is_rejected():
    world = build_world(datetime(2024, 3, 1, 10, 0))
    world.assignments_repo.add(7, 1, date(2024, 3, 1), date(2024, 3, 31))

    with pytest.raises(ConflictError):
        world.assignment_service.assign(resident_id=7, hostel_id=2, start_date=date(2024, 3, 15))

    # Nothing changed.
    assert len(world.assignment_service.history(7)) == 1


def test_same_day_start_as_open_assignment_is_rejected():
    world = build_world(datetime(2024, 3, 1, 10, 0))
    world.assignments_repo.add(7, 1, date(2024, 3, 1))

    with pytest.raises(ConflictError):
        world.assignment_service.assign(resident_id=7, hostel_id=2, start_date=date(2024, 3, 1))


def test_assign_validates_input():
    world = build_world(datetime(2024, 3, 1, 10, 0))

    with pytest.raises(NotFoundError):
        world.assignment_service.assign(resident_id=7, hostel_id=99, start_date=date(2024, 3, 1))
    with pytest.raises(ValidationError):
        world.assignment_service.assign(
            resident_id=7, hostel_id=1, start_date=date(2024, 3, 10), end_date=date(2024, 3, 9)
        )
    with pytest.raises(ValidationError):
        world.assignment_service.assign(resident_id="x", hostel_id=1, start_date=date(2024, 3, 1))


def test_end_assignment_closes_current_range():
    world = build_world(datetime(2024, 3, 1, 10, 0))
    world.assignments_repo.add(7, 1, date(2024, 1, 1))

    world.assignment_service.end_assignment(resident_id=7, end_date=date(2024, 3, 31))

    assert world.assignment_service.active_hostel(7, date(2024, 3, 31)) == 1
    assert world.assignment_service.active_hostel(7, date(2024, 4, 1)) is None
    with pytest.raises(NotFoundError):
        world.assignment_service.end_assignment(resident_id=7, end_date=date(2024, 4, 30))


def test_select_active_prefers_latest_start():
    rows = [
        HostelAssignment(1, 7, 1, date(2024, 1, 1), date(2024, 6, 30)),
        HostelAssignment(2, 7, 2, date(2024, 3, 1)),
    ]

    assert select_active(rows, date(2024, 2, 1)).hostel_id == 1
    assert select_active(rows, date(2024, 3, 1)).hostel_id == 2
    assert select_active(rows, date(2023, 1, 1)) is None


def test_create_rechecks_overlap_at_write_time():
    world = build_world(datetime(2024, 3, 1, 10, 0))
    world.assignments_repo.add(7, 1, date(2024, 1, 1), date(2024, 1, 31))
    world.assignments_repo.create(resident_id=7, hostel_id=2, start_date=date(2024, 3, 1))

    # A writer that checked before the row above existed must still be refused.
    with pytest.raises(ConflictError) as exc:
        world.assignments_repo.create(resident_id=7, hostel_id=1, start_date=date(2024, 3, 1))
    assert exc.value.reason == RejectReason.OVERLAPPING_ASSIGNMENT


def test_concurrent_assignments_leave_one_open_range():
    world = build_world(datetime(2024, 3, 1, 10, 0))
    world.assignments_repo.add(7, 1, date(2024, 1, 1), date(2024, 1, 31))
    barrier = threading.Barrier(2)
    outcomes = []

    def assign(hostel_id):
        barrier.wait()
        try:
            world.assignment_service.assign(resident_id=7, hostel_id=hostel_id, start_date=date(2024, 3, 1))
            outcomes.append("ok")
        except ConflictError:
            outcomes.append("conflict")

    threads = [threading.Thread(target=assign, args=(h,)) for h in (1, 2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["conflict", "ok"]
    assert len([a for a in world.assignment_service.history(7) if a.is_open]) == 1


def test_enroll_is_a_noop_for_current_hostel():
    world = build_world(datetime(2024, 3, 10, 10, 0))
    world.assignments_repo.add(7, 1, date(2024, 1, 1))

    assert world.assignment_service.enroll(resident_id=7, hostel_id=1, on=date(2024, 3, 10)) is False
    assert len(world.assignment_service.history(7)) == 1

    assert world.assignment_service.enroll(resident_id=7, hostel_id=2, on=date(2024, 3, 10)) is True
    assert world.assignment_service.current_hostel(7, date(2024, 3, 10)).code == "H2"
    assert world.assignment_service.active_hostel(7, date(2024, 3, 9)) == 1
    assert world.assignment_service.current_hostel(8, date(2024, 3, 10)) is None
