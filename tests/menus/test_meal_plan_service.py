from __future__ import annotations

from datetime import date, datetime

import pytest

from src.hostel_mess.hostel_mess.core.enums import AuditAction, MealSlot, MealStatus, MenuSource, RejectReason
from src.hostel_mess.hostel_mess.core.exceptions import NotFoundError, PreconditionError, ValidationError
from tests.fakes import FailingAuditSink, RecordingAuditSink, build_world

SUNDAY = date(2024, 3, 10)
MONDAY = date(2024, 3, 11)


def test_meal_without_any_row_is_open_with_no_items():
    world = build_world(datetime(2024, 3, 9, 10, 0))

    meal = world.meal_plan_service.effective_meal(1, SUNDAY, MealSlot.LUNCH)

    assert meal.status == MealStatus.OPEN
    assert meal.items == ()
    assert meal.source == MenuSource.DEFAULT


def test_override_beats_template_and_delete_falls_back():
    world = build_world(datetime(2024, 3, 9, 10, 0))
    meals = world.meal_plan_service

    meals.upsert_template(hostel_id=1, day_of_week=0, meal="lunch", status="open", items=["Rice", "Dal"])
    assert meals.effective_meal(1, SUNDAY, MealSlot.LUNCH).source == MenuSource.TEMPLATE

    meals.upsert_override(hostel_id=1, menu_date=SUNDAY, meal="lunch", status="holiday", note="Festival")
    merged = meals.effective_meal(1, SUNDAY, MealSlot.LUNCH)
    assert merged.status == MealStatus.HOLIDAY
    assert merged.note == "Festival"
    assert merged.source == MenuSource.OVERRIDE

    meals.delete_override(hostel_id=1, menu_date=SUNDAY, meal="lunch")
    merged = meals.effective_meal(1, SUNDAY, MealSlot.LUNCH)
    assert merged.source == MenuSource.TEMPLATE
    assert merged.items == ("Rice", "Dal")


def test_template_applies_only_to_its_weekday_and_hostel():
    world = build_world(datetime(2024, 3, 9, 10, 0))
    meals = world.meal_plan_service
    meals.upsert_template(hostel_id=1, day_of_week=0, meal="lunch", status="holiday")

    assert meals.effective_meal(1, SUNDAY, MealSlot.LUNCH).status == MealStatus.HOLIDAY
    assert meals.effective_meal(1, MONDAY, MealSlot.LUNCH).status == MealStatus.OPEN
    assert meals.effective_meal(2, SUNDAY, MealSlot.LUNCH).status == MealStatus.OPEN


def test_template_upsert_is_last_writer_wins():
    world = build_world(datetime(2024, 3, 9, 10, 0))
    meals = world.meal_plan_service

    first = meals.upsert_template(hostel_id=1, day_of_week=1, meal="dinner", status="open", items=["Roti"])
    second = meals.upsert_template(hostel_id=1, day_of_week=1, meal="dinner", status="open", items=["Paneer"])

    assert second.updated_at > first.updated_at
    assert [t.items for t in meals.list_templates(1, 1)] == [("Paneer",)]


def test_effective_menu_lists_every_slot_in_order():
    world = build_world(datetime(2024, 3, 9, 10, 0))
    world.meal_plan_service.upsert_override(hostel_id=2, menu_date=MONDAY, meal="snacks", status="open", items=["Samosa"])

    menu = world.meal_plan_service.effective_menu(2, MONDAY)

    assert [m.meal for m in menu] == list(MealSlot)
    assert menu[2].items == ("Samosa",)
    assert menu[2].as_dict()["source"] == "override"

    with pytest.raises(NotFoundError):
        world.meal_plan_service.effective_menu(99, MONDAY)


def test_write_validation():
    world = build_world(datetime(2024, 3, 9, 10, 0))
    meals = world.meal_plan_service

    with pytest.raises(ValidationError):
        meals.upsert_template(hostel_id=1, day_of_week=7, meal="lunch", status="open")
    with pytest.raises(ValidationError):
        meals.upsert_template(hostel_id=1, day_of_week=0, meal="brunch", status="open")
    with pytest.raises(ValidationError):
        meals.upsert_override(hostel_id=1, menu_date=SUNDAY, meal="lunch", status="closed")
    with pytest.raises(ValidationError):
        meals.upsert_override(hostel_id=1, menu_date=SUNDAY, meal="lunch", status="open", items="Rice")
    with pytest.raises(NotFoundError):
        meals.upsert_template(hostel_id=99, day_of_week=0, meal="lunch", status="open")


def test_items_are_trimmed_and_blanks_dropped():
    world = build_world(datetime(2024, 3, 9, 10, 0))

    row = world.meal_plan_service.upsert_override(
        hostel_id=1, menu_date=SUNDAY, meal="dinner", status="open", items=[" Rice ", "", "  ", "Curd"]
    )

    assert row.items == ("Rice", "Curd")


def test_today_override_locks_after_window_closes():
    # 16:00 on Sunday: lunch (13:00-15:00) is over, dinner is not.
    world = build_world(datetime(2024, 3, 10, 16, 0))
    meals = world.meal_plan_service

    with pytest.raises(PreconditionError) as exc:
        meals.upsert_override(hostel_id=1, menu_date=SUNDAY, meal="lunch", status="holiday")
    assert exc.value.reason == RejectReason.MENU_LOCKED

    meals.upsert_override(hostel_id=1, menu_date=SUNDAY, meal="dinner", status="holiday")
    meals.upsert_override(hostel_id=1, menu_date=MONDAY, meal="lunch", status="holiday")


def test_todays_weekday_template_locks_after_window_closes():
    world = build_world(datetime(2024, 3, 10, 16, 0))
    meals = world.meal_plan_service

    with pytest.raises(PreconditionError) as exc:
        meals.upsert_template(hostel_id=1, day_of_week=0, meal="lunch", status="holiday")
    assert exc.value.reason == RejectReason.MENU_LOCKED
    assert meals.effective_meal(1, SUNDAY, MealSlot.LUNCH).status == MealStatus.OPEN

    # Other weekdays and meals still open for today are editable.
    meals.upsert_template(hostel_id=1, day_of_week=0, meal="dinner", status="holiday")
    meals.upsert_template(hostel_id=1, day_of_week=1, meal="lunch", status="holiday")
    meals.upsert_template(hostel_id=2, day_of_week=0, meal="snacks", status="open", items=["Tea"])


def test_delete_missing_override_is_not_found():
    world = build_world(datetime(2024, 3, 9, 10, 0))

    with pytest.raises(NotFoundError):
        world.meal_plan_service.delete_override(hostel_id=1, menu_date=SUNDAY, meal="lunch")


def test_remove_override_item():
    world = build_world(datetime(2024, 3, 9, 10, 0))
    meals = world.meal_plan_service
    meals.upsert_override(hostel_id=1, menu_date=MONDAY, meal="breakfast", status="open", items=["Idli", "Vada"])

    row = meals.remove_override_item(hostel_id=1, menu_date=MONDAY, meal="breakfast", item="Idli")

    assert row.items == ("Vada",)
    with pytest.raises(NotFoundError):
        meals.remove_override_item(hostel_id=1, menu_date=MONDAY, meal="lunch", item="Idli")
    with pytest.raises(ValidationError):
        meals.remove_override_item(hostel_id=1, menu_date=MONDAY, meal="breakfast", item="  ")


def test_writes_emit_audit_events():
    sink = RecordingAuditSink()
    world = build_world(datetime(2024, 3, 9, 10, 0), audit_sink=sink)
    meals = world.meal_plan_service

    meals.upsert_override(hostel_id=1, menu_date=MONDAY, meal="lunch", status="holiday", actor_id=100)
    meals.delete_override(hostel_id=1, menu_date=MONDAY, meal="lunch", actor_id=100)

    assert [e.action for e in sink.events] == [AuditAction.MEAL_PLAN_CHANGED, AuditAction.MEAL_OVERRIDE_DELETED]
    assert sink.events[0].details == {"hostel": 1, "key": "1:2024-03-11:lunch", "new_status": "holiday"}
    assert sink.events[0].actor_id == 100


def test_failing_audit_sink_does_not_fail_the_write():
    world = build_world(datetime(2024, 3, 9, 10, 0), audit_sink=FailingAuditSink())

    row = world.meal_plan_service.upsert_template(hostel_id=1, day_of_week=0, meal="lunch", status="holiday")

    assert row.status == MealStatus.HOLIDAY
    assert world.meal_plan_service.effective_meal(1, SUNDAY, MealSlot.LUNCH).status == MealStatus.HOLIDAY
