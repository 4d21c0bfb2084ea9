from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..audit.emitter import BestEffortAuditor
from ..audit.model import AuditEvent
from ..common.clock import Clock
from ..common.datetime_utils import day_of_week as dow_of
from ..common.flow_log import flow_log
from ..common.validators import (
    clean_items,
    clean_note,
    parse_day_of_week,
    parse_meal_slot,
    parse_meal_status,
    require_non_empty,
    require_positive_int,
)
from ..core.enums import AuditAction, MealSlot, RejectReason
from ..core.exceptions import NotFoundError, PreconditionError
from ..hostels.repository import HostelRepository
from ..windows.gate import MealWindowGate
from .model import DateOverride, EffectiveMeal, MenuSnapshot, WeeklyMenuTemplate, merge_meal
from .repository import MenuRepository


class MealPlanService:
    """Weekly templates, date overrides and the merged view of both."""

    def __init__(
        self,
        menus: MenuRepository,
        hostels: HostelRepository,
        gate: MealWindowGate,
        clock: Clock,
        *,
        auditor: Optional[BestEffortAuditor] = None,
    ):
        self._menus = menus
        self._hostels = hostels
        self._gate = gate
        self._clock = clock
        self._auditor = auditor

    # reads

    def effective_meal(self, hostel_id: int, menu_date: date, meal: MealSlot) -> EffectiveMeal:
        hostel_id = int(hostel_id)
        return merge_meal(
            hostel_id=hostel_id,
            menu_date=menu_date,
            meal=meal,
            override=self._menus.get_override(hostel_id=hostel_id, menu_date=menu_date, meal=meal),
            template=self._menus.get_template(hostel_id=hostel_id, day_of_week=dow_of(menu_date), meal=meal),
        )

    def effective_menu(self, hostel_id: Any, menu_date: date) -> list[EffectiveMeal]:
        """Every meal slot of the day, in serving order."""
        hostel_id = self._require_hostel(hostel_id)
        snapshot = self.snapshot(hostel_id, menu_date, menu_date)
        flow_log("MEALS MENU", "Fetched", hostel_id=hostel_id, date=menu_date.isoformat(), overrides=len(snapshot.overrides))
        return [snapshot.effective(menu_date, meal) for meal in MealSlot]

    def snapshot(self, hostel_id: int, start: date, end: date) -> MenuSnapshot:
        hostel_id = int(hostel_id)
        templates = self._menus.list_templates(hostel_id=hostel_id)
        overrides = self._menus.list_overrides(hostel_id=hostel_id, start=start, end=end)
        return MenuSnapshot(
            hostel_id=hostel_id,
            templates={(t.day_of_week, t.meal): t for t in templates},
            overrides={(o.menu_date, o.meal): o for o in overrides},
        )

    def list_templates(self, hostel_id: Any, day_of_week: Any = None) -> Sequence[WeeklyMenuTemplate]:
        hostel_id = self._require_hostel(hostel_id)
        dow = parse_day_of_week(day_of_week) if day_of_week is not None else None
        return self._menus.list_templates(hostel_id=hostel_id, day_of_week=dow)

    # writes

    def upsert_template(
        self,
        *,
        hostel_id: Any,
        day_of_week: Any,
        meal: Any,
        status: Any,
        note: Optional[str] = None,
        items: Optional[Sequence[Any]] = None,
        actor_id: Optional[int] = None,
    ) -> WeeklyMenuTemplate:
        dow = parse_day_of_week(day_of_week)
        slot = parse_meal_slot(meal)
        meal_status = parse_meal_status(status)
        note = clean_note(note)
        cleaned = clean_items(items)
        hostel_id = self._require_hostel(hostel_id)
        today = self._clock.today()
        if dow == dow_of(today):
            self._ensure_editable(hostel_id, today, slot)

        row = self._menus.upsert_template(
            hostel_id=hostel_id, day_of_week=dow, meal=slot, status=meal_status, note=note, items=cleaned
        )
        flow_log(
            "MEALS TEMPLATE", "Saved",
            hostel_id=hostel_id, day_of_week=dow, meal_type=slot, status=meal_status, items_count=len(cleaned),
        )
        self._emit_changed(actor_id, hostel_id, f"{hostel_id}:dow{dow}:{slot.value}", row.status.value, "weekly_menu_template")
        return row

    def upsert_override(
        self,
        *,
        hostel_id: Any,
        menu_date: date,
        meal: Any,
        status: Any,
        note: Optional[str] = None,
        items: Optional[Sequence[Any]] = None,
        actor_id: Optional[int] = None,
    ) -> DateOverride:
        slot = parse_meal_slot(meal)
        meal_status = parse_meal_status(status)
        note = clean_note(note)
        cleaned = clean_items(items)
        hostel_id = self._require_hostel(hostel_id)
        self._ensure_editable(hostel_id, menu_date, slot)

        row = self._menus.upsert_override(
            hostel_id=hostel_id, menu_date=menu_date, meal=slot, status=meal_status, note=note, items=cleaned
        )
        flow_log(
            "MEALS OVERRIDE", "Saved",
            hostel_id=hostel_id, date=menu_date.isoformat(), meal_type=slot, status=meal_status, items_count=len(cleaned),
        )
        self._emit_changed(actor_id, hostel_id, f"{hostel_id}:{menu_date.isoformat()}:{slot.value}", row.status.value, "date_override")
        return row

    def delete_override(self, *, hostel_id: Any, menu_date: date, meal: Any, actor_id: Optional[int] = None) -> None:
        slot = parse_meal_slot(meal)
        hostel_id = self._require_hostel(hostel_id)
        self._ensure_editable(hostel_id, menu_date, slot)

        if not self._menus.delete_override(hostel_id=hostel_id, menu_date=menu_date, meal=slot):
            raise NotFoundError("Override not found")

        key = f"{hostel_id}:{menu_date.isoformat()}:{slot.value}"
        flow_log("MEALS OVERRIDE", "Deleted", hostel_id=hostel_id, date=menu_date.isoformat(), meal_type=slot)
        if self._auditor:
            self._auditor.emit(
                AuditEvent(
                    action=AuditAction.MEAL_OVERRIDE_DELETED,
                    entity_type="date_override",
                    entity_id=key,
                    actor_id=actor_id,
                    details={"hostel": hostel_id, "key": key},
                )
            )

    def remove_override_item(
        self, *, hostel_id: Any, menu_date: date, meal: Any, item: str, actor_id: Optional[int] = None
    ) -> DateOverride:
        slot = parse_meal_slot(meal)
        item = require_non_empty(item, "item")
        hostel_id = self._require_hostel(hostel_id)
        self._ensure_editable(hostel_id, menu_date, slot)

        current = self._menus.get_override(hostel_id=hostel_id, menu_date=menu_date, meal=slot)
        if not current:
            raise NotFoundError("Meal not found")

        remaining = [i for i in current.items if i != item]
        row = self._menus.replace_override_items(hostel_id=hostel_id, menu_date=menu_date, meal=slot, items=remaining)
        if row is None:
            raise NotFoundError("Meal not found")

        flow_log("MEALS MENU", "Item deleted", hostel_id=hostel_id, date=menu_date.isoformat(), meal_type=slot, items_count=len(row.items))
        self._emit_changed(actor_id, hostel_id, f"{hostel_id}:{menu_date.isoformat()}:{slot.value}", row.status.value, "date_override")
        return row

    # helpers

    def _require_hostel(self, hostel_id: Any) -> int:
        hostel_id = require_positive_int(hostel_id, "hostel_id")
        if not self._hostels.get_by_id(hostel_id):
            raise NotFoundError("Hostel not found")
        return hostel_id

    def _ensure_editable(self, hostel_id: int, menu_date: date, meal: MealSlot) -> None:
        """Today's slot is locked once its window (end + grace) has passed."""
        if menu_date != self._clock.today():
            return
        if self._gate.has_closed(hostel_id, meal, self._clock.minutes_now()):
            raise PreconditionError("Meal service is over; the menu is locked", reason=RejectReason.MENU_LOCKED)

    def _emit_changed(self, actor_id: Optional[int], hostel_id: int, key: str, new_status: str, entity_type: str) -> None:
        if not self._auditor:
            return
        self._auditor.emit(
            AuditEvent(
                action=AuditAction.MEAL_PLAN_CHANGED,
                entity_type=entity_type,
                entity_id=key,
                actor_id=actor_id,
                details={"hostel": hostel_id, "key": key, "new_status": new_status},
            )
        )
