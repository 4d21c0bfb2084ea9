from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import MealSlot, MealStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_items, fetchall, fetchone, load_items
from .model import DateOverride, WeeklyMenuTemplate
from .repository import MenuRepository


def _template(r: dict) -> WeeklyMenuTemplate:
    return WeeklyMenuTemplate(
        hostel_id=int(r["hostel_id"]),
        day_of_week=int(r["day_of_week"]),
        meal=MealSlot(r["meal"]),
        status=MealStatus(r["status"]),
        note=r.get("note"),
        items=load_items(r.get("items")),
        updated_at=r.get("updated_at"),
    )


def _override(r: dict) -> DateOverride:
    return DateOverride(
        hostel_id=int(r["hostel_id"]),
        menu_date=r["menu_date"],
        meal=MealSlot(r["meal"]),
        status=MealStatus(r["status"]),
        note=r.get("note"),
        items=load_items(r.get("items")),
        updated_at=r.get("updated_at"),
    )


class MySQLMenuRepository(MenuRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_template(self, *, hostel_id: int, day_of_week: int, meal: MealSlot) -> Optional[WeeklyMenuTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT hostel_id, day_of_week, meal, status, note, items, updated_at
                FROM weekly_menu_templates
                WHERE hostel_id=%s AND day_of_week=%s AND meal=%s
                """,
                (int(hostel_id), int(day_of_week), meal.value),
            )
            r = fetchone(cur)
            return _template(r) if r else None

    def list_templates(self, *, hostel_id: int, day_of_week: Optional[int] = None) -> Sequence[WeeklyMenuTemplate]:
        clauses = ["hostel_id=%s"]
        params: list[object] = [int(hostel_id)]
        if day_of_week is not None:
            clauses.append("day_of_week=%s")
            params.append(int(day_of_week))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT hostel_id, day_of_week, meal, status, note, items, updated_at
                FROM weekly_menu_templates
                WHERE {where}
                ORDER BY day_of_week ASC, meal ASC
                """,
                tuple(params),
            )
            return [_template(r) for r in fetchall(cur)]

    def upsert_template(
        self,
        *,
        hostel_id: int,
        day_of_week: int,
        meal: MealSlot,
        status: MealStatus,
        note: Optional[str],
        items: Sequence[str],
    ) -> WeeklyMenuTemplate:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO weekly_menu_templates(hostel_id, day_of_week, meal, status, note, items)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status), note=VALUES(note), items=VALUES(items), updated_at=CURRENT_TIMESTAMP
                """,
                (int(hostel_id), int(day_of_week), meal.value, status.value, note, dump_items(items)),
            )
            cur.execute(
                """
                SELECT hostel_id, day_of_week, meal, status, note, items, updated_at
                FROM weekly_menu_templates
                WHERE hostel_id=%s AND day_of_week=%s AND meal=%s
                """,
                (int(hostel_id), int(day_of_week), meal.value),
            )
            return _template(fetchone(cur))

    def get_override(self, *, hostel_id: int, menu_date: date, meal: MealSlot) -> Optional[DateOverride]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT hostel_id, menu_date, meal, status, note, items, updated_at
                FROM date_overrides
                WHERE hostel_id=%s AND menu_date=%s AND meal=%s
                """,
                (int(hostel_id), menu_date, meal.value),
            )
            r = fetchone(cur)
            return _override(r) if r else None

    def list_overrides(self, *, hostel_id: int, start: date, end: date) -> Sequence[DateOverride]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT hostel_id, menu_date, meal, status, note, items, updated_at
                FROM date_overrides
                WHERE hostel_id=%s AND menu_date BETWEEN %s AND %s
                ORDER BY menu_date ASC, meal ASC
                """,
                (int(hostel_id), start, end),
            )
            return [_override(r) for r in fetchall(cur)]

    def upsert_override(
        self,
        *,
        hostel_id: int,
        menu_date: date,
        meal: MealSlot,
        status: MealStatus,
        note: Optional[str],
        items: Sequence[str],
    ) -> DateOverride:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO date_overrides(hostel_id, menu_date, meal, status, note, items)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status), note=VALUES(note), items=VALUES(items), updated_at=CURRENT_TIMESTAMP
                """,
                (int(hostel_id), menu_date, meal.value, status.value, note, dump_items(items)),
            )
            cur.execute(
                """
                SELECT hostel_id, menu_date, meal, status, note, items, updated_at
                FROM date_overrides
                WHERE hostel_id=%s AND menu_date=%s AND meal=%s
                """,
                (int(hostel_id), menu_date, meal.value),
            )
            return _override(fetchone(cur))

    def replace_override_items(
        self, *, hostel_id: int, menu_date: date, meal: MealSlot, items: Sequence[str]
    ) -> Optional[DateOverride]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE date_overrides
                SET items=%s, updated_at=CURRENT_TIMESTAMP
                WHERE hostel_id=%s AND menu_date=%s AND meal=%s
                """,
                (dump_items(items), int(hostel_id), menu_date, meal.value),
            )
            cur.execute(
                """
                SELECT hostel_id, menu_date, meal, status, note, items, updated_at
                FROM date_overrides
                WHERE hostel_id=%s AND menu_date=%s AND meal=%s
                """,
                (int(hostel_id), menu_date, meal.value),
            )
            r = fetchone(cur)
            return _override(r) if r else None

    def delete_override(self, *, hostel_id: int, menu_date: date, meal: MealSlot) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM date_overrides WHERE hostel_id=%s AND menu_date=%s AND meal=%s",
                (int(hostel_id), menu_date, meal.value),
            )
            return cur.rowcount > 0
