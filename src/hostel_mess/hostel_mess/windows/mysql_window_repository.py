from __future__ import annotations

from typing import Optional

from ..core.enums import MealSlot, WindowSource
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import MealWindow
from .repository import MealWindowRepository


class MySQLMealWindowRepository(MealWindowRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, hostel_id: int, meal: MealSlot) -> Optional[MealWindow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT hostel_id, meal, start_time, end_time, grace_minutes
                FROM meal_windows
                WHERE hostel_id=%s AND meal=%s
                """,
                (int(hostel_id), meal.value),
            )
            r = fetchone(cur)
            if not r:
                return None
            return MealWindow(
                meal=MealSlot(r["meal"]),
                start=normalize_mysql_time(r["start_time"]),
                end=normalize_mysql_time(r["end_time"]),
                grace_minutes=int(r.get("grace_minutes") or 0),
                hostel_id=int(r["hostel_id"]),
                source=WindowSource.HOSTEL,
            )
