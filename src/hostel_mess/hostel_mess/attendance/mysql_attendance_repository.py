from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import MealSlot
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceScan
from .repository import AttendanceRepository

_COLUMNS = "scan_id, hostel_id, scan_date, meal, resident_id, scanned_at, scanned_by, source"


def _to_model(r: dict) -> AttendanceScan:
    return AttendanceScan(
        scan_id=int(r["scan_id"]),
        hostel_id=int(r["hostel_id"]),
        scan_date=r["scan_date"],
        meal=MealSlot(r["meal"]),
        resident_id=int(r["resident_id"]),
        scanned_at=r["scanned_at"],
        scanned_by=int(r["scanned_by"]),
        source=r.get("source") or "qr",
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert_if_absent(self, scan: AttendanceScan) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_scans(hostel_id, scan_date, meal, resident_id, scanned_at, scanned_by, source)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(scan.hostel_id),
                        scan.scan_date,
                        scan.meal.value,
                        int(scan.resident_id),
                        scan.scanned_at.replace(tzinfo=None),
                        int(scan.scanned_by),
                        scan.source,
                    ),
                )
                return True
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                return False
            raise

    def get(self, *, hostel_id: int, scan_date: date, meal: MealSlot, resident_id: int) -> Optional[AttendanceScan]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_scans
                WHERE hostel_id=%s AND scan_date=%s AND meal=%s AND resident_id=%s
                """,
                (int(hostel_id), scan_date, meal.value, int(resident_id)),
            )
            r = fetchone(cur)
            return _to_model(r) if r else None

    def list_for_resident(self, *, resident_id: int, start: date, end: date) -> Sequence[AttendanceScan]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_scans
                WHERE resident_id=%s AND scan_date BETWEEN %s AND %s
                ORDER BY scan_date ASC, scanned_at ASC
                """,
                (int(resident_id), start, end),
            )
            return [_to_model(r) for r in fetchall(cur)]
