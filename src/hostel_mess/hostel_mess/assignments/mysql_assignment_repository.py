from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import RejectReason
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import HostelAssignment, find_overlap
from .repository import AssignmentRepository

_COLUMNS = "assignment_id, resident_id, hostel_id, start_date, end_date"


def _to_model(r: dict) -> HostelAssignment:
    return HostelAssignment(
        assignment_id=int(r["assignment_id"]),
        resident_id=int(r["resident_id"]),
        hostel_id=int(r["hostel_id"]),
        start_date=r["start_date"],
        end_date=r.get("end_date"),
    )


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_resident(self, resident_id: int) -> Sequence[HostelAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM hostel_assignments
                WHERE resident_id=%s
                ORDER BY start_date ASC
                """,
                (int(resident_id),),
            )
            return [_to_model(r) for r in fetchall(cur)]

    def find_active(self, resident_id: int, on: date) -> Optional[HostelAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM hostel_assignments
                WHERE resident_id=%s
                  AND start_date <= %s
                  AND (end_date IS NULL OR end_date >= %s)
                ORDER BY start_date DESC
                LIMIT 1
                """,
                (int(resident_id), on, on),
            )
            r = fetchone(cur)
            return _to_model(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            # Serialize concurrent enrollments of the same resident, then re-check
            # against the rows as they are under the lock.
            cur.execute(
                f"SELECT {_COLUMNS} FROM hostel_assignments WHERE resident_id=%s FOR UPDATE",
                (int(resident_id),),
            )
            locked = [_to_model(r) for r in fetchall(cur)]
            if find_overlap(locked, start_date, end_date, closing_id=close_assignment_id, close_on=close_on):
                raise ConflictError(
                    "Assignment overlaps an existing range", reason=RejectReason.OVERLAPPING_ASSIGNMENT
                )

            if close_assignment_id is not None:
                cur.execute(
                    "UPDATE hostel_assignments SET end_date=%s WHERE assignment_id=%s AND end_date IS NULL",
                    (close_on, int(close_assignment_id)),
                )
                if cur.rowcount != 1:
                    raise ConflictError(
                        "Assignment changed concurrently", reason=RejectReason.OVERLAPPING_ASSIGNMENT
                    )

            cur.execute(
                """
                INSERT INTO hostel_assignments(resident_id, hostel_id, start_date, end_date)
                VALUES(%s,%s,%s,%s)
                """,
                (int(resident_id), int(hostel_id), start_date, end_date),
            )
            return int(cur.lastrowid)

    def close(self, *, assignment_id: int, end_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE hostel_assignments SET end_date=%s WHERE assignment_id=%s AND end_date IS NULL",
                (end_date, int(assignment_id)),
            )
            return cur.rowcount > 0
