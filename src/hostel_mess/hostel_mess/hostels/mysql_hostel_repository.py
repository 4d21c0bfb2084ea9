from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Hostel, Resident
from .repository import HostelRepository, ResidentRepository


class MySQLHostelRepository(HostelRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, hostel_id: int) -> Optional[Hostel]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT hostel_id, code, name FROM hostels WHERE hostel_id=%s", (int(hostel_id),))
            r = fetchone(cur)
            if not r:
                return None
            return Hostel(hostel_id=int(r["hostel_id"]), code=r["code"], name=r["name"])


class MySQLResidentRepository(ResidentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, resident_id: int) -> Optional[Resident]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT resident_id, email, full_name, is_active FROM residents WHERE resident_id=%s",
                (int(resident_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Resident(
                resident_id=int(r["resident_id"]),
                email=r["email"],
                full_name=r["full_name"],
                is_active=bool(r["is_active"]),
            )
