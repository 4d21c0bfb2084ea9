from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .assignments.mysql_assignment_repository import MySQLAssignmentRepository
from .assignments.service import AssignmentService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceLedger
from .audit.emitter import AuditSink, BestEffortAuditor, LoggingAuditSink
from .common.clock import Clock, ZoneClock
from .core.constants import (
    DEFAULT_TIMEZONE,
    DEFAULT_TOKEN_LEEWAY_SECONDS,
    DEFAULT_TOKEN_TTL_SECONDS,
    MAX_TOKEN_TTL_SECONDS,
)
from .database.connection import DBConfig, DatabaseConnection
from .hostels.mysql_hostel_repository import MySQLHostelRepository, MySQLResidentRepository
from .menus.mysql_menu_repository import MySQLMenuRepository
from .menus.service import MealPlanService
from .stats.service import EligibilityAggregator
from .tokens.codec import IdentityTokenCodec
from .tokens.service import IdentityTokenService
from .windows.gate import MealWindowGate
from .windows.mysql_window_repository import MySQLMealWindowRepository


@dataclass(frozen=True)
class CoreSettings:
    """Process-wide settings read once at startup."""

    timezone: str = DEFAULT_TIMEZONE
    token_secret: str = ""
    token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS
    token_leeway_seconds: int = DEFAULT_TOKEN_LEEWAY_SECONDS
    max_token_ttl_seconds: int = MAX_TOKEN_TTL_SECONDS

    @classmethod
    def from_module(cls, settings: Any) -> "CoreSettings":
        secret = getattr(settings, "QR_TOKEN_SECRET", "")
        if not secret:
            raise RuntimeError("QR_TOKEN_SECRET (or JWT_SECRET, SECRET_KEY) is not set")
        return cls(
            timezone=str(getattr(settings, "APP_TIMEZONE", DEFAULT_TIMEZONE)),
            token_secret=str(secret),
            token_ttl_seconds=int(getattr(settings, "QR_TOKEN_TTL_SECONDS", DEFAULT_TOKEN_TTL_SECONDS)),
            token_leeway_seconds=int(getattr(settings, "QR_TOKEN_LEEWAY_SECONDS", DEFAULT_TOKEN_LEEWAY_SECONDS)),
            max_token_ttl_seconds=int(getattr(settings, "MAX_QR_TOKEN_TTL_SECONDS", MAX_TOKEN_TTL_SECONDS)),
        )


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    clock: Clock

    hostels_repo: MySQLHostelRepository
    residents_repo: MySQLResidentRepository
    assignments_repo: MySQLAssignmentRepository
    menus_repo: MySQLMenuRepository
    windows_repo: MySQLMealWindowRepository
    attendance_repo: MySQLAttendanceRepository

    window_gate: MealWindowGate
    token_codec: IdentityTokenCodec
    assignment_service: AssignmentService
    meal_plan_service: MealPlanService
    token_service: IdentityTokenService
    attendance_ledger: AttendanceLedger
    stats_service: EligibilityAggregator


def build_container(
    *,
    db_config: dict,
    core: CoreSettings,
    clock: Optional[Clock] = None,
    audit_sink: Optional[AuditSink] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    clock = clock or ZoneClock(core.timezone)
    auditor = BestEffortAuditor(audit_sink or LoggingAuditSink())

    hostels_repo = MySQLHostelRepository(conn)
    residents_repo = MySQLResidentRepository(conn)
    assignments_repo = MySQLAssignmentRepository(conn)
    menus_repo = MySQLMenuRepository(conn)
    windows_repo = MySQLMealWindowRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    window_gate = MealWindowGate(windows_repo)
    token_codec = IdentityTokenCodec(secret=core.token_secret, clock=clock, leeway_seconds=core.token_leeway_seconds)
    assignment_service = AssignmentService(assignments_repo, hostels_repo, auditor=auditor)
    meal_plan_service = MealPlanService(menus_repo, hostels_repo, window_gate, clock, auditor=auditor)
    token_service = IdentityTokenService(
        token_codec,
        assignment_service,
        residents_repo,
        clock,
        default_ttl_seconds=core.token_ttl_seconds,
        max_ttl_seconds=core.max_token_ttl_seconds,
    )
    attendance_ledger = AttendanceLedger(
        attendance_repo,
        assignment_service,
        meal_plan_service,
        window_gate,
        token_codec,
        clock,
        auditor=auditor,
    )
    stats_service = EligibilityAggregator(assignments_repo, meal_plan_service, attendance_repo, clock)

    return Container(
        conn=conn,
        clock=clock,
        hostels_repo=hostels_repo,
        residents_repo=residents_repo,
        assignments_repo=assignments_repo,
        menus_repo=menus_repo,
        windows_repo=windows_repo,
        attendance_repo=attendance_repo,
        window_gate=window_gate,
        token_codec=token_codec,
        assignment_service=assignment_service,
        meal_plan_service=meal_plan_service,
        token_service=token_service,
        attendance_ledger=attendance_ledger,
        stats_service=stats_service,
    )
