from __future__ import annotations

from typing import Any, Optional

from ..assignments.service import AssignmentService
from ..audit.emitter import BestEffortAuditor
from ..audit.model import AuditEvent
from ..common.clock import Clock
from ..common.datetime_utils import minutes_of
from ..common.flow_log import flow_log
from ..common.validators import parse_meal_slot, require_positive_int
from ..core.constants import DEFAULT_SCAN_SOURCE, MAX_SOURCE_LENGTH
from ..core.enums import AuditAction, MealStatus, RejectReason
from ..core.exceptions import AuthorizationError, ConflictError, PreconditionError, ValidationError
from ..menus.service import MealPlanService
from ..tokens.codec import IdentityTokenCodec
from ..windows.gate import MealWindowGate
from .model import AttendanceScan
from .repository import AttendanceRepository


class AttendanceLedger:
    """Records a resident's presence at a meal from a scanned identity token.

    Each check is a hard precondition evaluated in order; nothing is written
    unless all of them pass, and the scan row is the only durable effect.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        assignments: AssignmentService,
        meal_plans: MealPlanService,
        gate: MealWindowGate,
        codec: IdentityTokenCodec,
        clock: Clock,
        *,
        auditor: Optional[BestEffortAuditor] = None,
    ):
        self._attendance = attendance
        self._assignments = assignments
        self._meal_plans = meal_plans
        self._gate = gate
        self._codec = codec
        self._clock = clock
        self._auditor = auditor

    def mark_attendance(
        self,
        *,
        staff_id: Any,
        staff_hostel_id: Any,
        meal: Any,
        token: str,
        source: Optional[str] = None,
    ) -> AttendanceScan:
        staff_id = require_positive_int(staff_id, "staff_id")
        staff_hostel_id = require_positive_int(staff_hostel_id, "hostel_id")
        slot = parse_meal_slot(meal)
        source = self._clean_source(source)
        if not token or not isinstance(token, str):
            raise ValidationError("qr_token is required")

        now = self._clock.now()
        today = now.date()
        flow_log("ATTENDANCE", "Mark request received", staff_id=staff_id, meal_type=slot, qr_token=token)

        claims = self._codec.verify(token)

        if claims.hostel_id is not None and claims.hostel_id != staff_hostel_id:
            raise AuthorizationError("Resident not enrolled in this hostel", reason=RejectReason.CROSS_HOSTEL)

        # The embedded hostel is only a hint; authorization uses today's assignment.
        if self._assignments.active_hostel(claims.resident_id, today) != staff_hostel_id:
            raise PreconditionError("Resident not enrolled in this hostel", reason=RejectReason.NOT_ASSIGNED)

        effective = self._meal_plans.effective_meal(staff_hostel_id, today, slot)
        if effective.status == MealStatus.HOLIDAY:
            raise PreconditionError("Meal is marked as holiday", reason=RejectReason.HOLIDAY)

        if not self._gate.is_within_window(staff_hostel_id, slot, minutes_of(now.time())):
            raise PreconditionError("Meal window closed", reason=RejectReason.WINDOW_CLOSED)

        scan = AttendanceScan(
            hostel_id=staff_hostel_id,
            scan_date=today,
            meal=slot,
            resident_id=claims.resident_id,
            scanned_at=now,
            scanned_by=staff_id,
            source=source,
        )
        if not self._attendance.insert_if_absent(scan):
            raise ConflictError("Attendance already marked", reason=RejectReason.ALREADY_MARKED)

        flow_log("ATTENDANCE", "Marked", resident_id=claims.resident_id, meal_type=slot, date=today.isoformat())
        if self._auditor:
            self._auditor.emit(
                AuditEvent(
                    action=AuditAction.ATTENDANCE_MARKED,
                    entity_type="attendance_scan",
                    entity_id=f"{staff_hostel_id}:{today.isoformat()}:{slot.value}:{claims.resident_id}",
                    actor_id=staff_id,
                    details={
                        "hostel": staff_hostel_id,
                        "date": today.isoformat(),
                        "meal": slot.value,
                        "resident": claims.resident_id,
                        "staff": staff_id,
                        "source": source,
                    },
                )
            )
        return scan

    @staticmethod
    def _clean_source(source: Optional[str]) -> str:
        value = str(source).strip().lower() if source is not None else ""
        if not value:
            return DEFAULT_SCAN_SOURCE
        if len(value) > MAX_SOURCE_LENGTH:
            raise ValidationError(f"source must be at most {MAX_SOURCE_LENGTH} characters")
        return value
