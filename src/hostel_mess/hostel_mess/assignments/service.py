from __future__ import annotations

from datetime import date, timedelta
from typing import Optional, Sequence

from ..audit.emitter import BestEffortAuditor
from ..audit.model import AuditEvent
from ..common.flow_log import flow_log
from ..common.validators import require_positive_int
from ..core.enums import AuditAction, RejectReason
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..hostels.model import Hostel
from ..hostels.repository import HostelRepository
from .model import HostelAssignment, find_overlap
from .repository import AssignmentRepository


class AssignmentService:
    """Which hostel a resident belongs to, and enrollment moves between hostels."""

    def __init__(
        self,
        assignments: AssignmentRepository,
        hostels: HostelRepository,
        *,
        auditor: Optional[BestEffortAuditor] = None,
    ):
        self._assignments = assignments
        self._hostels = hostels
        self._auditor = auditor

    def active_assignment(self, resident_id: int, on: date) -> Optional[HostelAssignment]:
        return self._assignments.find_active(int(resident_id), on)

    def active_hostel(self, resident_id: int, on: date) -> Optional[int]:
        a = self.active_assignment(resident_id, on)
        return a.hostel_id if a else None

    def history(self, resident_id: int) -> Sequence[HostelAssignment]:
        return self._assignments.list_for_resident(int(resident_id))

    def assign(
        self,
        *,
        resident_id: int,
        hostel_id: int,
        start_date: date,
        end_date: Optional[date] = None,
        actor_id: Optional[int] = None,
    ) -> int:
        """Enroll a resident from ``start_date``.

        An open assignment that started earlier is closed the day before
        ``start_date``; any other overlap is rejected.
        """
        resident_id = require_positive_int(resident_id, "resident_id")
        hostel_id = require_positive_int(hostel_id, "hostel_id")
        if end_date is not None and end_date < start_date:
            raise ValidationError("end_date must not be before start_date")
        if not self._hostels.get_by_id(hostel_id):
            raise NotFoundError("Hostel not found")

        existing = list(self._assignments.list_for_resident(resident_id))
        to_close: Optional[HostelAssignment] = None
        for a in existing:
            if a.is_open and a.start_date < start_date:
                if a.hostel_id == hostel_id:
                    raise ConflictError(
                        "Resident is already assigned to this hostel",
                        reason=RejectReason.OVERLAPPING_ASSIGNMENT,
                    )
                to_close = a

        close_on = start_date - timedelta(days=1) if to_close else None
        closing_id = to_close.assignment_id if to_close else None
        if find_overlap(existing, start_date, end_date, closing_id=closing_id, close_on=close_on):
            raise ConflictError(
                "Assignment overlaps an existing range",
                reason=RejectReason.OVERLAPPING_ASSIGNMENT,
            )

        assignment_id = self._assignments.create(
            resident_id=resident_id,
            hostel_id=hostel_id,
            start_date=start_date,
            end_date=end_date,
            close_assignment_id=closing_id,
            close_on=close_on,
        )
        flow_log(
            "ASSIGNMENT",
            "Assigned",
            resident_id=resident_id,
            hostel_id=hostel_id,
            start_date=start_date.isoformat(),
            closed=to_close.assignment_id if to_close else None,
        )
        if self._auditor:
            self._auditor.emit(
                AuditEvent(
                    action=AuditAction.HOSTEL_ASSIGNED,
                    entity_type="hostel_assignment",
                    entity_id=str(assignment_id),
                    actor_id=actor_id,
                    details={"resident": resident_id, "hostel": hostel_id, "start_date": start_date.isoformat()},
                )
            )
        return assignment_id

    def enroll(self, *, resident_id: int, hostel_id: int, on: date) -> bool:
        """Self-enrollment from ``on``. False when already enrolled in that hostel."""
        resident_id = require_positive_int(resident_id, "resident_id")
        hostel_id = require_positive_int(hostel_id, "hostel_id")
        if self.active_hostel(resident_id, on) == hostel_id:
            flow_log("ENROLL", "Already enrolled", resident_id=resident_id, hostel_id=hostel_id)
            return False
        self.assign(resident_id=resident_id, hostel_id=hostel_id, start_date=on, actor_id=resident_id)
        return True

    def current_hostel(self, resident_id: int, on: date) -> Optional[Hostel]:
        hostel_id = self.active_hostel(resident_id, on)
        return self._hostels.get_by_id(hostel_id) if hostel_id else None

    def end_assignment(self, *, resident_id: int, end_date: date) -> None:
        resident_id = require_positive_int(resident_id, "resident_id")
        current = next((a for a in self._assignments.list_for_resident(resident_id) if a.is_open), None)
        if not current:
            raise NotFoundError("Resident has no current assignment")
        if end_date < current.start_date:
            raise ValidationError("end_date must not be before start_date")
        if not self._assignments.close(assignment_id=current.assignment_id, end_date=end_date):
            raise ConflictError("Assignment changed concurrently", reason=RejectReason.OVERLAPPING_ASSIGNMENT)
        flow_log("ASSIGNMENT", "Ended", resident_id=resident_id, end_date=end_date.isoformat())
