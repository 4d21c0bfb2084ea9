from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, json_body, require_staff_for, server_error
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/staff/mark-attendance", methods=["POST"], endpoint="staff_mark_attendance")
    def staff_mark_attendance():
        data = json_body()
        try:
            staff_id, staff_hostel_id = require_staff_for(None)
            scan = container.attendance_ledger.mark_attendance(
                staff_id=staff_id,
                staff_hostel_id=staff_hostel_id,
                meal=data.get("meal_type") or data.get("meal"),
                token=data.get("qr_token") or data.get("qrToken"),
                source=data.get("source"),
            )
            return jsonify({"success": True, "message": "Attendance marked", "scan": scan.as_dict()})
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error("Failed to mark attendance", e)
