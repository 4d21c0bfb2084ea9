from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, json_body, server_error, session_identity
from ..container import Container
from ..core.exceptions import DomainError, ValidationError


def register(app: Flask, container: Container) -> None:
    assignments = container.assignment_service

    @app.route("/me/enroll", methods=["POST"], endpoint="me_enroll")
    def me_enroll():
        data = json_body()
        try:
            user_id, _, _ = session_identity()
            hostel_id = data.get("hostel_id")
            if not hostel_id:
                raise ValidationError("hostel_id is required")
            created = assignments.enroll(resident_id=user_id, hostel_id=hostel_id, on=container.clock.today())
            message = "Hostel enrollment saved" if created else "Already enrolled in this hostel"
            return jsonify({"success": True, "message": message, "hostel_id": int(hostel_id)})
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error("Failed to enroll", e)

    @app.route("/me/check-status", methods=["GET"], endpoint="me_check_status")
    def me_check_status():
        try:
            user_id, _, _ = session_identity()
            hostel = assignments.current_hostel(user_id, container.clock.today())
            if hostel is None:
                return jsonify({"status": 0})
            return jsonify({"status": 2, "hostel": {"id": hostel.hostel_id, "code": hostel.code, "name": hostel.name}})
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error("Internal server error", e)
