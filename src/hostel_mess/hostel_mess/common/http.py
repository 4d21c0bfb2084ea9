from __future__ import annotations

import logging
from typing import Any, Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    PreconditionError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (PreconditionError, 409),
)


def status_for(exc: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(exc, cls):
            return status
    return 400


def error_response(exc: DomainError):
    body = {"success": False, "error": str(exc)}
    if exc.reason is not None and not isinstance(exc, AuthorizationError):
        body["reason"] = exc.reason.value
    return jsonify(body), status_for(exc)


def server_error(message: str, exc: Exception):
    """Log the real failure, answer with a generic one."""
    logger.error("%s %s failed: %s", request.method, request.path, exc, exc_info=exc)
    return jsonify({"success": False, "error": message}), 500


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def session_identity() -> tuple[int, str, Optional[int]]:
    """(user_id, role, hostel_id) placed in the session by the login flow."""
    user_id = session.get("user_id")
    if not user_id:
        raise AuthenticationError("Unauthorized")
    hostel_id = session.get("hostel_id")
    return int(user_id), str(session.get("role") or ""), int(hostel_id) if hostel_id else None


def require_staff_for(hostel_id: Any) -> tuple[int, int]:
    """Staff id and hostel, when the caller is staff of ``hostel_id`` (or of any hostel if None)."""
    user_id, role, staff_hostel = session_identity()
    if role != Role.STAFF.value or staff_hostel is None:
        raise AuthorizationError("Forbidden")
    if hostel_id is not None and str(hostel_id) != str(staff_hostel):
        raise AuthorizationError("Staff not assigned to this hostel")
    return user_id, staff_hostel
