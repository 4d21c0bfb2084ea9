from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import error_response, server_error, session_identity
from ..container import Container
from ..core.exceptions import DomainError, ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/me/stats", methods=["GET"], endpoint="me_stats")
    def me_stats():
        try:
            user_id, _, _ = session_identity()
            if not request.args.get("from") or not request.args.get("to"):
                raise ValidationError("from and to are required (YYYY-MM-DD)")
            stats = container.stats_service.stats(
                user_id,
                parse_iso_date(request.args["from"]),
                parse_iso_date(request.args["to"]),
            )
            return jsonify(stats.as_dict())
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error("Server error", e)
