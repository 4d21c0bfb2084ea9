from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import error_response, server_error, session_identity
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/me/qrcode", methods=["GET"], endpoint="me_qrcode")
    def me_qrcode():
        try:
            user_id, _, _ = session_identity()
            issued = container.token_service.issue(user_id, request.args.get("ttl_seconds"))
            return jsonify(issued.as_dict())
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error("Failed to generate QR", e)
