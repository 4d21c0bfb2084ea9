from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import error_response, json_body, require_staff_for, server_error, session_identity
from ..container import Container
from ..core.exceptions import DomainError, ValidationError
from .model import DateOverride, WeeklyMenuTemplate


def _template_dict(t: WeeklyMenuTemplate) -> dict:
    return {
        "hostel_id": t.hostel_id,
        "day_of_week": t.day_of_week,
        "meal": t.meal.value,
        "status": t.status.value,
        "note": t.note,
        "items": list(t.items),
        "updated_at": t.updated_at.isoformat() if t.updated_at else None,
    }


def _override_dict(o: DateOverride) -> dict:
    return {
        "hostel_id": o.hostel_id,
        "date": o.menu_date.isoformat(),
        "meal": o.meal.value,
        "status": o.status.value,
        "note": o.note,
        "items": list(o.items),
        "updated_at": o.updated_at.isoformat() if o.updated_at else None,
    }


def register(app: Flask, container: Container) -> None:
    meals = container.meal_plan_service

    def _required(value, name: str):
        if value is None or value == "":
            raise ValidationError(f"{name} is required")
        return value

    @app.route("/meals/template", methods=["POST"], endpoint="meals_template_upsert")
    def meals_template_upsert():
        data = json_body()
        try:
            hostel_id = _required(data.get("hostel_id"), "hostel_id")
            staff_id, _ = require_staff_for(hostel_id)
            row = meals.upsert_template(
                hostel_id=hostel_id,
                day_of_week=_required(data.get("day_of_week"), "day_of_week"),
                meal=data.get("meal_type") or data.get("meal"),
                status=data.get("status") or "open",
                note=data.get("note"),
                items=data.get("items"),
                actor_id=staff_id,
            )
            return jsonify({"success": True, "template": _template_dict(row)})
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error("Failed to save weekly template", e)

    @app.route("/meals/template", methods=["GET"], endpoint="meals_template_list")
    def meals_template_list():
        hostel_id = request.args.get("hostel_id")
        try:
            _required(hostel_id, "hostel_id")
            require_staff_for(hostel_id)
            rows = meals.list_templates(hostel_id, request.args.get("day_of_week"))
            return jsonify({"success": True, "hostel_id": int(hostel_id), "templates": [_template_dict(t) for t in rows]})
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error("Failed to fetch weekly template", e)

    @app.route("/meals/override", methods=["POST"], endpoint="meals_override_upsert")
    def meals_override_upsert():
        data = json_body()
        try:
            hostel_id = _required(data.get("hostel_id"), "hostel_id")
            menu_date = parse_iso_date(_required(data.get("date"), "date"))
            staff_id, _ = require_staff_for(hostel_id)
            row = meals.upsert_override(
                hostel_id=hostel_id,
                menu_date=menu_date,
                meal=data.get("meal_type") or data.get("meal"),
                status=data.get("status") or "open",
                note=data.get("note"),
                items=data.get("items"),
                actor_id=staff_id,
            )
            return jsonify({"success": True, "override": _override_dict(row)})
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error("Failed to save override", e)

    @app.route("/meals/override", methods=["DELETE"], endpoint="meals_override_delete")
    def meals_override_delete():
        args = request.args
        try:
            hostel_id = _required(args.get("hostel_id"), "hostel_id")
            menu_date = parse_iso_date(_required(args.get("date"), "date"))
            staff_id, _ = require_staff_for(hostel_id)
            meals.delete_override(
                hostel_id=hostel_id,
                menu_date=menu_date,
                meal=args.get("meal_type") or args.get("meal"),
                actor_id=staff_id,
            )
            return jsonify({"success": True, "message": "Override removed"})
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error("Failed to delete override", e)

    @app.route("/meals/menu/item", methods=["DELETE"], endpoint="meals_menu_item_delete")
    def meals_menu_item_delete():
        data = json_body()
        try:
            hostel_id = _required(data.get("hostel_id"), "hostel_id")
            menu_date = parse_iso_date(_required(data.get("date"), "date"))
            staff_id, _ = require_staff_for(hostel_id)
            row = meals.remove_override_item(
                hostel_id=hostel_id,
                menu_date=menu_date,
                meal=data.get("meal_type") or data.get("meal"),
                item=data.get("item"),
                actor_id=staff_id,
            )
            return jsonify({"success": True, "items": list(row.items)})
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error("Failed to delete item", e)

    @app.route("/meals/menu", methods=["GET"], endpoint="meals_menu")
    def meals_menu():
        args = request.args
        try:
            session_identity()
            hostel_id = _required(args.get("hostel_id"), "hostel_id")
            menu_date = parse_iso_date(_required(args.get("date"), "date"))
            merged = meals.effective_menu(hostel_id, menu_date)
            return jsonify({"hostel_id": int(hostel_id), "date": menu_date.isoformat(), "meals": [m.as_dict() for m in merged]})
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error("Failed to fetch menu", e)
