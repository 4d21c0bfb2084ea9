from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles stored in the session by the external login flow."""

    RESIDENT = "resident"
    STAFF = "staff"


class MealSlot(str, Enum):
    """Fixed daily meal vocabulary, in serving order."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    SNACKS = "snacks"
    DINNER = "dinner"


class MealStatus(str, Enum):
    OPEN = "open"
    HOLIDAY = "holiday"


class MenuSource(str, Enum):
    """Which tier answered an effective-meal lookup."""

    OVERRIDE = "override"
    TEMPLATE = "template"
    DEFAULT = "default"


class WindowSource(str, Enum):
    HOSTEL = "hostel"
    DEFAULT = "default"


class RejectReason(str, Enum):
    INVALID_TOKEN = "invalid_token"
    CROSS_HOSTEL = "cross_hostel"
    NOT_ASSIGNED = "not_assigned"
    HOLIDAY = "holiday"
    WINDOW_CLOSED = "window_closed"
    ALREADY_MARKED = "already_marked"
    NOT_ENROLLED = "not_enrolled"
    MENU_LOCKED = "menu_locked"
    OVERLAPPING_ASSIGNMENT = "overlapping_assignment"


class AuditAction(str, Enum):
    ATTENDANCE_MARKED = "attendance_marked"
    MEAL_PLAN_CHANGED = "meal_plan_changed"
    MEAL_OVERRIDE_DELETED = "meal_override_deleted"
    HOSTEL_ASSIGNED = "hostel_assigned"
