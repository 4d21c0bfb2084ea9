from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Hostel:
    """Reference data: a residential facility with its own meal calendar."""

    hostel_id: int
    code: str
    name: str


@dataclass(frozen=True)
class Resident:
    """Owned by account management; the mess only reads it."""

    resident_id: int
    email: str
    full_name: str
    is_active: bool = True
