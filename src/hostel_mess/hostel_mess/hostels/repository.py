from __future__ import annotations

from typing import Optional, Protocol

from .model import Hostel, Resident


class HostelRepository(Protocol):
    def get_by_id(self, hostel_id: int) -> Optional[Hostel]:
        raise NotImplementedError


class ResidentRepository(Protocol):
    def get_by_id(self, resident_id: int) -> Optional[Resident]:
        raise NotImplementedError
