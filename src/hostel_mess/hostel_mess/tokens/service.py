from __future__ import annotations

import base64
import io
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

import qrcode

from ..assignments.service import AssignmentService
from ..common.clock import Clock
from ..common.flow_log import flow_log
from ..common.validators import require_positive_int
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..hostels.repository import ResidentRepository
from .codec import IdentityTokenCodec


@dataclass(frozen=True)
class IssuedToken:
    token: str
    resident_id: int
    hostel_id: Optional[int]
    expires_at: datetime
    expires_in_seconds: int
    qr_data_url: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "payload": {"qr_token": self.token},
            "hostel_id": self.hostel_id,
            "expires_at": self.expires_at.isoformat(),
            "expires_in_seconds": self.expires_in_seconds,
            "qr": self.qr_data_url,
        }


def render_qr_data_url(data: str) -> str:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


class IdentityTokenService:
    """Mint identity tokens for residents, stamped with today's hostel."""

    def __init__(
        self,
        codec: IdentityTokenCodec,
        assignments: AssignmentService,
        residents: ResidentRepository,
        clock: Clock,
        *,
        default_ttl_seconds: int = 30,
        max_ttl_seconds: int = 300,
    ):
        self._codec = codec
        self._assignments = assignments
        self._residents = residents
        self._clock = clock
        self._default_ttl = int(default_ttl_seconds)
        self._max_ttl = int(max_ttl_seconds)

    def issue(self, resident_id: Any, ttl_seconds: Any = None, *, with_qr: bool = True) -> IssuedToken:
        resident_id = require_positive_int(resident_id, "resident_id")
        ttl = self._default_ttl if ttl_seconds is None else require_positive_int(ttl_seconds, "ttl_seconds")
        if ttl > self._max_ttl:
            raise ValidationError(f"ttl_seconds must be at most {self._max_ttl}")

        resident = self._residents.get_by_id(resident_id)
        if not resident:
            raise NotFoundError("Resident not found")
        if not resident.is_active:
            raise AuthorizationError("Account is inactive")

        hostel_id = self._assignments.active_hostel(resident_id, self._clock.today())
        token, claims = self._codec.issue(resident_id, hostel_id, ttl)
        qr = render_qr_data_url(json.dumps({"qr_token": token})) if with_qr else None

        flow_log("QRCODE", "Generated", resident_id=resident_id, hostel_id=hostel_id, ttl_seconds=ttl, token=token)
        return IssuedToken(
            token=token,
            resident_id=resident_id,
            hostel_id=hostel_id,
            expires_at=claims.expires_at,
            expires_in_seconds=ttl,
            qr_data_url=qr,
        )
