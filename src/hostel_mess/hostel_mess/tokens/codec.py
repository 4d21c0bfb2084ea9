"""Short-lived signed identity tokens shown as QR codes and scanned by staff.

A token binds a resident to the hostel they belonged to when it was minted.
Verification answers with one uniform failure whatever went wrong, so callers
can never learn whether the signature, the type or the expiry was at fault.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import jwt

from ..common.clock import Clock
from ..core.constants import TOKEN_ALGORITHM, TOKEN_TYPE
from ..core.enums import RejectReason
from ..core.exceptions import AuthorizationError

logger = logging.getLogger(__name__)

INVALID_TOKEN_MESSAGE = "Invalid or expired identity token"


class InvalidTokenError(AuthorizationError):
    def __init__(self):
        super().__init__(INVALID_TOKEN_MESSAGE, reason=RejectReason.INVALID_TOKEN)


@dataclass(frozen=True)
class IdentityClaims:
    resident_id: int
    hostel_id: Optional[int]
    issued_at: datetime
    expires_at: datetime


class IdentityTokenCodec:
    def __init__(self, *, secret: str, clock: Clock, leeway_seconds: int = 10, algorithm: str = TOKEN_ALGORITHM):
        if not secret:
            raise ValueError("token signing secret is not configured")
        self._secret = secret
        self._clock = clock
        self._leeway = int(leeway_seconds)
        self._algorithm = algorithm

    def issue(self, resident_id: int, hostel_id: Optional[int], ttl_seconds: int) -> tuple[str, IdentityClaims]:
        issued_at = self._clock.now().replace(microsecond=0)
        expires_at = issued_at + timedelta(seconds=int(ttl_seconds))
        payload = {
            "typ": TOKEN_TYPE,
            "user_id": int(resident_id),
            "hostel_id": int(hostel_id) if hostel_id is not None else None,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return token, IdentityClaims(int(resident_id), payload["hostel_id"], issued_at, expires_at)

    def verify(self, token: str) -> IdentityClaims:
        if not token or not isinstance(token, str):
            raise InvalidTokenError()
        try:
            # Time claims are checked against the injected clock below.
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"], "verify_exp": False, "verify_iat": False, "verify_nbf": False},
            )
        except jwt.PyJWTError as e:
            logger.debug("identity token rejected: %s", type(e).__name__)
            raise InvalidTokenError()

        if payload.get("typ") != TOKEN_TYPE:
            raise InvalidTokenError()

        try:
            resident_id = int(payload["user_id"])
            hostel_raw = payload.get("hostel_id")
            hostel_id = int(hostel_raw) if hostel_raw is not None else None
            iat = int(payload["iat"])
            exp = int(payload["exp"])
        except (KeyError, TypeError, ValueError):
            raise InvalidTokenError()

        now = int(self._clock.now().timestamp())
        if now > exp + self._leeway or iat > now + self._leeway:
            raise InvalidTokenError()

        tz = self._clock.now().tzinfo
        return IdentityClaims(
            resident_id=resident_id,
            hostel_id=hostel_id,
            issued_at=datetime.fromtimestamp(iat, tz),
            expires_at=datetime.fromtimestamp(exp, tz),
        )
