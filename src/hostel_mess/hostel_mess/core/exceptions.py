from __future__ import annotations

from typing import Optional

from .enums import RejectReason


class DomainError(Exception):
    """Base exception for business rule violations."""

    def __init__(self, message: str = "", *, reason: Optional[RejectReason] = None):
        super().__init__(message)
        self.reason = reason


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced hostel or override does not exist."""


class AuthenticationError(DomainError):
    """Raised when the caller has no session."""


class AuthorizationError(DomainError):
    """Raised when a token or caller is not allowed to perform an action."""


class ConflictError(DomainError):
    """Raised when a write collides with an existing row."""


class PreconditionError(DomainError):
    """Raised for business-rule rejections that may succeed later."""
