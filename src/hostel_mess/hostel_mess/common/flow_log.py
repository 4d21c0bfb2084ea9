"""Tagged one-line flow logs for request tracing.

Output looks like ``[ATTENDANCE] Marked: resident_id=7, meal=lunch``. Fields whose
name mentions a token or OTP are masked unless sensitive logging is enabled.
"""

from __future__ import annotations

import json
import logging
import os
from enum import Enum
from typing import Any

logger = logging.getLogger("hostel_mess.flow")

_SENSITIVE_KEYS = ("token", "otp")


def _env_flag(name: str, default: str) -> bool:
    return str(os.getenv(name, default)).strip().lower() not in {"false", "0", "no", "off"}


def should_flow_log() -> bool:
    return _env_flag("LOG_FLOW", "true")


def should_log_sensitive() -> bool:
    return str(os.getenv("LOG_SENSITIVE", "false")).strip().lower() == "true"


def mask(value: Any, *, show_start: int = 4, show_end: int = 2) -> str:
    s = "" if value is None else str(value)
    if should_log_sensitive():
        return s
    if len(s) <= show_start + show_end:
        return "***"
    return f"{s[:show_start]}***{s[-show_end:]}"


def _stringify(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (str, int, float, bool)):
        return str(value)
    try:
        return json.dumps(value, default=str)
    except (TypeError, ValueError):
        return str(value)


def format_fields(fields: dict[str, Any]) -> str:
    parts = []
    for key, value in fields.items():
        if any(s in key.lower() for s in _SENSITIVE_KEYS):
            parts.append(f"{key}={mask(value)}")
        else:
            parts.append(f"{key}={_stringify(value)}")
    return f": {', '.join(parts)}" if parts else ""


def flow_log(tag: str, message: str, **fields: Any) -> None:
    if not should_flow_log():
        return
    logger.info("[%s] %s%s", tag, message, format_fields(fields))


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
