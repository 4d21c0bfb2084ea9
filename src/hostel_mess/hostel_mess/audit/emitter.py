"""Audit emission.

Sinks decide where events go; ``BestEffortAuditor`` guarantees a failing sink
never changes the outcome of the write that triggered it.
"""

from __future__ import annotations

import logging
from typing import IO, Optional, Protocol

from pythonjsonlogger import jsonlogger

from .model import AuditEvent

logger = logging.getLogger(__name__)

AUDIT_LOGGER = "hostel_mess.audit"


class AuditSink(Protocol):
    def write(self, event: AuditEvent) -> None:
        raise NotImplementedError


class AuditJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name


def configure_audit_logging(stream: Optional[IO[str]] = None) -> logging.Handler:
    """One JSON object per line on the audit logger, kept out of the plain-text root handlers."""
    audit_logger = logging.getLogger(AUDIT_LOGGER)
    for existing in audit_logger.handlers:
        if isinstance(existing.formatter, AuditJsonFormatter) and stream is None:
            return existing

    handler = logging.StreamHandler(stream)
    handler.setFormatter(AuditJsonFormatter("%(asctime)s %(message)s"))
    audit_logger.addHandler(handler)
    audit_logger.setLevel(logging.INFO)
    audit_logger.propagate = False
    return handler


class LoggingAuditSink:
    def __init__(self, logger_name: str = AUDIT_LOGGER):
        self._logger = logging.getLogger(logger_name)

    def write(self, event: AuditEvent) -> None:
        self._logger.info("audit_event", extra=event.as_dict())


class BestEffortAuditor:
    def __init__(self, sink: AuditSink):
        self._sink = sink

    def emit(self, event: AuditEvent) -> bool:
        try:
            self._sink.write(event)
            return True
        except Exception:
            logger.exception("audit emission failed: action=%s entity=%s", event.action.value, event.entity_id)
            return False
