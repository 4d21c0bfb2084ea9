from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..core.enums import AuditAction


@dataclass(frozen=True)
class AuditEvent:
    action: AuditAction
    entity_type: str
    entity_id: str
    actor_id: Optional[int] = None
    details: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "action": self.action.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "actor_id": self.actor_id,
            **self.details,
        }
