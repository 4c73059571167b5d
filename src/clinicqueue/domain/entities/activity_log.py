"""Activity log entry: immutable audit record of a staff action."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

from ..enums.statuses import ActivityAction, ActivityTargetType
from ..value_objects.queue_scope import Actor


@dataclass(frozen=True)
class ActivityLogEntry:
    """Append-only activity record.

    ``entry_id`` and ``timestamp`` may be left empty by callers; the recorder
    fills them in before the entry is stored.
    """

    handler_id: str
    handler_name: str
    action: ActivityAction
    target_type: ActivityTargetType
    target_id: str
    target_name: str
    details: str
    clinic_id: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    entry_id: Optional[str] = None
    timestamp: Optional[datetime] = None

    @classmethod
    def status_change(
        cls,
        actor: Actor,
        action: ActivityAction,
        target_type: ActivityTargetType,
        target_id: str,
        target_name: str,
        clinic_id: str,
        old_value: str,
        new_value: str,
    ) -> "ActivityLogEntry":
        subject = "patient" if target_type == ActivityTargetType.PATIENT else "doctor"
        details = (
            f"Updated {subject} status from {old_value.replace('_', ' ')} "
            f"to {new_value.replace('_', ' ')}"
        )
        return cls(
            handler_id=actor.handler_id,
            handler_name=actor.handler_name,
            action=action,
            target_type=target_type,
            target_id=target_id,
            target_name=target_name,
            details=details,
            clinic_id=clinic_id,
            old_value=old_value,
            new_value=new_value,
        )

    def stamped(self, entry_id: str, timestamp: datetime) -> "ActivityLogEntry":
        """Copy with id/timestamp filled where missing."""
        return replace(
            self,
            entry_id=self.entry_id or entry_id,
            timestamp=self.timestamp or timestamp,
        )
