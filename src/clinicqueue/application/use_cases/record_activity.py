"""Activity Log Recorder: append-only audit trail of staff actions."""

import logging
from datetime import datetime
from typing import List, Optional

from ...domain.entities.activity_log import ActivityLogEntry
from ...domain.enums.statuses import ActivityAction, ActivityTargetType
from ...domain.value_objects.idempotency_key import IdempotencyKey
from ...domain.value_objects.queue_scope import Actor
from ...observability.audit import audit_log_event
from ..ports.repositories.activity_log_repo import ActivityLogRepository

logger = logging.getLogger(__name__)

SESSION_ACTIONS = (ActivityAction.HANDLER_LOGIN, ActivityAction.HANDLER_LOGOUT)


class ActivityLogRecorder:
    """Stamps entries with an ID and timestamp and appends them to the store.

    Entries are never edited or removed here. A repeated entry ID is treated
    as a retry of the same write and returns the existing ID.
    """

    def __init__(self, activity_repository: ActivityLogRepository):
        self._activity_repository = activity_repository

    async def record(self, entry: ActivityLogEntry) -> str:
        """Append an entry and return its ID."""
        if entry.entry_id:
            # Validates caller-supplied keys
            IdempotencyKey.from_string(entry.entry_id)

        stamped = entry.stamped(
            entry_id=IdempotencyKey.generate().value,
            timestamp=datetime.utcnow(),
        )

        inserted = await self._activity_repository.append(stamped)
        if not inserted:
            logger.info(f"Activity entry {stamped.entry_id} already recorded; skipping duplicate")
            return stamped.entry_id

        await audit_log_event(
            event=stamped.action.value,
            clinic_id=stamped.clinic_id,
            target_id=stamped.target_id,
            handler_id=stamped.handler_id,
            payload={
                "entry_id": stamped.entry_id,
                "target_type": stamped.target_type.value,
                "old_value": stamped.old_value,
                "new_value": stamped.new_value,
            },
        )
        return stamped.entry_id

    async def list_recent(self, clinic_id: str, limit: Optional[int] = None) -> List[ActivityLogEntry]:
        """Most-recent-first entries for a clinic."""
        if limit is not None and limit < 1:
            raise ValueError("limit must be a positive integer")
        return await self._activity_repository.list_by_clinic(clinic_id, limit)

    async def record_handler_session(
        self, actor: Actor, clinic_id: str, action: ActivityAction
    ) -> str:
        """Record a handler login or logout."""
        action = ActivityAction(action)
        if action not in SESSION_ACTIONS:
            raise ValueError(f"Not a session action: {action.value}")

        verb = "logged in" if action == ActivityAction.HANDLER_LOGIN else "logged out"
        return await self.record(
            ActivityLogEntry(
                handler_id=actor.handler_id,
                handler_name=actor.handler_name,
                action=action,
                target_type=ActivityTargetType.SYSTEM,
                target_id=clinic_id,
                target_name="Clinic dashboard",
                details=f"{actor.handler_name} {verb}",
                clinic_id=clinic_id,
            )
        )
