"""
Activity log API schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ...domain.entities.activity_log import ActivityLogEntry
from ...domain.enums.statuses import ActivityAction, ActivityTargetType


class RecordActivityRequest(BaseModel):
    """Free-form activity entry; handler identity comes from the request headers."""

    clinic_id: str = Field(..., min_length=1)
    action: ActivityAction
    target_type: ActivityTargetType
    target_id: str = Field(..., min_length=1)
    target_name: str = Field(..., min_length=1)
    details: str = Field(..., min_length=1, max_length=500)
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    entry_id: Optional[str] = Field(None, min_length=8, max_length=64, description="Client-chosen ID; retries with the same ID are no-ops")


class HandlerSessionRequest(BaseModel):
    clinic_id: str = Field(..., min_length=1)
    action: ActivityAction = Field(..., description="handler_login or handler_logout")


class ActivityEntrySchema(BaseModel):
    entry_id: str
    timestamp: datetime
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

    @classmethod
    def from_domain(cls, entry: ActivityLogEntry) -> "ActivityEntrySchema":
        return cls(
            entry_id=entry.entry_id,
            timestamp=entry.timestamp,
            handler_id=entry.handler_id,
            handler_name=entry.handler_name,
            action=entry.action,
            target_type=entry.target_type,
            target_id=entry.target_id,
            target_name=entry.target_name,
            details=entry.details,
            clinic_id=entry.clinic_id,
            old_value=entry.old_value,
            new_value=entry.new_value,
        )
