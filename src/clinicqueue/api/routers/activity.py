"""
Activity log endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from ...domain.entities.activity_log import ActivityLogEntry
from ..deps import ActivityRecorderDep, CurrentHandlerDep, SettingsDep
from ..schemas.activity import ActivityEntrySchema, HandlerSessionRequest, RecordActivityRequest
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/activity", tags=["Activity Log"])


@router.post("", response_model=ApiResponse[dict], status_code=status.HTTP_201_CREATED)
async def record_activity(
    request: Request,
    payload: RecordActivityRequest,
    handler: CurrentHandlerDep,
    recorder: ActivityRecorderDep,
):
    """Append an entry. Re-posting the same ``entry_id`` is a no-op."""
    entry_id = await recorder.record(
        ActivityLogEntry(
            handler_id=handler.handler_id,
            handler_name=handler.handler_name,
            action=payload.action,
            target_type=payload.target_type,
            target_id=payload.target_id,
            target_name=payload.target_name,
            details=payload.details,
            clinic_id=payload.clinic_id,
            old_value=payload.old_value,
            new_value=payload.new_value,
            entry_id=payload.entry_id,
        )
    )
    return ok(request, data={"entry_id": entry_id}, message="Activity recorded")


@router.get("", response_model=ApiResponse[List[ActivityEntrySchema]])
async def list_activity(
    request: Request,
    recorder: ActivityRecorderDep,
    settings: SettingsDep,
    clinic_id: str = Query(..., min_length=1, description="Clinic ID"),
    limit: Optional[int] = Query(None, ge=1, le=500, description="Max entries; display default when omitted"),
):
    """Most recent entries first."""
    entries = await recorder.list_recent(clinic_id, limit or settings.queue.activity_display_limit)
    return ok(request, data=[ActivityEntrySchema.from_domain(e) for e in entries])


@router.post("/sessions", response_model=ApiResponse[dict], status_code=status.HTTP_201_CREATED)
async def record_handler_session(
    request: Request,
    payload: HandlerSessionRequest,
    handler: CurrentHandlerDep,
    recorder: ActivityRecorderDep,
):
    """Record a handler login or logout on the clinic dashboard."""
    entry_id = await recorder.record_handler_session(handler, payload.clinic_id, payload.action)
    return ok(request, data={"entry_id": entry_id}, message=f"{payload.action.value} recorded")
