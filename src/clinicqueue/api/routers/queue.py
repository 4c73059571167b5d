"""
Queue endpoints: bookings, live queue and visit status changes.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query, Request, status

from ...application.dto.queue_dto import BookVisitRequest as BookVisitDTO
from ...application.dto.queue_dto import QueueView, SetVisitStatusRequest
from ...core.utils.datetime_utils import clinic_today, parse_service_date
from ...domain.entities.visit import PatientInfo
from ..deps import (
    BookVisitDep,
    CurrentHandlerDep,
    ListQueueDep,
    SetVisitStatusDep,
    SettingsDep,
)
from ..schemas.appointments import AppointmentSchema
from ..schemas.common import ApiResponse
from ..schemas.doctors import DoctorSchema
from ..schemas.visits import (
    BookVisitRequest,
    BookVisitResponse,
    QueueEntrySchema,
    QueueSchema,
    VisitSchema,
    VisitStatusUpdateRequest,
    VisitStatusUpdateResponse,
)
from ..utils.responses import ok

router = APIRouter(tags=["Queue"])
logger = logging.getLogger("clinicqueue")


def _queue_schema(view: QueueView) -> QueueSchema:
    return QueueSchema(
        doctor_id=view.doctor.doctor_id,
        doctor_name=view.doctor.name,
        doctor_status=view.doctor.status.value,
        current_token=view.doctor.current_token,
        next_token=view.doctor.next_token,
        date=view.date.isoformat(),
        entries=[
            QueueEntrySchema(position=entry.position, visit=VisitSchema.from_domain(entry.visit))
            for entry in view.entries
        ],
        summary=view.summary,
    )


@router.post(
    "/queue/{doctor_id}/bookings",
    response_model=ApiResponse[BookVisitResponse],
    status_code=status.HTTP_201_CREATED,
)
async def book_visit(request: Request, doctor_id: str, payload: BookVisitRequest, use_case: BookVisitDep):
    """Book a patient into the doctor's queue; returns token, position and appointment."""
    result = await use_case.execute(
        BookVisitDTO(
            doctor_id=doctor_id,
            date=parse_service_date(payload.date),
            patient=PatientInfo(
                name=payload.patient.name,
                age=payload.patient.age,
                phone=payload.patient.phone,
                reason=payload.patient.reason,
            ),
            user_id=payload.user_id,
            clinic_name=payload.clinic_name,
            time_slot=payload.time_slot,
        )
    )
    return ok(
        request,
        data=BookVisitResponse(
            queue_position=result.queue_position,
            visit=VisitSchema.from_domain(result.visit),
            appointment=AppointmentSchema.from_domain(result.appointment),
        ),
        message=f"Booked token {result.visit.token}",
    )


@router.get("/queue/{doctor_id}", response_model=ApiResponse[QueueSchema])
async def get_queue(
    request: Request,
    doctor_id: str,
    use_case: ListQueueDep,
    settings: SettingsDep,
    date: Optional[str] = Query(None, description="Service date (YYYY-MM-DD); today when omitted"),
    include_inactive: bool = Query(False, description="Also list finished records, without a position"),
):
    on_date = parse_service_date(date) if date else clinic_today(settings.queue.timezone)
    view = await use_case.execute(doctor_id, on_date, include_inactive=include_inactive)
    return ok(request, data=_queue_schema(view))


@router.get("/queue/{doctor_id}/summary", response_model=ApiResponse[dict])
async def get_queue_summary(
    request: Request,
    doctor_id: str,
    use_case: ListQueueDep,
    settings: SettingsDep,
    date: Optional[str] = Query(None, description="Service date (YYYY-MM-DD); today when omitted"),
):
    on_date = parse_service_date(date) if date else clinic_today(settings.queue.timezone)
    summary = await use_case.summary(doctor_id, on_date)
    return ok(request, data={"doctor_id": doctor_id, "date": on_date.isoformat(), **summary})


@router.put("/visits/{visit_id}/status", response_model=ApiResponse[VisitStatusUpdateResponse])
async def set_visit_status(
    request: Request,
    visit_id: str,
    payload: VisitStatusUpdateRequest,
    handler: CurrentHandlerDep,
    use_case: SetVisitStatusDep,
):
    """Move a visit along waiting -> arrived -> with_doctor -> completed, or to no_show."""
    result = await use_case.execute(
        SetVisitStatusRequest(
            visit_id=visit_id,
            new_status=payload.status,
            actor=handler,
            expected_version=payload.expected_version,
        )
    )
    return ok(
        request,
        data=VisitStatusUpdateResponse(
            visit=VisitSchema.from_domain(result.visit),
            old_status=result.old_status,
            queue_position=result.queue_position,
            doctor=DoctorSchema.from_domain(result.doctor) if result.doctor else None,
            activity_entry_id=result.activity_entry_id,
        ),
        message=f"Visit status updated to {result.visit.status.value}",
    )
