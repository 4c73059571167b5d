"""
Appointment endpoints for the patient-facing side.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, Request

from ...application.dto.queue_dto import CancelAppointmentRequest as CancelAppointmentDTO
from ..deps import (
    CancelAppointmentDep,
    CurrentHandlerDep,
    GetAppointmentDep,
    ListUserAppointmentsDep,
)
from ..schemas.appointments import (
    AppointmentSchema,
    CancelAppointmentRequest,
    CancelAppointmentResponse,
)
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.get("", response_model=ApiResponse[List[AppointmentSchema]])
async def list_user_appointments(
    request: Request,
    use_case: ListUserAppointmentsDep,
    user_id: str = Query(..., min_length=1, description="Booking user ID"),
):
    """A user's appointments ordered by date, each with a live queue snapshot."""
    views = await use_case.execute(user_id)
    return ok(request, data=[AppointmentSchema.from_view(v) for v in views])


@router.get("/{appointment_id}", response_model=ApiResponse[AppointmentSchema])
async def get_appointment(request: Request, appointment_id: str, use_case: GetAppointmentDep):
    view = await use_case.execute(appointment_id)
    return ok(request, data=AppointmentSchema.from_view(view))


@router.post("/{appointment_id}/cancel", response_model=ApiResponse[CancelAppointmentResponse])
async def cancel_appointment(
    request: Request,
    appointment_id: str,
    handler: CurrentHandlerDep,
    use_case: CancelAppointmentDep,
    payload: Optional[CancelAppointmentRequest] = None,
):
    """
    Cancel a booking. The visit leaves the queue and later positions close up.

    Cancelling an already cancelled appointment succeeds with ``changed=false``.
    """
    explicit_handler = request.headers.get("X-Handler-ID")
    result = await use_case.execute(
        CancelAppointmentDTO(
            appointment_id=appointment_id,
            actor=handler if explicit_handler else None,
            expected_version=payload.expected_version if payload else None,
        )
    )
    return ok(
        request,
        data=CancelAppointmentResponse(
            appointment=AppointmentSchema.from_domain(result.appointment),
            changed=result.changed,
        ),
        message="Appointment cancelled" if result.changed else "Appointment already cancelled",
    )
