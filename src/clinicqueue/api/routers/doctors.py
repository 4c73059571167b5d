"""
Doctor endpoints: clinic setup, availability and token preview.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from ...application.dto.queue_dto import (
    RegisterDoctorRequest as RegisterDoctorDTO,
    SetDoctorStatusRequest,
)
from ...core.utils.datetime_utils import clinic_today, parse_service_date
from ...domain.errors import DoctorNotFoundError
from ..deps import (
    CurrentHandlerDep,
    DoctorRepositoryDep,
    RegisterDoctorDep,
    SetDoctorStatusDep,
    SettingsDep,
    TokenAllocatorDep,
)
from ..schemas.common import ApiResponse
from ..schemas.doctors import (
    DoctorSchema,
    DoctorStatusUpdateRequest,
    DoctorStatusUpdateResponse,
    RegisterDoctorRequest,
    TokenPreviewSchema,
)
from ..utils.responses import ok

router = APIRouter(prefix="/doctors", tags=["Doctors"])
logger = logging.getLogger("clinicqueue")


@router.post(
    "",
    response_model=ApiResponse[DoctorSchema],
    status_code=status.HTTP_201_CREATED,
)
async def register_doctor(request: Request, payload: RegisterDoctorRequest, use_case: RegisterDoctorDep):
    """Add a doctor to a clinic with seeded tokens and status not_arrived."""
    doctor = await use_case.execute(RegisterDoctorDTO(**payload.model_dump()))
    return ok(request, data=DoctorSchema.from_domain(doctor), message="Doctor registered")


@router.get("", response_model=ApiResponse[List[DoctorSchema]])
async def list_doctors(
    request: Request,
    doctors: DoctorRepositoryDep,
    clinic_id: str = Query(..., min_length=1, description="Clinic ID"),
):
    results = await doctors.find_by_clinic(clinic_id)
    return ok(request, data=[DoctorSchema.from_domain(d) for d in results], message=f"{len(results)} doctor(s)")


@router.get("/{doctor_id}", response_model=ApiResponse[DoctorSchema])
async def get_doctor(request: Request, doctor_id: str, doctors: DoctorRepositoryDep):
    doctor = await doctors.find_by_id(doctor_id)
    if not doctor:
        raise DoctorNotFoundError(doctor_id)
    return ok(request, data=DoctorSchema.from_domain(doctor))


@router.put("/{doctor_id}/status", response_model=ApiResponse[DoctorStatusUpdateResponse])
async def set_doctor_status(
    request: Request,
    doctor_id: str,
    payload: DoctorStatusUpdateRequest,
    handler: CurrentHandlerDep,
    use_case: SetDoctorStatusDep,
):
    """
    Change a doctor's availability.

    Setting ``not_arrived`` while patients are waiting returns their visit IDs
    in ``notify_patient_ids`` and queues a delay notice for each.
    """
    result = await use_case.execute(
        SetDoctorStatusRequest(
            doctor_id=doctor_id,
            new_status=payload.status,
            actor=handler,
            on_date=parse_service_date(payload.date) if payload.date else None,
        )
    )
    return ok(
        request,
        data=DoctorStatusUpdateResponse(
            doctor=DoctorSchema.from_domain(result.doctor),
            old_status=result.old_status,
            notify_patient_ids=result.notify_patient_ids,
            activity_entry_id=result.activity_entry_id,
        ),
        message=f"Doctor status updated to {result.doctor.status.value}",
    )


@router.get("/{doctor_id}/tokens/preview", response_model=ApiResponse[TokenPreviewSchema])
async def preview_token(
    request: Request,
    doctor_id: str,
    doctors: DoctorRepositoryDep,
    allocator: TokenAllocatorDep,
    settings: SettingsDep,
    date: Optional[str] = Query(None, description="Service date (YYYY-MM-DD); today when omitted"),
    slot_index: int = Query(1, ge=1, le=999, description="1-based index among the next bookings"),
):
    """Projected token for an upcoming booking. Does not reserve anything."""
    doctor = await doctors.find_by_id(doctor_id)
    if not doctor:
        raise DoctorNotFoundError(doctor_id)

    on_date = parse_service_date(date) if date else clinic_today(settings.queue.timezone)
    token = await allocator.preview(doctor.clinic_id, doctor_id, on_date, slot_index)
    return ok(
        request,
        data=TokenPreviewSchema(
            doctor_id=doctor_id, date=on_date.isoformat(), slot_index=slot_index, token=token.value
        ),
    )
