"""
Appointment API schemas (patient-facing).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ...application.dto.queue_dto import AppointmentView
from ...domain.entities.appointment import Appointment
from ...domain.enums.statuses import AppointmentStatus, DoctorStatus


class AppointmentSchema(BaseModel):
    appointment_id: str
    user_id: str
    clinic_id: str
    clinic_name: str
    doctor_id: str
    doctor_name: str
    date: str
    token: str
    visit_id: str
    time_slot: Optional[str] = None
    status: AppointmentStatus
    cancellation_reason: Optional[str] = None
    created_at: datetime
    cancelled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    version: int

    # Snapshot fields read at request time
    current_token: Optional[str] = None
    doctor_status: Optional[DoctorStatus] = None
    queue_position: Optional[int] = None

    @classmethod
    def from_domain(cls, appointment: Appointment) -> "AppointmentSchema":
        return cls(
            appointment_id=appointment.appointment_id,
            user_id=appointment.user_id,
            clinic_id=appointment.clinic_id,
            clinic_name=appointment.clinic_name,
            doctor_id=appointment.doctor_id,
            doctor_name=appointment.doctor_name,
            date=appointment.date.isoformat(),
            token=appointment.token,
            visit_id=appointment.visit_id,
            time_slot=appointment.time_slot,
            status=appointment.status,
            cancellation_reason=(
                appointment.cancellation_reason.value if appointment.cancellation_reason else None
            ),
            created_at=appointment.created_at,
            cancelled_at=appointment.cancelled_at,
            completed_at=appointment.completed_at,
            version=appointment.version,
        )

    @classmethod
    def from_view(cls, view: AppointmentView) -> "AppointmentSchema":
        schema = cls.from_domain(view.appointment)
        schema.current_token = view.current_token
        schema.doctor_status = view.doctor_status
        schema.queue_position = view.queue_position
        return schema


class CancelAppointmentRequest(BaseModel):
    expected_version: Optional[int] = Field(None, ge=0, description="Reject when the appointment has changed since this version")


class CancelAppointmentResponse(BaseModel):
    appointment: AppointmentSchema
    changed: bool = Field(..., description="False when the appointment was already cancelled")
