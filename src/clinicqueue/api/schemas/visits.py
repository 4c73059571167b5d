"""
Visit and queue API schemas.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ...domain.entities.visit import Visit
from ...domain.enums.statuses import VisitStatus
from .common import PatientDetails
from .appointments import AppointmentSchema
from .doctors import DoctorSchema


class BookVisitRequest(BaseModel):
    """Request schema for booking a visit."""

    date: str = Field(..., description="Service date (YYYY-MM-DD)")
    patient: PatientDetails
    user_id: Optional[str] = Field(None, description="Booking user ID (patient account)")
    clinic_name: Optional[str] = Field(None, description="Clinic display name to copy onto the appointment")
    time_slot: Optional[str] = Field(None, max_length=40, description="Preferred time slot label")


class VisitSchema(BaseModel):
    """Visit record as shown on the clinic dashboard."""

    visit_id: str
    token: str
    clinic_id: str
    doctor_id: str
    date: str
    status: VisitStatus
    patient: PatientDetails
    appointment_id: Optional[str] = None
    booked_at: datetime
    arrived_at: Optional[datetime] = None
    consultation_started_at: Optional[datetime] = None
    consultation_ended_at: Optional[datetime] = None
    version: int

    @classmethod
    def from_domain(cls, visit: Visit) -> "VisitSchema":
        return cls(
            visit_id=visit.visit_id,
            token=visit.token,
            clinic_id=visit.clinic_id,
            doctor_id=visit.doctor_id,
            date=visit.date.isoformat(),
            status=visit.status,
            patient=PatientDetails.model_construct(
                name=visit.patient.name,
                age=visit.patient.age,
                phone=visit.patient.phone,
                reason=visit.patient.reason,
            ),
            appointment_id=visit.appointment_id,
            booked_at=visit.booked_at,
            arrived_at=visit.arrived_at,
            consultation_started_at=visit.consultation_started_at,
            consultation_ended_at=visit.consultation_ended_at,
            version=visit.version,
        )


class QueueEntrySchema(BaseModel):
    position: Optional[int] = Field(None, description="1-based queue position; null for finished records")
    visit: VisitSchema


class QueueSchema(BaseModel):
    doctor_id: str
    doctor_name: str
    doctor_status: str
    current_token: str
    next_token: str
    date: str
    entries: List[QueueEntrySchema]
    summary: Dict[str, int]


class VisitStatusUpdateRequest(BaseModel):
    status: VisitStatus = Field(..., description="Target visit status")
    expected_version: Optional[int] = Field(None, ge=0, description="Reject when the record has changed since this version")


class VisitStatusUpdateResponse(BaseModel):
    visit: VisitSchema
    old_status: VisitStatus
    queue_position: Optional[int] = None
    doctor: Optional[DoctorSchema] = Field(None, description="Doctor state when the change cascaded to the doctor")
    activity_entry_id: Optional[str] = None


class BookVisitResponse(BaseModel):
    queue_position: int = Field(..., description="1-based position at booking time")
    visit: VisitSchema
    appointment: AppointmentSchema
