"""
Doctor-related API schemas.
"""

from datetime import datetime, time
from typing import List, Optional

from pydantic import BaseModel, Field, validator

from ...domain.entities.doctor import WEEKDAYS, Doctor
from ...domain.enums.statuses import DoctorStatus


class RegisterDoctorRequest(BaseModel):
    """Request schema for adding a doctor to a clinic."""

    clinic_id: str = Field(..., min_length=1, description="Clinic ID")
    name: str = Field(..., min_length=2, max_length=120, description="Doctor display name, e.g. 'Dr. Priya Sharma'")
    specialty: str = Field(..., min_length=1, max_length=80, description="Specialty")
    experience: Optional[str] = Field(None, max_length=200, description="Experience summary")
    working_days: Optional[List[str]] = Field(None, description="Weekday names; Monday-Friday when omitted")
    start_time: time = Field(time(9, 0), description="Shift start (HH:MM)")
    end_time: time = Field(time(17, 0), description="Shift end (HH:MM)")
    consultation_duration_minutes: int = Field(15, ge=1, le=240, description="Minutes per consultation")
    max_tokens_per_day: Optional[int] = Field(None, ge=1, le=999, description="Daily booking cap")
    doctor_id: Optional[str] = Field(None, description="Explicit doctor ID (generated when omitted)")

    @validator("working_days")
    def validate_working_days(cls, v):
        if v is None:
            return v
        days = [d.strip().capitalize() for d in v]
        unknown = [d for d in days if d not in WEEKDAYS]
        if unknown:
            raise ValueError(f"Unknown weekday(s): {unknown}")
        return days


class DoctorSchema(BaseModel):
    """Doctor with live queue state."""

    doctor_id: str
    clinic_id: str
    name: str
    specialty: str
    experience: Optional[str] = None
    working_days: List[str]
    start_time: str
    end_time: str
    consultation_duration_minutes: int
    max_tokens_per_day: int
    status: DoctorStatus
    current_token: str
    next_token: str
    total_patients_today: int
    completed_today: int
    updated_at: datetime

    @classmethod
    def from_domain(cls, doctor: Doctor) -> "DoctorSchema":
        return cls(
            doctor_id=doctor.doctor_id,
            clinic_id=doctor.clinic_id,
            name=doctor.name,
            specialty=doctor.specialty,
            experience=doctor.experience,
            working_days=list(doctor.working_days),
            start_time=doctor.start_time.strftime("%H:%M"),
            end_time=doctor.end_time.strftime("%H:%M"),
            consultation_duration_minutes=doctor.consultation_duration_minutes,
            max_tokens_per_day=doctor.max_tokens_per_day,
            status=doctor.status,
            current_token=doctor.current_token,
            next_token=doctor.next_token,
            total_patients_today=doctor.total_patients_today,
            completed_today=doctor.completed_today,
            updated_at=doctor.updated_at,
        )


class DoctorStatusUpdateRequest(BaseModel):
    status: DoctorStatus = Field(..., description="New availability status")
    date: Optional[str] = Field(None, description="Service date for the notify list (YYYY-MM-DD); today when omitted")


class DoctorStatusUpdateResponse(BaseModel):
    doctor: DoctorSchema
    old_status: DoctorStatus
    notify_patient_ids: List[str] = Field(default_factory=list, description="Visit IDs to notify, in queue order")
    activity_entry_id: Optional[str] = None


class TokenPreviewSchema(BaseModel):
    doctor_id: str
    date: str
    slot_index: int
    token: str
