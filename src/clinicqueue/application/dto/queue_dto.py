"""Queue DTOs passed between the API layer and the use cases."""

from dataclasses import dataclass, field
from datetime import date, time
from typing import Dict, List, Optional

from ...domain.entities.appointment import Appointment
from ...domain.entities.doctor import Doctor
from ...domain.entities.visit import PatientInfo, Visit
from ...domain.enums.statuses import DoctorStatus, VisitStatus
from ...domain.services.queue_ordering import RankedVisit
from ...domain.value_objects.queue_scope import Actor


@dataclass
class RegisterDoctorRequest:
    """Request DTO for adding a doctor to a clinic."""

    clinic_id: str
    name: str
    specialty: str
    experience: Optional[str] = None
    working_days: Optional[List[str]] = None
    start_time: time = time(9, 0)
    end_time: time = time(17, 0)
    consultation_duration_minutes: int = 15
    max_tokens_per_day: Optional[int] = None
    doctor_id: Optional[str] = None


@dataclass
class BookVisitRequest:
    """Request DTO for booking a visit."""

    doctor_id: str
    date: date
    patient: PatientInfo
    user_id: Optional[str] = None
    clinic_name: Optional[str] = None
    time_slot: Optional[str] = None


@dataclass
class BookVisitResponse:
    visit: Visit
    appointment: Appointment
    queue_position: int


@dataclass
class SetVisitStatusRequest:
    visit_id: str
    new_status: VisitStatus
    actor: Actor
    expected_version: Optional[int] = None


@dataclass
class SetVisitStatusResponse:
    visit: Visit
    old_status: VisitStatus
    queue_position: Optional[int]
    doctor: Optional[Doctor] = None  # Present when the change cascaded to the doctor
    activity_entry_id: Optional[str] = None


@dataclass
class CancelAppointmentRequest:
    appointment_id: str
    actor: Optional[Actor] = None
    expected_version: Optional[int] = None


@dataclass
class CancelAppointmentResponse:
    appointment: Appointment
    changed: bool  # False when the appointment was already cancelled


@dataclass
class SetDoctorStatusRequest:
    doctor_id: str
    new_status: DoctorStatus
    actor: Actor
    on_date: Optional[date] = None


@dataclass
class SetDoctorStatusResponse:
    doctor: Doctor
    old_status: DoctorStatus
    notify_patient_ids: List[str] = field(default_factory=list)
    activity_entry_id: Optional[str] = None


@dataclass
class QueueView:
    doctor: Doctor
    date: date
    entries: List[RankedVisit]
    summary: Dict[str, int]


@dataclass
class AppointmentView:
    """Appointment plus display snapshot read at request time."""

    appointment: Appointment
    current_token: str
    doctor_status: DoctorStatus
    queue_position: Optional[int]
