"""
Status and kind enums for doctors, visits, appointments and activity entries.
"""

from enum import Enum


class VisitStatus(str, Enum):
    """Intra-day status of a patient visit record."""

    WAITING = "waiting"
    ARRIVED = "arrived"
    WITH_DOCTOR = "with_doctor"
    COMPLETED = "completed"
    MISSED = "missed"        # Booking cancelled before consultation
    NO_SHOW = "no_show"


ACTIVE_VISIT_STATUSES = frozenset(
    {VisitStatus.WAITING, VisitStatus.ARRIVED, VisitStatus.WITH_DOCTOR}
)

# Patients still expecting to be seen (not yet in the consultation room)
PENDING_VISIT_STATUSES = frozenset({VisitStatus.WAITING, VisitStatus.ARRIVED})


class AppointmentStatus(str, Enum):
    """Booking-level status surfaced to the patient."""

    UPCOMING = "upcoming"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CancellationReason(str, Enum):
    PATIENT_CANCELLED = "patient_cancelled"
    NO_SHOW = "no_show"


class DoctorStatus(str, Enum):
    """Doctor availability."""

    NOT_ARRIVED = "not_arrived"
    AVAILABLE = "available"
    WITH_PATIENT = "with_patient"
    BREAK = "break"


class ActivityAction(str, Enum):
    PATIENT_STATUS_CHANGE = "patient_status_change"
    DOCTOR_STATUS_CHANGE = "doctor_status_change"
    HANDLER_LOGIN = "handler_login"
    HANDLER_LOGOUT = "handler_logout"


class ActivityTargetType(str, Enum):
    PATIENT = "patient"
    DOCTOR = "doctor"
    SYSTEM = "system"


class TokenScope(str, Enum):
    """Which records share one token sequence."""

    CLINIC = "clinic"    # One sequence per (clinic, date)
    DOCTOR = "doctor"    # One sequence per (clinic, doctor, date)
