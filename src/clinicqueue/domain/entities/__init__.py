"""
Domain entities package.
"""

from .activity_log import ActivityLogEntry
from .appointment import Appointment
from .doctor import Doctor
from .visit import ALLOWED_TRANSITIONS, PatientInfo, Visit

__all__ = [
    "ALLOWED_TRANSITIONS",
    "ActivityLogEntry",
    "Appointment",
    "Doctor",
    "PatientInfo",
    "Visit",
]
