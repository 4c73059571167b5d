"""
Domain events package.
"""

from .queue_events import DoctorArrivalNotice, DoctorDelayNotice, NextInQueueNotice, PatientNotice

__all__ = [
    "PatientNotice",
    "DoctorDelayNotice",
    "NextInQueueNotice",
    "DoctorArrivalNotice",
]
