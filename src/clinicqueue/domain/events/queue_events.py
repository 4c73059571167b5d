"""Notification intents raised by queue state changes."""

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(frozen=True)
class PatientNotice:
    """Base for notices addressed to the patient behind one visit record."""

    visit_id: str
    appointment_id: str
    clinic_id: str
    doctor_id: str
    doctor_name: str
    patient_name: str
    patient_phone: str
    token: str
    date: date
    raised_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def message(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class DoctorDelayNotice(PatientNotice):
    """A waiting patient should be told their doctor has not arrived."""

    @property
    def message(self) -> str:
        return (
            f"{self.doctor_name} is delayed. Your token {self.token} is still "
            f"in the queue; you will be notified when they arrive."
        )


@dataclass(frozen=True)
class NextInQueueNotice(PatientNotice):
    """The patient is now first in line for the consultation room."""

    @property
    def message(self) -> str:
        return f"You're next! Please be ready to see {self.doctor_name}. Token: {self.token}"


@dataclass(frozen=True)
class DoctorArrivalNotice(PatientNotice):
    """The doctor has arrived; carries the token currently being served."""

    current_token: str = ""

    @property
    def message(self) -> str:
        return (
            f"{self.doctor_name} has arrived. Current token: {self.current_token}. "
            f"Your token: {self.token}"
        )
