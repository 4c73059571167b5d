"""Visit domain entity: a booked patient's intra-day progress through the clinic.

waiting -> arrived -> with_doctor -> completed, with no_show as a side exit
from waiting/arrived. missed is only entered when the linked booking is
cancelled. completed, missed and no_show are terminal.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, FrozenSet, Optional

from ..enums.statuses import ACTIVE_VISIT_STATUSES, VisitStatus
from ..errors import InvalidPatientDataError, InvalidTransitionError
from ..value_objects.queue_scope import QueueScope

ALLOWED_TRANSITIONS: Dict[VisitStatus, FrozenSet[VisitStatus]] = {
    VisitStatus.WAITING: frozenset({VisitStatus.ARRIVED, VisitStatus.NO_SHOW}),
    VisitStatus.ARRIVED: frozenset({VisitStatus.WITH_DOCTOR, VisitStatus.NO_SHOW}),
    VisitStatus.WITH_DOCTOR: frozenset({VisitStatus.COMPLETED}),
    VisitStatus.COMPLETED: frozenset(),
    VisitStatus.MISSED: frozenset(),
    VisitStatus.NO_SHOW: frozenset(),
}


@dataclass
class PatientInfo:
    """Patient details captured at booking."""

    name: str
    age: int
    phone: str
    reason: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name or len(self.name.strip()) < 2:
            raise InvalidPatientDataError("name", self.name, "must be at least 2 characters")
        self.name = self.name.strip()

        if len(self.name) > 80:
            raise InvalidPatientDataError("name", self.name[:50], "too long (max 80 characters)")

        if self.age is None or not 0 <= int(self.age) <= 150:
            raise InvalidPatientDataError("age", self.age, "must be between 0 and 150")

        digits = "".join(ch for ch in (self.phone or "") if ch.isdigit())
        if len(digits) < 8:
            raise InvalidPatientDataError("phone", self.phone, "must contain at least 8 digits")

        if self.reason is not None:
            self.reason = self.reason.strip() or None


@dataclass
class Visit:
    """Patient visit record."""

    visit_id: str
    token: str
    clinic_id: str
    doctor_id: str
    date: date
    queue_position: int  # Booking-order key; displayed position is derived
    patient: PatientInfo
    appointment_id: Optional[str] = None
    status: VisitStatus = VisitStatus.WAITING
    booked_at: datetime = field(default_factory=datetime.utcnow)
    arrived_at: Optional[datetime] = None
    consultation_started_at: Optional[datetime] = None
    consultation_ended_at: Optional[datetime] = None
    updated_at: datetime = field(default_factory=datetime.utcnow)
    version: int = 0

    def __post_init__(self) -> None:
        self.status = VisitStatus(self.status)
        if self.queue_position < 1:
            raise InvalidPatientDataError(
                "queue_position", self.queue_position, "must be a positive integer"
            )

    @property
    def scope(self) -> QueueScope:
        return QueueScope(self.clinic_id, self.doctor_id, self.date)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_VISIT_STATUSES

    def can_transition_to(self, new_status: VisitStatus) -> bool:
        return VisitStatus(new_status) in ALLOWED_TRANSITIONS[self.status]

    def transition_to(self, new_status: VisitStatus, at: Optional[datetime] = None) -> VisitStatus:
        """Apply a staff-driven status change. Returns the previous status."""
        new_status = VisitStatus(new_status)
        if not self.can_transition_to(new_status):
            raise InvalidTransitionError(
                "visit", self.visit_id, self.status.value, new_status.value
            )

        at = at or datetime.utcnow()
        old_status = self.status
        if new_status == VisitStatus.ARRIVED:
            self.arrived_at = at
        elif new_status == VisitStatus.WITH_DOCTOR:
            self.consultation_started_at = at
        elif new_status == VisitStatus.COMPLETED:
            self.consultation_ended_at = at

        self.status = new_status
        self.updated_at = at
        return old_status

    def mark_missed(self, at: Optional[datetime] = None) -> VisitStatus:
        """Booking was cancelled: drop out of the queue."""
        if self.status not in (VisitStatus.WAITING, VisitStatus.ARRIVED):
            raise InvalidTransitionError(
                "visit", self.visit_id, self.status.value, VisitStatus.MISSED.value
            )
        old_status = self.status
        self.status = VisitStatus.MISSED
        self.updated_at = at or datetime.utcnow()
        return old_status
