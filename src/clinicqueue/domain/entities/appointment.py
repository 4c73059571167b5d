"""Appointment domain entity: the patient-facing booking.

Booking status runs upcoming -> completed | cancelled and is linked to its
visit record by ``visit_id``. Doctor/clinic display names are copied at
booking time.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..enums.statuses import AppointmentStatus, CancellationReason
from ..errors import InvalidTransitionError


@dataclass
class Appointment:
    """Appointment domain entity."""

    appointment_id: str
    user_id: str
    clinic_id: str
    clinic_name: str
    doctor_id: str
    doctor_name: str
    date: date
    token: str
    visit_id: str
    time_slot: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.UPCOMING
    cancellation_reason: Optional[CancellationReason] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    cancelled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    version: int = 0

    def __post_init__(self) -> None:
        self.status = AppointmentStatus(self.status)
        if self.cancellation_reason is not None:
            self.cancellation_reason = CancellationReason(self.cancellation_reason)

    @property
    def is_cancelled(self) -> bool:
        return self.status == AppointmentStatus.CANCELLED

    def cancel(
        self,
        reason: CancellationReason = CancellationReason.PATIENT_CANCELLED,
        at: Optional[datetime] = None,
    ) -> bool:
        """Cancel the booking.

        Returns False when it was already cancelled (no-op), True otherwise.
        """
        if self.status == AppointmentStatus.CANCELLED:
            return False
        if self.status != AppointmentStatus.UPCOMING:
            raise InvalidTransitionError(
                "appointment",
                self.appointment_id,
                self.status.value,
                AppointmentStatus.CANCELLED.value,
            )
        at = at or datetime.utcnow()
        self.status = AppointmentStatus.CANCELLED
        self.cancellation_reason = CancellationReason(reason)
        self.cancelled_at = at
        self.updated_at = at
        return True

    def complete(self, at: Optional[datetime] = None) -> None:
        if self.status != AppointmentStatus.UPCOMING:
            raise InvalidTransitionError(
                "appointment",
                self.appointment_id,
                self.status.value,
                AppointmentStatus.COMPLETED.value,
            )
        at = at or datetime.utcnow()
        self.status = AppointmentStatus.COMPLETED
        self.completed_at = at
        self.updated_at = at
