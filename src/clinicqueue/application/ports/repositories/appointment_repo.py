"""
Appointment repository interface.
"""

from typing import List, Optional

from clinicqueue.domain.entities.appointment import Appointment


class AppointmentRepository:
    """Repository interface for managing appointments. Appointments are never deleted."""

    async def add(self, appointment: Appointment) -> Appointment:
        """Insert a new appointment."""
        raise NotImplementedError

    async def save(self, appointment: Appointment) -> Appointment:
        """Persist changes; version-checked like VisitRepository.save."""
        raise NotImplementedError

    async def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        """Find an appointment by ID."""
        raise NotImplementedError

    async def find_by_user(self, user_id: str) -> List[Appointment]:
        """All appointments booked by a user, ordered by date ascending."""
        raise NotImplementedError
