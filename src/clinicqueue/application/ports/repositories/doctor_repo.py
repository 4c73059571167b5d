"""
Doctor repository interface.
"""

from typing import List, Optional

from clinicqueue.domain.entities.doctor import Doctor


class DoctorRepository:
    """Repository interface for managing doctors."""

    async def add(self, doctor: Doctor) -> Doctor:
        """Insert a new doctor. Raises DuplicateDoctorError if the ID is taken."""
        raise NotImplementedError

    async def save(self, doctor: Doctor) -> Doctor:
        """Update a stored doctor. Raises StaleReadError if it changed since it was read."""
        raise NotImplementedError

    async def find_by_id(self, doctor_id: str) -> Optional[Doctor]:
        """Find a doctor by ID."""
        raise NotImplementedError

    async def find_by_clinic(self, clinic_id: str) -> List[Doctor]:
        """All doctors of a clinic, in registration order."""
        raise NotImplementedError
