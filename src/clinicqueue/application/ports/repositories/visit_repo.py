"""
Visit repository interface for managing patient visit records.
"""

from datetime import date
from typing import List, Optional

from clinicqueue.domain.entities.visit import Visit


class VisitRepository:
    """Repository interface for managing visit records."""

    async def add(self, visit: Visit) -> Visit:
        """Insert a new visit record."""
        raise NotImplementedError

    async def save(self, visit: Visit) -> Visit:
        """
        Persist changes to an existing visit.

        The stored version must equal ``visit.version``; on success the
        version is incremented on both the stored copy and ``visit``.
        Raises StaleReadError when the stored record has moved on.
        """
        raise NotImplementedError

    async def find_by_id(self, visit_id: str) -> Optional[Visit]:
        """Find a visit by ID."""
        raise NotImplementedError

    async def find_by_doctor_and_date(self, doctor_id: str, on_date: date) -> List[Visit]:
        """All visits (any status) for a doctor on a date, in booking order."""
        raise NotImplementedError
