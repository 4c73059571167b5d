"""
Activity log repository interface (append-only).
"""

from typing import List, Optional

from clinicqueue.domain.entities.activity_log import ActivityLogEntry


class ActivityLogRepository:
    """Append-only store for activity entries. No update or delete operations."""

    async def append(self, entry: ActivityLogEntry) -> bool:
        """
        Store a fully stamped entry.

        Returns False without writing when an entry with the same ID already
        exists, so retried writes are harmless.
        """
        raise NotImplementedError

    async def find_by_id(self, entry_id: str) -> Optional[ActivityLogEntry]:
        """Find an entry by ID."""
        raise NotImplementedError

    async def list_by_clinic(self, clinic_id: str, limit: Optional[int] = None) -> List[ActivityLogEntry]:
        """Entries for a clinic, most recent first; ``limit`` caps the result."""
        raise NotImplementedError
