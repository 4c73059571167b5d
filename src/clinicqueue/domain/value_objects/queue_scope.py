"""
Queue scope value object: the (clinic, doctor, date) unit a queue is derived
and serialized over.
"""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class QueueScope:
    """Immutable queue scope."""

    clinic_id: str
    doctor_id: str
    date: date

    def __str__(self) -> str:
        return f"{self.clinic_id}/{self.doctor_id}/{self.date.isoformat()}"


@dataclass(frozen=True)
class Actor:
    """Who performed an action (clinic handler, admin or booking patient)."""

    handler_id: str
    handler_name: str
