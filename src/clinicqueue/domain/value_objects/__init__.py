"""
Value objects package for domain layer.
"""

from .idempotency_key import IdempotencyKey
from .queue_scope import Actor, QueueScope
from .token_code import TokenCode, doctor_initial
from .visit_id import AppointmentId, VisitId

__all__ = [
    "Actor",
    "AppointmentId",
    "IdempotencyKey",
    "QueueScope",
    "TokenCode",
    "VisitId",
    "doctor_initial",
]
