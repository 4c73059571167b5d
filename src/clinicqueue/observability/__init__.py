"""
Observability module: structured audit trail of staff actions.
"""

from .audit import audit_log_event

__all__ = [
    "audit_log_event",
]
