"""
Utility functions for the clinic queue service.
"""

from .datetime_utils import (
    clinic_today,
    get_current_timestamp,
    parse_service_date,
)

__all__ = [
    "clinic_today",
    "get_current_timestamp",
    "parse_service_date",
]
