"""
Date and time utility functions for the clinic queue service.
"""

from datetime import date, datetime, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def get_current_timestamp() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc)


def clinic_today(tz_name: Optional[str] = None) -> date:
    """Current service date in the clinic's timezone (UTC when unset)."""
    if not tz_name:
        return get_current_timestamp().date()
    try:
        tz = ZoneInfo(tz_name)
    except ZoneInfoNotFoundError:
        raise ValueError(f"Unknown timezone: {tz_name}")
    return datetime.now(tz).date()


def parse_service_date(value: Union[str, date, datetime]) -> date:
    """Parse a YYYY-MM-DD service date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError):
        raise ValueError("Invalid date format. Use YYYY-MM-DD")
