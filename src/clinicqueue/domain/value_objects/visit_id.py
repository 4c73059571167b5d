"""
Record ID value objects for visits and appointments.
Format: {PREFIX}-YYYYMMDD-XXXXXXXX (8 lowercase hex chars)
"""

import re
import uuid
from dataclasses import dataclass
from datetime import date as date_type
from typing import Any, ClassVar, Optional


@dataclass(frozen=True)
class _DatedId:
    """Immutable dated identifier value object."""

    value: str

    PREFIX: ClassVar[str] = ""

    def __post_init__(self) -> None:
        """Validate ID format."""
        label = type(self).__name__
        if not self.value:
            raise ValueError(f"{label} cannot be empty")

        if not isinstance(self.value, str):
            raise ValueError(f"{label} must be a string")

        pattern = rf"^{self.PREFIX}-\d{{8}}-[0-9a-f]{{8}}$"
        if not re.match(pattern, self.value):
            raise ValueError(f"{label} must follow format: {self.PREFIX}-YYYYMMDD-XXXXXXXX")

    def __str__(self) -> str:
        """String representation."""
        return self.value

    def __eq__(self, other: Any) -> bool:
        """Equality comparison."""
        if type(other) is not type(self):
            return False
        return self.value == other.value

    def __hash__(self) -> int:
        """Hash for use in sets and dictionaries."""
        return hash(self.value)

    @classmethod
    def generate(cls, on_date: Optional[date_type] = None):
        """Generate a new ID for the given service date."""
        if on_date is None:
            on_date = date_type.today()

        date_str = on_date.strftime("%Y%m%d")
        return cls(f"{cls.PREFIX}-{date_str}-{uuid.uuid4().hex[:8]}")


@dataclass(frozen=True, eq=False)
class VisitId(_DatedId):
    """Visit record identifier."""

    PREFIX: ClassVar[str] = "VISIT"


@dataclass(frozen=True, eq=False)
class AppointmentId(_DatedId):
    """Appointment identifier."""

    PREFIX: ClassVar[str] = "APT"
