"""
Token code value object for queue tokens.
Format: one uppercase letter followed by at least two digits (A001, S01).
"""

import re
from dataclasses import dataclass
from typing import Any, Optional

_TOKEN_PATTERN = re.compile(r"^([A-Z])(\d{2,})$")
_TITLE_PATTERN = re.compile(r"^dr\.?$", re.IGNORECASE)

SEED_SEQUENCE = 1
SEED_WIDTH = 2


@dataclass(frozen=True)
class TokenCode:
    """Immutable queue token value object."""

    value: str

    def __post_init__(self) -> None:
        """Validate token format."""
        if not self.value:
            raise ValueError("Token cannot be empty")

        if not isinstance(self.value, str):
            raise ValueError("Token must be a string")

        if not _TOKEN_PATTERN.match(self.value):
            raise ValueError(
                "Token must be one uppercase letter followed by at least two digits"
            )

    def __str__(self) -> str:
        """String representation."""
        return self.value

    def __eq__(self, other: Any) -> bool:
        """Equality comparison."""
        if not isinstance(other, TokenCode):
            return False
        return self.value == other.value

    def __hash__(self) -> int:
        """Hash for use in sets and dictionaries."""
        return hash(self.value)

    @property
    def prefix(self) -> str:
        return self.value[0]

    @property
    def sequence(self) -> int:
        return int(self.value[1:])

    @classmethod
    def build(cls, prefix: str, sequence: int, width: int = 3) -> "TokenCode":
        """Format a prefix and sequence number into a token code."""
        if sequence < 1:
            raise ValueError("Token sequence must be positive")
        return cls(f"{prefix.upper()}{str(sequence).zfill(max(width, SEED_WIDTH))}")

    @classmethod
    def seed_for(cls, doctor_name: str) -> "TokenCode":
        """Initial token shown for a doctor before anyone is served."""
        return cls.build(doctor_initial(doctor_name), SEED_SEQUENCE, SEED_WIDTH)

    @classmethod
    def from_string(cls, value: str) -> "TokenCode":
        """Create from string value."""
        return cls(value.strip().upper())


def doctor_initial(doctor_name: Optional[str]) -> str:
    """First letter of the doctor's surname, ignoring a leading "Dr." title.

    "Dr. Priya Sharma" -> "S", "Dr. Mehta" -> "M". Falls back to "D".
    """
    words = [w for w in (doctor_name or "").split() if w]
    if words and _TITLE_PATTERN.match(words[0]):
        words = words[1:]
    for word in reversed(words):
        for char in word:
            if char.isalpha() and char.isascii():
                return char.upper()
    return "D"
