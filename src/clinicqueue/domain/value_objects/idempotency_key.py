"""Idempotency Key value object used as the activity log entry ID.

Re-recording an entry with the same key is a no-op, so a caller may retry a
failed write safely.
"""

import uuid
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class IdempotencyKey:
    """Immutable idempotency key value object."""

    value: str

    def __post_init__(self) -> None:
        """Validate idempotency key format."""
        if not self.value:
            raise ValueError("Idempotency key cannot be empty")

        if not isinstance(self.value, str):
            raise ValueError("Idempotency key must be a string")

        if len(self.value) < 8:
            raise ValueError("Idempotency key must be at least 8 characters")

        if len(self.value) > 64:
            raise ValueError("Idempotency key must be at most 64 characters")

    def __str__(self) -> str:
        """String representation."""
        return self.value

    def __eq__(self, other: Any) -> bool:
        """Equality comparison."""
        if not isinstance(other, IdempotencyKey):
            return False
        return self.value == other.value

    def __hash__(self) -> int:
        """Hash for use in sets and dictionaries."""
        return hash(self.value)

    @classmethod
    def generate(cls) -> "IdempotencyKey":
        """Generate a new idempotency key using UUID4."""
        return cls(uuid.uuid4().hex)

    @classmethod
    def from_string(cls, value: str) -> "IdempotencyKey":
        """Create from string value."""
        return cls(value.strip())
