"""
Token counter repository interface: one monotonically increasing sequence per
allocation scope key.
"""


class TokenCounterRepository:
    """Repository interface for token sequences."""

    async def increment(self, scope_key: str) -> int:
        """Atomically advance the sequence and return the new value (first call returns 1)."""
        raise NotImplementedError

    async def current(self, scope_key: str) -> int:
        """Last value handed out for the scope, 0 when none."""
        raise NotImplementedError
