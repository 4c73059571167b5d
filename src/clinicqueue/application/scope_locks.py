"""Per-scope mutual exclusion for queue writes.

Each (clinic, doctor, date) scope gets its own asyncio.Lock so that reads that
derive queue positions never interleave with a booking or cancellation for
the same scope, while unrelated doctors proceed in parallel.

The doctor record itself spans every date, so changes to it are serialized
by a second, per-(clinic, doctor) lock. When both are needed the scope lock
is always taken first.

Locks live only while someone holds or waits on them.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Hashable, Tuple

from clinicqueue.domain.value_objects.queue_scope import QueueScope


class ScopeLockRegistry:
    """Process-local registry of one lock per queue scope or doctor."""

    def __init__(self) -> None:
        self._locks: Dict[Hashable, asyncio.Lock] = {}
        self._holders: Dict[Hashable, int] = {}

    @asynccontextmanager
    async def _hold_key(self, key: Hashable) -> AsyncIterator[None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._holders[key] = self._holders.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if self._holders[key] == 0:
                del self._holders[key]
                del self._locks[key]

    @asynccontextmanager
    async def hold(self, scope: QueueScope) -> AsyncIterator[None]:
        async with self._hold_key(scope):
            yield

    @asynccontextmanager
    async def hold_doctor(self, clinic_id: str, doctor_id: str) -> AsyncIterator[None]:
        key: Tuple[str, str, str] = ("doctor", clinic_id, doctor_id)
        async with self._hold_key(key):
            yield

    def __len__(self) -> int:
        return len(self._locks)
