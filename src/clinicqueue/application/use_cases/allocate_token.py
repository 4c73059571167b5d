"""Token Allocator: sequential per-scope token codes backed by a persisted counter."""

import logging
from datetime import date
from typing import Optional

from clinicqueue.application.ports.repositories.doctor_repo import DoctorRepository
from clinicqueue.application.ports.repositories.token_counter_repo import TokenCounterRepository
from clinicqueue.core.config import QueueSettings
from clinicqueue.domain.entities.doctor import Doctor
from clinicqueue.domain.enums.statuses import TokenScope
from clinicqueue.domain.errors import DoctorNotFoundError
from clinicqueue.domain.value_objects.token_code import SEED_WIDTH, TokenCode, doctor_initial

logger = logging.getLogger(__name__)


class TokenAllocator:
    """Hands out ``prefix + zero-padded sequence`` tokens.

    In clinic scope every doctor of a clinic draws from one (clinic, date)
    sequence with the configured prefix (A001, A002, ...). In doctor scope
    each doctor has a (clinic, doctor, date) sequence prefixed with the
    surname initial (S01, S02, ...). Sequences only move forward, so a
    cancelled token leaves a gap and is never reissued.
    """

    def __init__(
        self,
        doctor_repository: DoctorRepository,
        counter_repository: TokenCounterRepository,
        settings: Optional[QueueSettings] = None,
    ):
        self._doctor_repository = doctor_repository
        self._counter_repository = counter_repository
        self._settings = settings or QueueSettings()

    @property
    def scope(self) -> TokenScope:
        return TokenScope(self._settings.token_scope)

    def scope_key(self, clinic_id: str, doctor_id: str, on_date: date) -> str:
        if self.scope == TokenScope.DOCTOR:
            return f"{clinic_id}:{doctor_id}:{on_date.isoformat()}"
        return f"{clinic_id}:{on_date.isoformat()}"

    def _format(self, doctor: Doctor, sequence: int) -> TokenCode:
        if self.scope == TokenScope.DOCTOR:
            return TokenCode.build(doctor_initial(doctor.name), sequence, SEED_WIDTH)
        return TokenCode.build(self._settings.token_prefix, sequence, self._settings.token_width)

    async def _load_doctor(self, clinic_id: str, doctor_id: str) -> Doctor:
        doctor = await self._doctor_repository.find_by_id(doctor_id)
        if not doctor or doctor.clinic_id != clinic_id:
            raise DoctorNotFoundError(doctor_id)
        return doctor

    async def allocate_for(self, doctor: Doctor, on_date: date) -> TokenCode:
        """Consume the next sequence number for an already loaded doctor."""
        key = self.scope_key(doctor.clinic_id, doctor.doctor_id, on_date)
        sequence = await self._counter_repository.increment(key)
        token = self._format(doctor, sequence)
        logger.info(f"Allocated token {token} for scope {key}")
        return token

    async def allocate(self, clinic_id: str, doctor_id: str, on_date: date) -> TokenCode:
        """Allocate the next token for a doctor's queue on a date."""
        doctor = await self._load_doctor(clinic_id, doctor_id)
        return await self.allocate_for(doctor, on_date)

    async def preview(
        self, clinic_id: str, doctor_id: str, on_date: date, slot_index: int = 1
    ) -> TokenCode:
        """Token the ``slot_index``-th next booking would receive; consumes nothing."""
        if slot_index < 1:
            raise ValueError("slot_index must be a positive integer")
        doctor = await self._load_doctor(clinic_id, doctor_id)
        key = self.scope_key(clinic_id, doctor_id, on_date)
        last = await self._counter_repository.current(key)
        return self._format(doctor, last + slot_index)
