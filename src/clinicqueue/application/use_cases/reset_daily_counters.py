"""Reset Daily Counters use case: start-of-day housekeeping for a clinic.

Only ever run explicitly (scripts/reset_daily_counters.py); nothing in the
request path resets counters implicitly.
"""

import logging
from datetime import date
from typing import List

from clinicqueue.application.doctor_updates import update_doctor
from clinicqueue.application.ports.repositories.doctor_repo import DoctorRepository
from clinicqueue.application.ports.repositories.visit_repo import VisitRepository
from clinicqueue.application.scope_locks import ScopeLockRegistry
from clinicqueue.domain.entities.doctor import Doctor
from clinicqueue.domain.services.queue_ordering import booked_count
from clinicqueue.domain.value_objects.queue_scope import QueueScope

logger = logging.getLogger(__name__)


class ResetDailyCountersUseCase:
    """Zeroes completed counts, re-seeds tokens and recounts existing bookings."""

    def __init__(
        self,
        doctor_repository: DoctorRepository,
        visit_repository: VisitRepository,
        locks: ScopeLockRegistry,
    ):
        self._doctor_repository = doctor_repository
        self._visit_repository = visit_repository
        self._locks = locks

    async def execute(self, clinic_id: str, on_date: date) -> List[Doctor]:
        doctors = await self._doctor_repository.find_by_clinic(clinic_id)
        reset: List[Doctor] = []
        for doctor in doctors:
            async with self._locks.hold(QueueScope(clinic_id, doctor.doctor_id, on_date)):
                visits = await self._visit_repository.find_by_doctor_and_date(
                    doctor.doctor_id, on_date
                )
                booked = booked_count(visits)
                doctor, _ = await update_doctor(
                    self._doctor_repository,
                    self._locks,
                    clinic_id,
                    doctor.doctor_id,
                    lambda d: d.reset_day(booked),
                )
            reset.append(doctor)

        logger.info(f"Reset daily counters for {len(reset)} doctor(s) in clinic {clinic_id} on {on_date}")
        return reset
