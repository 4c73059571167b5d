"""List Queue use case: derived positions and counts for a doctor's day."""

from datetime import date
from typing import Dict

from clinicqueue.application.dto.queue_dto import QueueView
from clinicqueue.application.ports.repositories.doctor_repo import DoctorRepository
from clinicqueue.application.ports.repositories.visit_repo import VisitRepository
from clinicqueue.application.scope_locks import ScopeLockRegistry
from clinicqueue.domain.errors import DoctorNotFoundError
from clinicqueue.domain.services.queue_ordering import rank_queue, summarize
from clinicqueue.domain.value_objects.queue_scope import QueueScope


class ListQueueUseCase:
    """Reads the queue under the scope lock so positions never reflect a half-applied write."""

    def __init__(
        self,
        doctor_repository: DoctorRepository,
        visit_repository: VisitRepository,
        locks: ScopeLockRegistry,
    ):
        self._doctor_repository = doctor_repository
        self._visit_repository = visit_repository
        self._locks = locks

    async def execute(self, doctor_id: str, on_date: date, include_inactive: bool = False) -> QueueView:
        doctor = await self._doctor_repository.find_by_id(doctor_id)
        if not doctor:
            raise DoctorNotFoundError(doctor_id)

        async with self._locks.hold(QueueScope(doctor.clinic_id, doctor.doctor_id, on_date)):
            visits = await self._visit_repository.find_by_doctor_and_date(doctor_id, on_date)

        return QueueView(
            doctor=doctor,
            date=on_date,
            entries=rank_queue(visits, include_inactive=include_inactive),
            summary=summarize(visits),
        )

    async def summary(self, doctor_id: str, on_date: date) -> Dict[str, int]:
        """Status counts only."""
        view = await self.execute(doctor_id, on_date)
        return view.summary
