"""Book Visit use case: token + queue slot + appointment for one patient."""

import logging

from clinicqueue.application.dto.queue_dto import BookVisitRequest, BookVisitResponse
from clinicqueue.application.ports.repositories.appointment_repo import AppointmentRepository
from clinicqueue.application.ports.repositories.doctor_repo import DoctorRepository
from clinicqueue.application.ports.repositories.visit_repo import VisitRepository
from clinicqueue.application.doctor_updates import update_doctor
from clinicqueue.application.scope_locks import ScopeLockRegistry
from clinicqueue.application.use_cases.allocate_token import TokenAllocator
from clinicqueue.domain.entities.appointment import Appointment
from clinicqueue.domain.entities.visit import Visit
from clinicqueue.domain.errors import CapacityExceededError, DoctorNotFoundError
from clinicqueue.domain.services.queue_ordering import active_visits, booked_count, next_queue_key
from clinicqueue.domain.value_objects.queue_scope import QueueScope
from clinicqueue.domain.value_objects.visit_id import AppointmentId, VisitId

logger = logging.getLogger(__name__)

GUEST_USER_ID = "walk-in"


class BookVisitUseCase:
    """Use case for booking a patient into a doctor's queue for a date."""

    def __init__(
        self,
        doctor_repository: DoctorRepository,
        visit_repository: VisitRepository,
        appointment_repository: AppointmentRepository,
        token_allocator: TokenAllocator,
        locks: ScopeLockRegistry,
    ):
        self._doctor_repository = doctor_repository
        self._visit_repository = visit_repository
        self._appointment_repository = appointment_repository
        self._token_allocator = token_allocator
        self._locks = locks

    async def execute(self, request: BookVisitRequest) -> BookVisitResponse:
        """Execute the booking.

        Capacity counts every booking for the day that the patient did not
        cancel, including completed and no-show records.
        """
        doctor = await self._doctor_repository.find_by_id(request.doctor_id)
        if not doctor:
            raise DoctorNotFoundError(request.doctor_id)

        scope = QueueScope(doctor.clinic_id, doctor.doctor_id, request.date)
        async with self._locks.hold(scope):
            visits = await self._visit_repository.find_by_doctor_and_date(
                doctor.doctor_id, request.date
            )

            if booked_count(visits) >= doctor.max_tokens_per_day:
                raise CapacityExceededError(
                    doctor.doctor_id, request.date.isoformat(), doctor.max_tokens_per_day
                )

            token = await self._token_allocator.allocate_for(doctor, request.date)

            visit_id = VisitId.generate(request.date).value
            appointment_id = AppointmentId.generate(request.date).value

            visit = Visit(
                visit_id=visit_id,
                token=token.value,
                clinic_id=doctor.clinic_id,
                doctor_id=doctor.doctor_id,
                date=request.date,
                queue_position=next_queue_key(visits),
                patient=request.patient,
                appointment_id=appointment_id,
            )
            appointment = Appointment(
                appointment_id=appointment_id,
                user_id=request.user_id or GUEST_USER_ID,
                clinic_id=doctor.clinic_id,
                clinic_name=request.clinic_name or doctor.clinic_id,
                doctor_id=doctor.doctor_id,
                doctor_name=doctor.name,
                date=request.date,
                token=token.value,
                visit_id=visit_id,
                time_slot=request.time_slot,
            )

            await self._visit_repository.add(visit)
            await self._appointment_repository.add(appointment)

            doctor, _ = await update_doctor(
                self._doctor_repository,
                self._locks,
                doctor.clinic_id,
                doctor.doctor_id,
                lambda d: d.register_booking(),
            )

            position = len(active_visits(visits)) + 1

        logger.info(
            f"Booked {visit.visit_id} token={visit.token} position={position} scope={scope}"
        )
        return BookVisitResponse(visit=visit, appointment=appointment, queue_position=position)
