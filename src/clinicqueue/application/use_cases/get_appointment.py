"""Appointment read use cases for the patient-facing side."""

from typing import List

from clinicqueue.application.dto.queue_dto import AppointmentView
from clinicqueue.application.ports.repositories.appointment_repo import AppointmentRepository
from clinicqueue.application.ports.repositories.doctor_repo import DoctorRepository
from clinicqueue.application.ports.repositories.visit_repo import VisitRepository
from clinicqueue.domain.entities.appointment import Appointment
from clinicqueue.domain.enums.statuses import DoctorStatus
from clinicqueue.domain.errors import AppointmentNotFoundError
from clinicqueue.domain.services.queue_ordering import position_of


class GetAppointmentUseCase:
    """Returns an appointment together with a live snapshot of its doctor and queue.

    The snapshot (current token, doctor status, queue position) is read at
    request time and never stored on the appointment.
    """

    def __init__(
        self,
        appointment_repository: AppointmentRepository,
        doctor_repository: DoctorRepository,
        visit_repository: VisitRepository,
    ):
        self._appointment_repository = appointment_repository
        self._doctor_repository = doctor_repository
        self._visit_repository = visit_repository

    async def execute(self, appointment_id: str) -> AppointmentView:
        appointment = await self._appointment_repository.find_by_id(appointment_id)
        if not appointment:
            raise AppointmentNotFoundError(appointment_id)
        return await self.snapshot(appointment)

    async def snapshot(self, appointment: Appointment) -> AppointmentView:
        doctor = await self._doctor_repository.find_by_id(appointment.doctor_id)
        visits = await self._visit_repository.find_by_doctor_and_date(
            appointment.doctor_id, appointment.date
        )
        return AppointmentView(
            appointment=appointment,
            current_token=doctor.current_token if doctor else "",
            doctor_status=doctor.status if doctor else DoctorStatus.NOT_ARRIVED,
            queue_position=position_of(appointment.visit_id, visits),
        )


class ListUserAppointmentsUseCase:
    """A user's bookings ordered by date."""

    def __init__(self, appointment_repository: AppointmentRepository, snapshots: GetAppointmentUseCase):
        self._appointment_repository = appointment_repository
        self._snapshots = snapshots

    async def execute(self, user_id: str) -> List[AppointmentView]:
        appointments = await self._appointment_repository.find_by_user(user_id)
        return [await self._snapshots.snapshot(a) for a in appointments]
