"""Cancel Appointment use case (patient-initiated)."""

import logging
from datetime import datetime

from clinicqueue.application.dto.queue_dto import (
    CancelAppointmentRequest,
    CancelAppointmentResponse,
)
from clinicqueue.application.ports.repositories.appointment_repo import AppointmentRepository
from clinicqueue.application.ports.repositories.visit_repo import VisitRepository
from clinicqueue.application.scope_locks import ScopeLockRegistry
from clinicqueue.application.use_cases.record_activity import ActivityLogRecorder
from clinicqueue.domain.entities.activity_log import ActivityLogEntry
from clinicqueue.domain.enums.statuses import (
    ActivityAction,
    ActivityTargetType,
    AppointmentStatus,
    VisitStatus,
)
from clinicqueue.domain.errors import (
    AppointmentNotFoundError,
    InvalidTransitionError,
    StaleReadError,
)
from clinicqueue.domain.value_objects.queue_scope import Actor, QueueScope

logger = logging.getLogger(__name__)


class CancelAppointmentUseCase:
    """Cancels a booking and drops its visit record out of the live queue.

    The linked visit is forced to ``missed`` so positions behind it close up
    on the next read. Cancelling twice is a no-op.
    """

    def __init__(
        self,
        appointment_repository: AppointmentRepository,
        visit_repository: VisitRepository,
        recorder: ActivityLogRecorder,
        locks: ScopeLockRegistry,
    ):
        self._appointment_repository = appointment_repository
        self._visit_repository = visit_repository
        self._recorder = recorder
        self._locks = locks

    async def execute(self, request: CancelAppointmentRequest) -> CancelAppointmentResponse:
        appointment = await self._appointment_repository.find_by_id(request.appointment_id)
        if not appointment:
            raise AppointmentNotFoundError(request.appointment_id)

        scope = QueueScope(appointment.clinic_id, appointment.doctor_id, appointment.date)
        async with self._locks.hold(scope):
            appointment = await self._appointment_repository.find_by_id(request.appointment_id)
            if appointment.is_cancelled:
                logger.info(f"Appointment {appointment.appointment_id} already cancelled")
                return CancelAppointmentResponse(appointment=appointment, changed=False)

            if (
                request.expected_version is not None
                and request.expected_version != appointment.version
            ):
                raise StaleReadError(
                    "appointment",
                    appointment.appointment_id,
                    request.expected_version,
                    appointment.version,
                )

            visit = await self._visit_repository.find_by_id(appointment.visit_id)
            if visit is not None and visit.status == VisitStatus.WITH_DOCTOR:
                raise InvalidTransitionError(
                    "appointment",
                    appointment.appointment_id,
                    appointment.status.value,
                    AppointmentStatus.CANCELLED.value,
                )

            now = datetime.utcnow()
            old_status = appointment.status
            appointment.cancel(at=now)
            # The booking is written first: a stale appointment must leave the visit queued
            await self._appointment_repository.save(appointment)
            if visit is not None and visit.is_active:
                visit.mark_missed(at=now)
                await self._visit_repository.save(visit)

            actor = request.actor or Actor(handler_id=appointment.user_id, handler_name="Patient")
            patient_name = visit.patient.name if visit is not None else appointment.user_id
            await self._recorder.record(
                ActivityLogEntry.status_change(
                    actor=actor,
                    action=ActivityAction.PATIENT_STATUS_CHANGE,
                    target_type=ActivityTargetType.PATIENT,
                    target_id=appointment.visit_id,
                    target_name=f"{patient_name} ({appointment.token})",
                    clinic_id=appointment.clinic_id,
                    old_value=old_status.value,
                    new_value=AppointmentStatus.CANCELLED.value,
                )
            )

        logger.info(f"Cancelled appointment {appointment.appointment_id} token={appointment.token}")
        return CancelAppointmentResponse(appointment=appointment, changed=True)
