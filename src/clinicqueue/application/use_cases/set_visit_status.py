"""Set Visit Status use case: staff-driven progress of a patient through the clinic."""

import logging
from datetime import datetime
from typing import Optional

from clinicqueue.application.dto.queue_dto import SetVisitStatusRequest, SetVisitStatusResponse
from clinicqueue.application.doctor_updates import update_doctor
from clinicqueue.application.notice_dispatch import build_notices, dispatch_notices
from clinicqueue.application.ports.repositories.appointment_repo import AppointmentRepository
from clinicqueue.application.ports.repositories.doctor_repo import DoctorRepository
from clinicqueue.application.ports.repositories.visit_repo import VisitRepository
from clinicqueue.application.ports.services.notification_service import NotificationService
from clinicqueue.application.scope_locks import ScopeLockRegistry
from clinicqueue.application.use_cases.record_activity import ActivityLogRecorder
from clinicqueue.domain.entities.activity_log import ActivityLogEntry
from clinicqueue.domain.entities.appointment import Appointment
from clinicqueue.domain.entities.doctor import Doctor
from clinicqueue.domain.entities.visit import Visit
from clinicqueue.domain.enums.statuses import (
    ActivityAction,
    ActivityTargetType,
    CancellationReason,
    VisitStatus,
)
from clinicqueue.domain.errors import StaleReadError, VisitNotFoundError
from clinicqueue.domain.events.queue_events import NextInQueueNotice
from clinicqueue.domain.services.queue_ordering import next_pending_visit, position_of

logger = logging.getLogger(__name__)


class SetVisitStatusUseCase:
    """Applies one visit transition and its cascades.

    Cascades: with_doctor moves the doctor to with_patient and advances the
    displayed tokens; completed bumps the doctor's completed count and
    completes the appointment; no_show cancels the appointment. Exactly one
    activity entry is written per successful call. When a consultation
    starts, the patient who is now next in line gets a notice.
    """

    def __init__(
        self,
        visit_repository: VisitRepository,
        doctor_repository: DoctorRepository,
        appointment_repository: AppointmentRepository,
        recorder: ActivityLogRecorder,
        notification_service: NotificationService,
        locks: ScopeLockRegistry,
    ):
        self._visit_repository = visit_repository
        self._doctor_repository = doctor_repository
        self._appointment_repository = appointment_repository
        self._recorder = recorder
        self._notification_service = notification_service
        self._locks = locks

    async def execute(self, request: SetVisitStatusRequest) -> SetVisitStatusResponse:
        new_status = VisitStatus(request.new_status)

        visit = await self._visit_repository.find_by_id(request.visit_id)
        if not visit:
            raise VisitNotFoundError(request.visit_id)

        async with self._locks.hold(visit.scope):
            # Re-read under the lock so the transition is checked against fresh state
            visit = await self._visit_repository.find_by_id(request.visit_id)
            if request.expected_version is not None and request.expected_version != visit.version:
                raise StaleReadError("visit", visit.visit_id, request.expected_version, visit.version)

            now = datetime.utcnow()
            old_status = visit.transition_to(new_status, at=now)

            scope_visits = await self._visit_repository.find_by_doctor_and_date(
                visit.doctor_id, visit.date
            )
            scope_visits = [v for v in scope_visits if v.visit_id != visit.visit_id] + [visit]

            appointment = await self._load_appointment(visit.appointment_id)
            if appointment is not None:
                self._cascade_to_appointment(appointment, new_status, now)

            await self._visit_repository.save(visit)
            if appointment is not None:
                await self._appointment_repository.save(appointment)

            doctor: Optional[Doctor] = None
            next_visit: Optional[Visit] = None
            if new_status == VisitStatus.WITH_DOCTOR:
                next_visit = next_pending_visit(scope_visits, visit)
                next_token = next_visit.token if next_visit else None
                doctor, _ = await update_doctor(
                    self._doctor_repository,
                    self._locks,
                    visit.clinic_id,
                    visit.doctor_id,
                    lambda d: d.start_consultation(visit.token, next_token),
                )
            elif new_status == VisitStatus.COMPLETED:
                doctor, _ = await update_doctor(
                    self._doctor_repository,
                    self._locks,
                    visit.clinic_id,
                    visit.doctor_id,
                    lambda d: d.finish_consultation(),
                )

            entry_id = await self._recorder.record(
                ActivityLogEntry.status_change(
                    actor=request.actor,
                    action=ActivityAction.PATIENT_STATUS_CHANGE,
                    target_type=ActivityTargetType.PATIENT,
                    target_id=visit.visit_id,
                    target_name=f"{visit.patient.name} ({visit.token})",
                    clinic_id=visit.clinic_id,
                    old_value=old_status.value,
                    new_value=new_status.value,
                )
            )
            position = position_of(visit.visit_id, scope_visits)

        logger.info(
            f"Visit {visit.visit_id} {old_status.value} -> {new_status.value} "
            f"by {request.actor.handler_id}"
        )

        if doctor is not None and next_visit is not None:
            await dispatch_notices(
                self._notification_service.send_next_in_queue,
                build_notices(NextInQueueNotice, doctor, [next_visit], raised_at=now),
            )

        return SetVisitStatusResponse(
            visit=visit,
            old_status=old_status,
            queue_position=position,
            doctor=doctor,
            activity_entry_id=entry_id,
        )

    async def _load_appointment(self, appointment_id: Optional[str]) -> Optional[Appointment]:
        if not appointment_id:
            return None
        appointment = await self._appointment_repository.find_by_id(appointment_id)
        if appointment is None:
            logger.warning(f"Visit references missing appointment {appointment_id}")
        return appointment

    @staticmethod
    def _cascade_to_appointment(
        appointment: Appointment, new_status: VisitStatus, at: datetime
    ) -> None:
        # Both raise InvalidTransitionError unless the booking is still upcoming
        if new_status == VisitStatus.COMPLETED:
            appointment.complete(at=at)
        elif new_status == VisitStatus.NO_SHOW:
            appointment.cancel(CancellationReason.NO_SHOW, at=at)
