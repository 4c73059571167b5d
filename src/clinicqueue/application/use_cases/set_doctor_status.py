"""Set Doctor Status use case: availability changes plus delay notices."""

import logging
from typing import List, Optional

from clinicqueue.application.doctor_updates import update_doctor
from clinicqueue.application.dto.queue_dto import SetDoctorStatusRequest, SetDoctorStatusResponse
from clinicqueue.application.notice_dispatch import build_notices, dispatch_notices
from clinicqueue.application.ports.repositories.doctor_repo import DoctorRepository
from clinicqueue.application.ports.repositories.visit_repo import VisitRepository
from clinicqueue.application.ports.services.notification_service import NotificationService
from clinicqueue.application.scope_locks import ScopeLockRegistry
from clinicqueue.application.use_cases.record_activity import ActivityLogRecorder
from clinicqueue.core.utils.datetime_utils import clinic_today
from clinicqueue.domain.entities.activity_log import ActivityLogEntry
from clinicqueue.domain.entities.visit import Visit
from clinicqueue.domain.enums.statuses import ActivityAction, ActivityTargetType, DoctorStatus
from clinicqueue.domain.errors import DoctorNotFoundError
from clinicqueue.domain.events.queue_events import DoctorArrivalNotice, DoctorDelayNotice
from clinicqueue.domain.services.queue_ordering import pending_visits
from clinicqueue.domain.value_objects.queue_scope import QueueScope

logger = logging.getLogger(__name__)


class SetDoctorStatusUseCase:
    """Use case for changing a doctor's availability.

    Any status may follow any other. Moving a doctor back to ``not_arrived``
    while patients are still waiting produces a notify list, and a delay
    notice per patient is handed to the notification service once the
    status change is stored. Moving from ``not_arrived`` to ``available``
    tells every patient still waiting that day that the doctor has arrived.
    """

    def __init__(
        self,
        doctor_repository: DoctorRepository,
        visit_repository: VisitRepository,
        recorder: ActivityLogRecorder,
        notification_service: NotificationService,
        locks: ScopeLockRegistry,
        timezone: Optional[str] = None,
    ):
        self._doctor_repository = doctor_repository
        self._visit_repository = visit_repository
        self._recorder = recorder
        self._notification_service = notification_service
        self._locks = locks
        self._timezone = timezone

    async def execute(self, request: SetDoctorStatusRequest) -> SetDoctorStatusResponse:
        new_status = DoctorStatus(request.new_status)
        on_date = request.on_date or clinic_today(self._timezone)

        doctor = await self._doctor_repository.find_by_id(request.doctor_id)
        if not doctor:
            raise DoctorNotFoundError(request.doctor_id)

        waiting: List[Visit] = []
        arrival: List[Visit] = []
        async with self._locks.hold(QueueScope(doctor.clinic_id, doctor.doctor_id, on_date)):
            doctor, old_status = await update_doctor(
                self._doctor_repository,
                self._locks,
                doctor.clinic_id,
                doctor.doctor_id,
                lambda d: d.set_status(new_status),
            )

            arrived = old_status == DoctorStatus.NOT_ARRIVED and new_status == DoctorStatus.AVAILABLE
            if new_status == DoctorStatus.NOT_ARRIVED or arrived:
                visits = await self._visit_repository.find_by_doctor_and_date(
                    doctor.doctor_id, on_date
                )
                if arrived:
                    arrival = pending_visits(visits)
                else:
                    waiting = pending_visits(visits)

            entry_id = await self._recorder.record(
                ActivityLogEntry.status_change(
                    actor=request.actor,
                    action=ActivityAction.DOCTOR_STATUS_CHANGE,
                    target_type=ActivityTargetType.DOCTOR,
                    target_id=doctor.doctor_id,
                    target_name=doctor.name,
                    clinic_id=doctor.clinic_id,
                    old_value=old_status.value,
                    new_value=new_status.value,
                )
            )

        logger.info(
            f"Doctor {doctor.doctor_id} {old_status.value} -> {new_status.value} "
            f"by {request.actor.handler_id}; {len(waiting)} delay, {len(arrival)} arrival notice(s)"
        )

        await dispatch_notices(
            self._notification_service.send_delay_notice,
            build_notices(DoctorDelayNotice, doctor, waiting),
        )
        await dispatch_notices(
            self._notification_service.send_doctor_arrival,
            build_notices(DoctorArrivalNotice, doctor, arrival, current_token=doctor.current_token),
        )

        return SetDoctorStatusResponse(
            doctor=doctor,
            old_status=old_status,
            notify_patient_ids=[v.visit_id for v in waiting],
            activity_entry_id=entry_id,
        )

