"""Register Doctor use case for clinic setup."""

import logging
import uuid
from typing import Optional

from clinicqueue.application.dto.queue_dto import RegisterDoctorRequest
from clinicqueue.application.ports.repositories.doctor_repo import DoctorRepository
from clinicqueue.core.config import QueueSettings
from clinicqueue.domain.entities.doctor import DEFAULT_WORKING_DAYS, Doctor
from clinicqueue.domain.enums.statuses import DoctorStatus

logger = logging.getLogger(__name__)


class RegisterDoctorUseCase:
    """Use case for adding a doctor to a clinic."""

    def __init__(self, doctor_repository: DoctorRepository, settings: Optional[QueueSettings] = None):
        self._doctor_repository = doctor_repository
        self._settings = settings or QueueSettings()

    async def execute(self, request: RegisterDoctorRequest) -> Doctor:
        """Validate the schedule, seed the tokens and store the doctor.

        A caller-supplied ``doctor_id`` that is already registered raises
        DuplicateDoctorError; an existing doctor is never replaced.
        """
        doctor_id = request.doctor_id or f"doctor_{request.clinic_id}_{uuid.uuid4().hex[:8]}"

        doctor = Doctor(
            doctor_id=doctor_id,
            clinic_id=request.clinic_id,
            name=request.name.strip(),
            specialty=request.specialty,
            experience=request.experience,
            working_days=list(request.working_days or DEFAULT_WORKING_DAYS),
            start_time=request.start_time,
            end_time=request.end_time,
            consultation_duration_minutes=request.consultation_duration_minutes,
            max_tokens_per_day=request.max_tokens_per_day or self._settings.default_max_tokens_per_day,
            status=DoctorStatus.NOT_ARRIVED,
        )

        await self._doctor_repository.add(doctor)
        logger.info(f"Registered doctor {doctor.doctor_id} ({doctor.name}) for clinic {doctor.clinic_id}")
        return doctor
