"""
MongoDB implementation of DoctorRepository.
"""

import logging
from datetime import time
from typing import List, Optional

from pymongo.errors import DuplicateKeyError

from clinicqueue.application.ports.repositories.doctor_repo import DoctorRepository
from clinicqueue.domain.entities.doctor import Doctor
from clinicqueue.domain.enums.statuses import DoctorStatus
from clinicqueue.domain.errors import DuplicateDoctorError, StaleReadError

from ..models.doctor_m import DoctorMongo

logger = logging.getLogger(__name__)


class MongoDoctorRepository(DoctorRepository):
    """MongoDB implementation of DoctorRepository."""

    async def add(self, doctor: Doctor) -> Doctor:
        """Insert a new doctor document; the unique doctor_id index rejects duplicates."""
        try:
            await self._domain_to_mongo(doctor).insert()
        except DuplicateKeyError as e:
            raise DuplicateDoctorError(doctor.doctor_id) from e
        return doctor

    async def save(self, doctor: Doctor) -> Doctor:
        """Version-guarded update; the filter only matches the version we read."""
        payload = self._domain_to_mongo(doctor).model_dump(
            exclude={"id", "revision_id", "version", "created_at"}
        )

        collection = DoctorMongo.get_motor_collection()
        result = await collection.update_one(
            {"doctor_id": doctor.doctor_id, "version": doctor.version},
            {"$set": payload, "$inc": {"version": 1}},
        )
        if result.matched_count == 0:
            stored = await DoctorMongo.find_one(DoctorMongo.doctor_id == doctor.doctor_id)
            if stored is None:
                raise ValueError(f"Doctor {doctor.doctor_id} does not exist")
            logger.warning(
                f"Stale write rejected for doctor {doctor.doctor_id}: "
                f"expected v{doctor.version}, stored v{stored.version}"
            )
            raise StaleReadError("doctor", doctor.doctor_id, doctor.version, stored.version)

        doctor.version += 1
        return doctor

    async def find_by_id(self, doctor_id: str) -> Optional[Doctor]:
        doctor_mongo = await DoctorMongo.find_one(DoctorMongo.doctor_id == doctor_id)
        if not doctor_mongo:
            return None
        return self._mongo_to_domain(doctor_mongo)

    async def find_by_clinic(self, clinic_id: str) -> List[Doctor]:
        doctors_mongo = await DoctorMongo.find(
            DoctorMongo.clinic_id == clinic_id
        ).sort([("created_at", 1)]).to_list()
        return [self._mongo_to_domain(d) for d in doctors_mongo]

    @staticmethod
    def _domain_to_mongo(doctor: Doctor) -> DoctorMongo:
        return DoctorMongo(
            doctor_id=doctor.doctor_id,
            clinic_id=doctor.clinic_id,
            name=doctor.name,
            specialty=doctor.specialty,
            experience=doctor.experience,
            working_days=list(doctor.working_days),
            start_time=doctor.start_time.strftime("%H:%M"),
            end_time=doctor.end_time.strftime("%H:%M"),
            consultation_duration_minutes=doctor.consultation_duration_minutes,
            max_tokens_per_day=doctor.max_tokens_per_day,
            status=doctor.status.value,
            current_token=doctor.current_token,
            next_token=doctor.next_token,
            total_patients_today=doctor.total_patients_today,
            completed_today=doctor.completed_today,
            version=doctor.version,
            created_at=doctor.created_at,
            updated_at=doctor.updated_at,
        )

    @staticmethod
    def _mongo_to_domain(doctor_mongo: DoctorMongo) -> Doctor:
        return Doctor(
            doctor_id=doctor_mongo.doctor_id,
            clinic_id=doctor_mongo.clinic_id,
            name=doctor_mongo.name,
            specialty=doctor_mongo.specialty,
            experience=doctor_mongo.experience,
            working_days=list(doctor_mongo.working_days),
            start_time=time.fromisoformat(doctor_mongo.start_time),
            end_time=time.fromisoformat(doctor_mongo.end_time),
            consultation_duration_minutes=doctor_mongo.consultation_duration_minutes,
            max_tokens_per_day=doctor_mongo.max_tokens_per_day,
            status=DoctorStatus(doctor_mongo.status),
            current_token=doctor_mongo.current_token,
            next_token=doctor_mongo.next_token,
            total_patients_today=doctor_mongo.total_patients_today,
            completed_today=doctor_mongo.completed_today,
            version=doctor_mongo.version,
            created_at=doctor_mongo.created_at,
            updated_at=doctor_mongo.updated_at,
        )
