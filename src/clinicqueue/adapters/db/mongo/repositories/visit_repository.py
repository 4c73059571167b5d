"""
MongoDB implementation of VisitRepository.
"""

import logging
from datetime import date
from typing import List, Optional

from clinicqueue.application.ports.repositories.visit_repo import VisitRepository
from clinicqueue.domain.entities.visit import PatientInfo, Visit
from clinicqueue.domain.enums.statuses import VisitStatus
from clinicqueue.domain.errors import StaleReadError

from ..models.queue_m import PatientInfoMongo, VisitMongo

logger = logging.getLogger(__name__)


class MongoVisitRepository(VisitRepository):
    """MongoDB implementation of VisitRepository."""

    async def add(self, visit: Visit) -> Visit:
        """Insert a new visit document."""
        await self._domain_to_mongo(visit).insert()
        return visit

    async def save(self, visit: Visit) -> Visit:
        """Version-guarded update; the filter only matches the version we read."""
        visit_mongo = self._domain_to_mongo(visit)
        payload = visit_mongo.model_dump(exclude={"id", "revision_id", "version"})

        collection = VisitMongo.get_motor_collection()
        result = await collection.update_one(
            {"visit_id": visit.visit_id, "version": visit.version},
            {"$set": payload, "$inc": {"version": 1}},
        )
        if result.matched_count == 0:
            stored = await VisitMongo.find_one(VisitMongo.visit_id == visit.visit_id)
            if stored is None:
                raise ValueError(f"Visit {visit.visit_id} does not exist")
            logger.warning(
                f"Stale write rejected for visit {visit.visit_id}: "
                f"expected v{visit.version}, stored v{stored.version}"
            )
            raise StaleReadError("visit", visit.visit_id, visit.version, stored.version)

        visit.version += 1
        return visit

    async def find_by_id(self, visit_id: str) -> Optional[Visit]:
        """Find a visit by ID."""
        visit_mongo = await VisitMongo.find_one(VisitMongo.visit_id == visit_id)
        if not visit_mongo:
            return None
        return self._mongo_to_domain(visit_mongo)

    async def find_by_doctor_and_date(self, doctor_id: str, on_date: date) -> List[Visit]:
        """All visits for a doctor on a date, in booking order."""
        visits_mongo = await VisitMongo.find(
            VisitMongo.doctor_id == doctor_id,
            VisitMongo.service_date == on_date.isoformat(),
        ).sort([("queue_position", 1)]).to_list()
        return [self._mongo_to_domain(v) for v in visits_mongo]

    @staticmethod
    def _domain_to_mongo(visit: Visit) -> VisitMongo:
        return VisitMongo(
            visit_id=visit.visit_id,
            token=visit.token,
            clinic_id=visit.clinic_id,
            doctor_id=visit.doctor_id,
            service_date=visit.date.isoformat(),
            queue_position=visit.queue_position,
            patient=PatientInfoMongo(
                name=visit.patient.name,
                age=visit.patient.age,
                phone=visit.patient.phone,
                reason=visit.patient.reason,
            ),
            appointment_id=visit.appointment_id,
            status=visit.status.value,
            booked_at=visit.booked_at,
            arrived_at=visit.arrived_at,
            consultation_started_at=visit.consultation_started_at,
            consultation_ended_at=visit.consultation_ended_at,
            updated_at=visit.updated_at,
            version=visit.version,
        )

    @staticmethod
    def _mongo_to_domain(visit_mongo: VisitMongo) -> Visit:
        return Visit(
            visit_id=visit_mongo.visit_id,
            token=visit_mongo.token,
            clinic_id=visit_mongo.clinic_id,
            doctor_id=visit_mongo.doctor_id,
            date=date.fromisoformat(visit_mongo.service_date),
            queue_position=visit_mongo.queue_position,
            patient=PatientInfo(
                name=visit_mongo.patient.name,
                age=visit_mongo.patient.age,
                phone=visit_mongo.patient.phone,
                reason=visit_mongo.patient.reason,
            ),
            appointment_id=visit_mongo.appointment_id,
            status=VisitStatus(visit_mongo.status),
            booked_at=visit_mongo.booked_at,
            arrived_at=visit_mongo.arrived_at,
            consultation_started_at=visit_mongo.consultation_started_at,
            consultation_ended_at=visit_mongo.consultation_ended_at,
            updated_at=visit_mongo.updated_at,
            version=visit_mongo.version,
        )
