"""
MongoDB implementation of AppointmentRepository.
"""

import logging
from datetime import date
from typing import List, Optional

from clinicqueue.application.ports.repositories.appointment_repo import AppointmentRepository
from clinicqueue.domain.entities.appointment import Appointment
from clinicqueue.domain.enums.statuses import AppointmentStatus, CancellationReason
from clinicqueue.domain.errors import StaleReadError

from ..models.queue_m import AppointmentMongo

logger = logging.getLogger(__name__)


class MongoAppointmentRepository(AppointmentRepository):
    """MongoDB implementation of AppointmentRepository."""

    async def add(self, appointment: Appointment) -> Appointment:
        await self._domain_to_mongo(appointment).insert()
        return appointment

    async def save(self, appointment: Appointment) -> Appointment:
        payload = self._domain_to_mongo(appointment).model_dump(
            exclude={"id", "revision_id", "version"}
        )

        collection = AppointmentMongo.get_motor_collection()
        result = await collection.update_one(
            {"appointment_id": appointment.appointment_id, "version": appointment.version},
            {"$set": payload, "$inc": {"version": 1}},
        )
        if result.matched_count == 0:
            stored = await AppointmentMongo.find_one(
                AppointmentMongo.appointment_id == appointment.appointment_id
            )
            if stored is None:
                raise ValueError(f"Appointment {appointment.appointment_id} does not exist")
            logger.warning(
                f"Stale write rejected for appointment {appointment.appointment_id}"
            )
            raise StaleReadError(
                "appointment", appointment.appointment_id, appointment.version, stored.version
            )

        appointment.version += 1
        return appointment

    async def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        appointment_mongo = await AppointmentMongo.find_one(
            AppointmentMongo.appointment_id == appointment_id
        )
        if not appointment_mongo:
            return None
        return self._mongo_to_domain(appointment_mongo)

    async def find_by_user(self, user_id: str) -> List[Appointment]:
        appointments_mongo = await AppointmentMongo.find(
            AppointmentMongo.user_id == user_id
        ).sort([("service_date", 1), ("created_at", 1)]).to_list()
        return [self._mongo_to_domain(a) for a in appointments_mongo]

    @staticmethod
    def _domain_to_mongo(appointment: Appointment) -> AppointmentMongo:
        return AppointmentMongo(
            appointment_id=appointment.appointment_id,
            user_id=appointment.user_id,
            clinic_id=appointment.clinic_id,
            clinic_name=appointment.clinic_name,
            doctor_id=appointment.doctor_id,
            doctor_name=appointment.doctor_name,
            service_date=appointment.date.isoformat(),
            token=appointment.token,
            visit_id=appointment.visit_id,
            time_slot=appointment.time_slot,
            status=appointment.status.value,
            cancellation_reason=(
                appointment.cancellation_reason.value if appointment.cancellation_reason else None
            ),
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
            cancelled_at=appointment.cancelled_at,
            completed_at=appointment.completed_at,
            version=appointment.version,
        )

    @staticmethod
    def _mongo_to_domain(appointment_mongo: AppointmentMongo) -> Appointment:
        return Appointment(
            appointment_id=appointment_mongo.appointment_id,
            user_id=appointment_mongo.user_id,
            clinic_id=appointment_mongo.clinic_id,
            clinic_name=appointment_mongo.clinic_name,
            doctor_id=appointment_mongo.doctor_id,
            doctor_name=appointment_mongo.doctor_name,
            date=date.fromisoformat(appointment_mongo.service_date),
            token=appointment_mongo.token,
            visit_id=appointment_mongo.visit_id,
            time_slot=appointment_mongo.time_slot,
            status=AppointmentStatus(appointment_mongo.status),
            cancellation_reason=(
                CancellationReason(appointment_mongo.cancellation_reason)
                if appointment_mongo.cancellation_reason
                else None
            ),
            created_at=appointment_mongo.created_at,
            updated_at=appointment_mongo.updated_at,
            cancelled_at=appointment_mongo.cancelled_at,
            completed_at=appointment_mongo.completed_at,
            version=appointment_mongo.version,
        )
