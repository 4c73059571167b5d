"""
In-memory implementations of the repository ports.

Used for development, tests and the default ``MONGO_BACKEND=memory`` setup.
Records are deep-copied on the way in and out so callers never hold a live
reference to stored state, matching what a database round-trip gives.
"""

import asyncio
import copy
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional, Tuple

from ....application.ports.repositories.activity_log_repo import ActivityLogRepository
from ....application.ports.repositories.appointment_repo import AppointmentRepository
from ....application.ports.repositories.doctor_repo import DoctorRepository
from ....application.ports.repositories.token_counter_repo import TokenCounterRepository
from ....application.ports.repositories.visit_repo import VisitRepository
from ....domain.entities.activity_log import ActivityLogEntry
from ....domain.entities.appointment import Appointment
from ....domain.entities.doctor import Doctor
from ....domain.entities.visit import Visit
from ....domain.errors import DuplicateDoctorError, StaleReadError


class InMemoryDoctorRepository(DoctorRepository):
    """Doctors keyed by ID, plus a per-clinic index in registration order."""

    def __init__(self) -> None:
        self._doctors: Dict[str, Doctor] = {}
        self._by_clinic: Dict[str, List[str]] = defaultdict(list)

    async def add(self, doctor: Doctor) -> Doctor:
        if doctor.doctor_id in self._doctors:
            raise DuplicateDoctorError(doctor.doctor_id)
        self._doctors[doctor.doctor_id] = copy.deepcopy(doctor)
        self._by_clinic[doctor.clinic_id].append(doctor.doctor_id)
        return doctor

    async def save(self, doctor: Doctor) -> Doctor:
        stored = self._doctors.get(doctor.doctor_id)
        if stored is None:
            raise ValueError(f"Doctor {doctor.doctor_id} does not exist")
        if stored.version != doctor.version:
            raise StaleReadError("doctor", doctor.doctor_id, doctor.version, stored.version)
        doctor.version += 1
        self._doctors[doctor.doctor_id] = copy.deepcopy(doctor)
        return doctor

    async def find_by_id(self, doctor_id: str) -> Optional[Doctor]:
        doctor = self._doctors.get(doctor_id)
        return copy.deepcopy(doctor) if doctor else None

    async def find_by_clinic(self, clinic_id: str) -> List[Doctor]:
        return [copy.deepcopy(self._doctors[i]) for i in self._by_clinic.get(clinic_id, [])]


class InMemoryVisitRepository(VisitRepository):
    """Visit records with a (doctor, date) index."""

    def __init__(self) -> None:
        self._visits: Dict[str, Visit] = {}
        self._by_scope: Dict[Tuple[str, date], List[str]] = defaultdict(list)

    async def add(self, visit: Visit) -> Visit:
        if visit.visit_id in self._visits:
            raise ValueError(f"Visit {visit.visit_id} already exists")
        self._visits[visit.visit_id] = copy.deepcopy(visit)
        self._by_scope[(visit.doctor_id, visit.date)].append(visit.visit_id)
        return visit

    async def save(self, visit: Visit) -> Visit:
        stored = self._visits.get(visit.visit_id)
        if stored is None:
            raise ValueError(f"Visit {visit.visit_id} does not exist")
        if stored.version != visit.version:
            raise StaleReadError("visit", visit.visit_id, visit.version, stored.version)
        visit.version += 1
        self._visits[visit.visit_id] = copy.deepcopy(visit)
        return visit

    async def find_by_id(self, visit_id: str) -> Optional[Visit]:
        visit = self._visits.get(visit_id)
        return copy.deepcopy(visit) if visit else None

    async def find_by_doctor_and_date(self, doctor_id: str, on_date: date) -> List[Visit]:
        visits = [self._visits[i] for i in self._by_scope.get((doctor_id, on_date), [])]
        return [copy.deepcopy(v) for v in sorted(visits, key=lambda v: v.queue_position)]


class InMemoryAppointmentRepository(AppointmentRepository):
    """Appointments with a per-user index."""

    def __init__(self) -> None:
        self._appointments: Dict[str, Appointment] = {}
        self._by_user: Dict[str, List[str]] = defaultdict(list)

    async def add(self, appointment: Appointment) -> Appointment:
        if appointment.appointment_id in self._appointments:
            raise ValueError(f"Appointment {appointment.appointment_id} already exists")
        self._appointments[appointment.appointment_id] = copy.deepcopy(appointment)
        self._by_user[appointment.user_id].append(appointment.appointment_id)
        return appointment

    async def save(self, appointment: Appointment) -> Appointment:
        stored = self._appointments.get(appointment.appointment_id)
        if stored is None:
            raise ValueError(f"Appointment {appointment.appointment_id} does not exist")
        if stored.version != appointment.version:
            raise StaleReadError(
                "appointment", appointment.appointment_id, appointment.version, stored.version
            )
        appointment.version += 1
        self._appointments[appointment.appointment_id] = copy.deepcopy(appointment)
        return appointment

    async def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        appointment = self._appointments.get(appointment_id)
        return copy.deepcopy(appointment) if appointment else None

    async def find_by_user(self, user_id: str) -> List[Appointment]:
        appointments = [self._appointments[i] for i in self._by_user.get(user_id, [])]
        return [
            copy.deepcopy(a)
            for a in sorted(appointments, key=lambda a: (a.date, a.created_at))
        ]


class InMemoryActivityLogRepository(ActivityLogRepository):
    """Append-only list of entries; reads go newest first."""

    def __init__(self) -> None:
        self._entries: List[ActivityLogEntry] = []
        self._ids: Dict[str, int] = {}

    async def append(self, entry: ActivityLogEntry) -> bool:
        if entry.entry_id in self._ids:
            return False
        self._ids[entry.entry_id] = len(self._entries)
        self._entries.append(entry)
        return True

    async def find_by_id(self, entry_id: str) -> Optional[ActivityLogEntry]:
        index = self._ids.get(entry_id)
        return self._entries[index] if index is not None else None

    async def list_by_clinic(self, clinic_id: str, limit: Optional[int] = None) -> List[ActivityLogEntry]:
        indexed = [(i, e) for i, e in enumerate(self._entries) if e.clinic_id == clinic_id]
        indexed.sort(key=lambda pair: (pair[1].timestamp, pair[0]), reverse=True)
        results = [e for _, e in indexed]
        return results[:limit] if limit is not None else results


class InMemoryTokenCounterRepository(TokenCounterRepository):
    """Counters guarded by one lock so increments never interleave."""

    def __init__(self) -> None:
        self._counters: Dict[str, int] = defaultdict(int)
        self._lock = asyncio.Lock()

    async def increment(self, scope_key: str) -> int:
        async with self._lock:
            self._counters[scope_key] += 1
            return self._counters[scope_key]

    async def current(self, scope_key: str) -> int:
        return self._counters.get(scope_key, 0)
