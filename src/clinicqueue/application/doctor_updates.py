"""Serialized read-modify-write of a doctor record.

A doctor's counters and status are shared by every service date, so each
change re-reads the doctor under its per-doctor lock before saving.
"""

from typing import Callable, Tuple, TypeVar

from clinicqueue.application.ports.repositories.doctor_repo import DoctorRepository
from clinicqueue.application.scope_locks import ScopeLockRegistry
from clinicqueue.domain.entities.doctor import Doctor
from clinicqueue.domain.errors import DoctorNotFoundError

T = TypeVar("T")


async def update_doctor(
    doctor_repository: DoctorRepository,
    locks: ScopeLockRegistry,
    clinic_id: str,
    doctor_id: str,
    change: Callable[[Doctor], T],
) -> Tuple[Doctor, T]:
    """Apply ``change`` to a fresh copy of the doctor and save it.

    Returns the saved doctor and whatever ``change`` returned.
    """
    async with locks.hold_doctor(clinic_id, doctor_id):
        doctor = await doctor_repository.find_by_id(doctor_id)
        if not doctor:
            raise DoctorNotFoundError(doctor_id)
        result = change(doctor)
        await doctor_repository.save(doctor)
    return doctor, result
