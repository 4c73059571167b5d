"""
Token allocation tests for clinic- and doctor-scoped sequences.
"""

import asyncio
from datetime import date

import pytest

from clinicqueue.application.use_cases.allocate_token import TokenAllocator
from clinicqueue.core.config import QueueSettings
from clinicqueue.domain.errors import DoctorNotFoundError

from factories import CLINIC_ID, SERVICE_DATE, make_doctor


@pytest.mark.asyncio
async def test_clinic_scope_is_shared_between_doctors(doctor_repo, allocator):
    await doctor_repo.add(make_doctor("doctor_1", "Dr. Priya Sharma"))
    await doctor_repo.add(make_doctor("doctor_2", "Dr. Anil Mehta"))

    first = await allocator.allocate(CLINIC_ID, "doctor_1", SERVICE_DATE)
    second = await allocator.allocate(CLINIC_ID, "doctor_2", SERVICE_DATE)
    third = await allocator.allocate(CLINIC_ID, "doctor_1", SERVICE_DATE)

    assert [first.value, second.value, third.value] == ["A001", "A002", "A003"]


@pytest.mark.asyncio
async def test_doctor_scope_uses_surname_initial(doctor_repo, counter_repo):
    allocator = TokenAllocator(doctor_repo, counter_repo, QueueSettings(token_scope="doctor"))
    await doctor_repo.add(make_doctor("doctor_1", "Dr. Priya Sharma"))
    await doctor_repo.add(make_doctor("doctor_2", "Dr. Anil Mehta"))

    tokens = [
        (await allocator.allocate(CLINIC_ID, "doctor_1", SERVICE_DATE)).value,
        (await allocator.allocate(CLINIC_ID, "doctor_1", SERVICE_DATE)).value,
        (await allocator.allocate(CLINIC_ID, "doctor_2", SERVICE_DATE)).value,
    ]

    assert tokens == ["S01", "S02", "M01"]


@pytest.mark.asyncio
async def test_sequences_restart_per_date(doctor, allocator):
    await allocator.allocate(CLINIC_ID, doctor.doctor_id, SERVICE_DATE)
    other_day = await allocator.allocate(CLINIC_ID, doctor.doctor_id, date(2024, 6, 2))
    assert other_day.value == "A001"


@pytest.mark.asyncio
async def test_preview_consumes_nothing(doctor, allocator):
    await allocator.allocate(CLINIC_ID, doctor.doctor_id, SERVICE_DATE)

    assert (await allocator.preview(CLINIC_ID, doctor.doctor_id, SERVICE_DATE)).value == "A002"
    assert (await allocator.preview(CLINIC_ID, doctor.doctor_id, SERVICE_DATE, slot_index=3)).value == "A004"
    assert (await allocator.allocate(CLINIC_ID, doctor.doctor_id, SERVICE_DATE)).value == "A002"


@pytest.mark.asyncio
async def test_preview_rejects_bad_slot(doctor, allocator):
    with pytest.raises(ValueError):
        await allocator.preview(CLINIC_ID, doctor.doctor_id, SERVICE_DATE, slot_index=0)


@pytest.mark.asyncio
async def test_unknown_doctor_or_wrong_clinic(doctor, allocator):
    with pytest.raises(DoctorNotFoundError):
        await allocator.allocate(CLINIC_ID, "missing", SERVICE_DATE)
    with pytest.raises(DoctorNotFoundError):
        await allocator.allocate("clinic_2", doctor.doctor_id, SERVICE_DATE)


@pytest.mark.asyncio
async def test_concurrent_allocations_are_unique(doctor, allocator):
    tokens = await asyncio.gather(
        *[allocator.allocate(CLINIC_ID, doctor.doctor_id, SERVICE_DATE) for _ in range(25)]
    )
    values = sorted(t.value for t in tokens)
    assert values == [f"A{n:03d}" for n in range(1, 26)]


def test_scope_keys(doctor_repo, counter_repo):
    clinic = TokenAllocator(doctor_repo, counter_repo, QueueSettings(token_scope="clinic"))
    per_doctor = TokenAllocator(doctor_repo, counter_repo, QueueSettings(token_scope="doctor"))
    assert clinic.scope_key(CLINIC_ID, "doctor_1", SERVICE_DATE) == "clinic_1:2024-06-01"
    assert per_doctor.scope_key(CLINIC_ID, "doctor_1", SERVICE_DATE) == "clinic_1:doctor_1:2024-06-01"
