"""
Booking and queue listing tests.
"""

import asyncio

import pytest

from clinicqueue.application.dto.queue_dto import (
    CancelAppointmentRequest,
    RegisterDoctorRequest,
    SetVisitStatusRequest,
)
from clinicqueue.application.use_cases.get_appointment import (
    GetAppointmentUseCase,
    ListUserAppointmentsUseCase,
)
from clinicqueue.application.use_cases.register_doctor import RegisterDoctorUseCase
from clinicqueue.core.config import QueueSettings
from clinicqueue.domain.enums.statuses import AppointmentStatus, DoctorStatus, VisitStatus
from clinicqueue.domain.errors import (
    CapacityExceededError,
    DoctorNotFoundError,
    DuplicateDoctorError,
)

from factories import CLINIC_ID, SERVICE_DATE, booking, make_doctor


@pytest.mark.asyncio
async def test_booking_creates_visit_and_appointment(doctor, book_visit, doctor_repo, appointment_repo):
    result = await book_visit.execute(booking(user_id="user_7"))

    assert result.queue_position == 1
    assert result.visit.token == "A001"
    assert result.visit.status == VisitStatus.WAITING
    assert result.visit.appointment_id == result.appointment.appointment_id
    assert result.appointment.visit_id == result.visit.visit_id
    assert result.appointment.status == AppointmentStatus.UPCOMING
    assert result.appointment.user_id == "user_7"
    assert result.appointment.doctor_name == "Dr. Priya Sharma"
    assert result.appointment.clinic_name == CLINIC_ID

    stored = await appointment_repo.find_by_id(result.appointment.appointment_id)
    assert stored.token == "A001"
    assert (await doctor_repo.find_by_id(doctor.doctor_id)).total_patients_today == 1


@pytest.mark.asyncio
async def test_anonymous_booking_uses_walk_in_user(doctor, book_visit):
    result = await book_visit.execute(booking())
    assert result.appointment.user_id == "walk-in"


@pytest.mark.asyncio
async def test_positions_and_tokens_follow_booking_order(doctor, book_visit, list_queue):
    for name in ("Ravi Kumar", "Meena Iyer", "John Dsouza"):
        await book_visit.execute(booking(name=name))

    view = await list_queue.execute(doctor.doctor_id, SERVICE_DATE)

    assert [e.position for e in view.entries] == [1, 2, 3]
    assert [e.visit.token for e in view.entries] == ["A001", "A002", "A003"]
    assert view.summary["waiting"] == 3


@pytest.mark.asyncio
async def test_capacity_frees_only_patient_cancellations(
    doctor_repo, book_visit, cancel_appointment, set_visit_status, actor
):
    await doctor_repo.add(make_doctor(max_tokens_per_day=2))
    first = await book_visit.execute(booking())
    second = await book_visit.execute(booking(name="Meena Iyer"))

    with pytest.raises(CapacityExceededError):
        await book_visit.execute(booking(name="John Dsouza"))

    # A no-show still holds its token; a cancellation frees the slot
    await set_visit_status.execute(SetVisitStatusRequest(first.visit.visit_id, VisitStatus.NO_SHOW, actor))
    with pytest.raises(CapacityExceededError):
        await book_visit.execute(booking(name="John Dsouza"))

    await cancel_appointment.execute(CancelAppointmentRequest(second.appointment.appointment_id))
    third = await book_visit.execute(booking(name="John Dsouza"))
    assert third.visit.token == "A003"
    assert third.queue_position == 1


@pytest.mark.asyncio
async def test_concurrent_bookings_never_share_a_position(doctor, book_visit, list_queue):
    results = await asyncio.gather(
        *[book_visit.execute(booking(name=f"Patient {n:02d}")) for n in range(10)]
    )

    assert sorted(r.queue_position for r in results) == list(range(1, 11))
    assert len({r.visit.token for r in results}) == 10
    view = await list_queue.execute(doctor.doctor_id, SERVICE_DATE)
    assert [e.position for e in view.entries] == list(range(1, 11))


@pytest.mark.asyncio
async def test_booking_unknown_doctor(book_visit):
    with pytest.raises(DoctorNotFoundError):
        await book_visit.execute(booking(doctor_id="missing"))


@pytest.mark.asyncio
async def test_register_doctor_applies_defaults(doctor_repo):
    use_case = RegisterDoctorUseCase(doctor_repo, QueueSettings(default_max_tokens_per_day=12))

    doctor = await use_case.execute(
        RegisterDoctorRequest(clinic_id=CLINIC_ID, name="  Dr. Anil Mehta ", specialty="ENT")
    )

    assert doctor.doctor_id.startswith("doctor_clinic_1_")
    assert doctor.name == "Dr. Anil Mehta"
    assert doctor.max_tokens_per_day == 12
    assert doctor.status == DoctorStatus.NOT_ARRIVED
    assert doctor.current_token == "M01"
    assert [d.doctor_id for d in await doctor_repo.find_by_clinic(CLINIC_ID)] == [doctor.doctor_id]


@pytest.mark.asyncio
async def test_appointment_snapshot_tracks_live_state(
    doctor, book_visit, doctor_repo, visit_repo, appointment_repo
):
    first = await book_visit.execute(booking(user_id="user_7"))
    second = await book_visit.execute(booking(name="Meena Iyer", user_id="user_7"))
    snapshots = GetAppointmentUseCase(appointment_repo, doctor_repo, visit_repo)

    view = await snapshots.execute(second.appointment.appointment_id)
    assert view.queue_position == 2
    assert view.current_token == "S01"
    assert view.doctor_status == DoctorStatus.NOT_ARRIVED

    views = await ListUserAppointmentsUseCase(appointment_repo, snapshots).execute("user_7")
    assert [v.appointment.appointment_id for v in views] == [
        first.appointment.appointment_id,
        second.appointment.appointment_id,
    ]


@pytest.mark.asyncio
async def test_register_doctor_never_replaces_an_existing_one(doctor, book_visit, doctor_repo):
    await book_visit.execute(booking())
    use_case = RegisterDoctorUseCase(doctor_repo)

    with pytest.raises(DuplicateDoctorError):
        await use_case.execute(
            RegisterDoctorRequest(
                clinic_id="clinic_2", name="Dr. Other Person", specialty="ENT", doctor_id=doctor.doctor_id
            )
        )

    stored = await doctor_repo.find_by_id(doctor.doctor_id)
    assert (stored.name, stored.clinic_id, stored.total_patients_today) == ("Dr. Priya Sharma", CLINIC_ID, 1)
    assert await doctor_repo.find_by_clinic("clinic_2") == []
