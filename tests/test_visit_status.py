"""
Visit status transition tests, including doctor/appointment cascades and
the one-entry-per-change activity trail.
"""

import pytest

from clinicqueue.application.dto.queue_dto import SetVisitStatusRequest
from clinicqueue.domain.enums.statuses import (
    ActivityAction,
    AppointmentStatus,
    CancellationReason,
    DoctorStatus,
    VisitStatus,
)
from clinicqueue.domain.errors import (
    InvalidTransitionError,
    StaleReadError,
    VisitNotFoundError,
)

from clinicqueue.domain.events.queue_events import NextInQueueNotice

from factories import CLINIC_ID, booking


async def book_three(book_visit):
    return [
        await book_visit.execute(booking(name=name))
        for name in ("Ravi Kumar", "Meena Iyer", "John Dsouza")
    ]


@pytest.mark.asyncio
async def test_consultation_cascades_to_doctor(doctor, book_visit, set_visit_status, doctor_repo, actor):
    first, _, _ = await book_three(book_visit)
    visit_id = first.visit.visit_id

    await set_visit_status.execute(SetVisitStatusRequest(visit_id, VisitStatus.ARRIVED, actor))
    result = await set_visit_status.execute(SetVisitStatusRequest(visit_id, VisitStatus.WITH_DOCTOR, actor))

    assert result.old_status == VisitStatus.ARRIVED
    assert result.queue_position == 1
    assert result.doctor.status == DoctorStatus.WITH_PATIENT
    stored = await doctor_repo.find_by_id(doctor.doctor_id)
    assert stored.status == DoctorStatus.WITH_PATIENT
    assert stored.current_token == "A001"
    assert stored.next_token == "A002"


@pytest.mark.asyncio
async def test_completion_counts_and_completes_appointment(
    doctor, book_visit, set_visit_status, doctor_repo, appointment_repo, actor
):
    first, _, _ = await book_three(book_visit)
    visit_id = first.visit.visit_id
    for status in (VisitStatus.ARRIVED, VisitStatus.WITH_DOCTOR, VisitStatus.COMPLETED):
        result = await set_visit_status.execute(SetVisitStatusRequest(visit_id, status, actor))

    assert result.queue_position is None
    stored_doctor = await doctor_repo.find_by_id(doctor.doctor_id)
    assert stored_doctor.completed_today == 1
    assert stored_doctor.status == DoctorStatus.AVAILABLE
    appointment = await appointment_repo.find_by_id(first.appointment.appointment_id)
    assert appointment.status == AppointmentStatus.COMPLETED
    assert appointment.completed_at is not None


@pytest.mark.asyncio
async def test_no_show_cancels_the_appointment(doctor, book_visit, set_visit_status, appointment_repo, list_queue, actor):
    first, second, _ = await book_three(book_visit)

    await set_visit_status.execute(SetVisitStatusRequest(first.visit.visit_id, VisitStatus.NO_SHOW, actor))

    appointment = await appointment_repo.find_by_id(first.appointment.appointment_id)
    assert appointment.status == AppointmentStatus.CANCELLED
    assert appointment.cancellation_reason == CancellationReason.NO_SHOW
    view = await list_queue.execute(doctor.doctor_id, first.visit.date)
    assert [(e.position, e.visit.token) for e in view.entries] == [(1, "A002"), (2, "A003")]


@pytest.mark.asyncio
async def test_each_change_writes_exactly_one_entry(doctor, book_visit, set_visit_status, recorder, actor):
    first, _, _ = await book_three(book_visit)
    path = [VisitStatus.ARRIVED, VisitStatus.WITH_DOCTOR, VisitStatus.COMPLETED]
    entry_ids = []
    for status in path:
        result = await set_visit_status.execute(SetVisitStatusRequest(first.visit.visit_id, status, actor))
        entry_ids.append(result.activity_entry_id)

    entries = await recorder.list_recent(CLINIC_ID)

    assert len(entries) == 3
    assert [e.entry_id for e in entries] == list(reversed(entry_ids))
    newest = entries[0]
    assert newest.action == ActivityAction.PATIENT_STATUS_CHANGE
    assert (newest.old_value, newest.new_value) == ("with_doctor", "completed")
    assert newest.handler_id == "handler_1"
    assert newest.target_id == first.visit.visit_id
    assert newest.target_name == "Ravi Kumar (A001)"


@pytest.mark.asyncio
async def test_rejected_transition_changes_nothing(doctor, book_visit, set_visit_status, visit_repo, doctor_repo, recorder, actor):
    first, _, _ = await book_three(book_visit)

    with pytest.raises(InvalidTransitionError):
        await set_visit_status.execute(
            SetVisitStatusRequest(first.visit.visit_id, VisitStatus.COMPLETED, actor)
        )

    assert (await visit_repo.find_by_id(first.visit.visit_id)).status == VisitStatus.WAITING
    assert (await doctor_repo.find_by_id(doctor.doctor_id)).completed_today == 0
    assert await recorder.list_recent(CLINIC_ID) == []


@pytest.mark.asyncio
async def test_stale_version_is_rejected(doctor, book_visit, set_visit_status, recorder, actor):
    first, _, _ = await book_three(book_visit)
    visit_id = first.visit.visit_id

    arrived = await set_visit_status.execute(
        SetVisitStatusRequest(visit_id, VisitStatus.ARRIVED, actor, expected_version=0)
    )
    assert arrived.visit.version == 1

    with pytest.raises(StaleReadError) as exc:
        await set_visit_status.execute(
            SetVisitStatusRequest(visit_id, VisitStatus.NO_SHOW, actor, expected_version=0)
        )
    assert exc.value.details["actual_version"] == 1
    assert len(await recorder.list_recent(CLINIC_ID)) == 1


@pytest.mark.asyncio
async def test_unknown_visit(set_visit_status, actor):
    with pytest.raises(VisitNotFoundError):
        await set_visit_status.execute(
            SetVisitStatusRequest("VISIT-20240601-deadbeef", VisitStatus.ARRIVED, actor)
        )


@pytest.mark.asyncio
async def test_consultation_start_tells_the_next_patient(doctor, book_visit, set_visit_status, notifier, actor):
    first, second, third = await book_three(book_visit)
    for status in (VisitStatus.ARRIVED, VisitStatus.WITH_DOCTOR):
        await set_visit_status.execute(SetVisitStatusRequest(first.visit.visit_id, status, actor))

    notices = notifier.drain()
    assert [type(n) for n in notices] == [NextInQueueNotice]
    assert notices[0].visit_id == second.visit.visit_id
    assert notices[0].token == "A002"
    assert notices[0].message.startswith("You're next!")

    # Nobody is left behind the last patient
    await set_visit_status.execute(SetVisitStatusRequest(first.visit.visit_id, VisitStatus.COMPLETED, actor))
    await set_visit_status.execute(SetVisitStatusRequest(second.visit.visit_id, VisitStatus.NO_SHOW, actor))
    for status in (VisitStatus.ARRIVED, VisitStatus.WITH_DOCTOR):
        await set_visit_status.execute(SetVisitStatusRequest(third.visit.visit_id, status, actor))
    assert notifier.outbox == []
