"""
Doctor availability tests: free-form status changes and patient notices.
"""

import pytest

from clinicqueue.application.dto.queue_dto import (
    CancelAppointmentRequest,
    SetDoctorStatusRequest,
    SetVisitStatusRequest,
)
from clinicqueue.application.ports.services.notification_service import NotificationService
from clinicqueue.application.use_cases.set_doctor_status import SetDoctorStatusUseCase
from clinicqueue.core.exceptions import NotificationDeliveryError
from clinicqueue.domain.enums.statuses import ActivityAction, DoctorStatus, VisitStatus
from clinicqueue.domain.errors import DoctorNotFoundError
from clinicqueue.domain.events.queue_events import DoctorArrivalNotice, DoctorDelayNotice

from factories import CLINIC_ID, SERVICE_DATE, booking


class FailingNotifier(NotificationService):
    def __init__(self):
        self.attempts = 0

    async def _fail(self, notice):
        self.attempts += 1
        raise NotificationDeliveryError("gateway down")

    send_delay_notice = _fail
    send_next_in_queue = _fail
    send_doctor_arrival = _fail


def doctor_status(doctor_id, status, actor, on_date=SERVICE_DATE):
    return SetDoctorStatusRequest(doctor_id=doctor_id, new_status=status, actor=actor, on_date=on_date)


@pytest.mark.asyncio
async def test_any_status_may_follow_any_other(doctor, set_doctor_status, doctor_repo, actor):
    sequence = [DoctorStatus.BREAK, DoctorStatus.AVAILABLE, DoctorStatus.WITH_PATIENT, DoctorStatus.NOT_ARRIVED]
    for status in sequence:
        result = await set_doctor_status.execute(doctor_status(doctor.doctor_id, status, actor))
        assert result.doctor.status == status

    assert (await doctor_repo.find_by_id(doctor.doctor_id)).status == DoctorStatus.NOT_ARRIVED


@pytest.mark.asyncio
async def test_status_change_is_logged_once(doctor, set_doctor_status, recorder, actor):
    result = await set_doctor_status.execute(doctor_status(doctor.doctor_id, DoctorStatus.AVAILABLE, actor))

    entries = await recorder.list_recent(CLINIC_ID)
    assert [e.entry_id for e in entries] == [result.activity_entry_id]
    entry = entries[0]
    assert entry.action == ActivityAction.DOCTOR_STATUS_CHANGE
    assert (entry.old_value, entry.new_value) == ("not_arrived", "available")
    assert entry.target_name == "Dr. Priya Sharma"
    assert entry.details == "Updated doctor status from not arrived to available"


@pytest.mark.asyncio
async def test_not_arrived_lists_waiting_patients(
    doctor, book_visit, set_visit_status, set_doctor_status, notifier, actor
):
    results = [await book_visit.execute(booking(name=n)) for n in ("Ravi Kumar", "Meena Iyer", "John Dsouza")]
    await set_doctor_status.execute(doctor_status(doctor.doctor_id, DoctorStatus.AVAILABLE, actor))
    for status in (VisitStatus.ARRIVED, VisitStatus.WITH_DOCTOR):
        await set_visit_status.execute(SetVisitStatusRequest(results[0].visit.visit_id, status, actor))
    await set_visit_status.execute(SetVisitStatusRequest(results[2].visit.visit_id, VisitStatus.ARRIVED, actor))
    notifier.drain()

    result = await set_doctor_status.execute(doctor_status(doctor.doctor_id, DoctorStatus.NOT_ARRIVED, actor))

    assert result.old_status == DoctorStatus.WITH_PATIENT
    assert result.notify_patient_ids == [results[1].visit.visit_id, results[2].visit.visit_id]
    notices = notifier.drain()
    assert [n.token for n in notices] == ["A002", "A003"]
    assert notices[0].doctor_name == "Dr. Priya Sharma"
    assert "A002" in notices[0].message
    assert notifier.outbox == []


@pytest.mark.asyncio
async def test_other_statuses_notify_nobody(doctor, book_visit, set_doctor_status, notifier, actor):
    await book_visit.execute(booking())
    result = await set_doctor_status.execute(doctor_status(doctor.doctor_id, DoctorStatus.BREAK, actor))
    assert result.notify_patient_ids == []
    assert notifier.outbox == []


@pytest.mark.asyncio
async def test_notification_failure_keeps_status_change(
    doctor, book_visit, doctor_repo, visit_repo, recorder, locks, actor
):
    await book_visit.execute(booking())
    failing = FailingNotifier()
    use_case = SetDoctorStatusUseCase(doctor_repo, visit_repo, recorder, failing, locks)
    await use_case.execute(doctor_status(doctor.doctor_id, DoctorStatus.AVAILABLE, actor))

    result = await use_case.execute(doctor_status(doctor.doctor_id, DoctorStatus.NOT_ARRIVED, actor))

    # One arrival notice, then one delay notice
    assert failing.attempts == 2
    assert len(result.notify_patient_ids) == 1
    assert (await doctor_repo.find_by_id(doctor.doctor_id)).status == DoctorStatus.NOT_ARRIVED
    assert len(await recorder.list_recent(CLINIC_ID)) == 2


@pytest.mark.asyncio
async def test_notice_without_phone_is_rejected(notifier):
    notice = DoctorDelayNotice(
        visit_id="VISIT-20240601-deadbeef",
        appointment_id="APT-20240601-deadbeef",
        clinic_id=CLINIC_ID,
        doctor_id="doctor_1",
        doctor_name="Dr. Priya Sharma",
        patient_name="Ravi Kumar",
        patient_phone="",
        token="A001",
        date=SERVICE_DATE,
    )
    with pytest.raises(NotificationDeliveryError):
        await notifier.send_delay_notice(notice)


@pytest.mark.asyncio
async def test_unknown_doctor(set_doctor_status, actor):
    with pytest.raises(DoctorNotFoundError):
        await set_doctor_status.execute(doctor_status("missing", DoctorStatus.AVAILABLE, actor))


@pytest.mark.asyncio
async def test_arrival_notifies_patients_still_waiting(
    doctor, book_visit, cancel_appointment, set_doctor_status, notifier, actor
):
    results = [await book_visit.execute(booking(name=n)) for n in ("Ravi Kumar", "Meena Iyer", "John Dsouza")]
    await cancel_appointment.execute(CancelAppointmentRequest(results[1].appointment.appointment_id))

    result = await set_doctor_status.execute(doctor_status(doctor.doctor_id, DoctorStatus.AVAILABLE, actor))

    assert result.notify_patient_ids == []
    notices = notifier.drain()
    assert all(isinstance(n, DoctorArrivalNotice) for n in notices)
    assert [n.token for n in notices] == ["A001", "A003"]
    assert notices[0].current_token == "S01"
    assert "has arrived" in notices[0].message


@pytest.mark.asyncio
async def test_arrival_only_from_not_arrived(doctor, book_visit, set_doctor_status, notifier, actor):
    await book_visit.execute(booking())
    for status in (DoctorStatus.BREAK, DoctorStatus.AVAILABLE, DoctorStatus.AVAILABLE):
        await set_doctor_status.execute(doctor_status(doctor.doctor_id, status, actor))

    assert notifier.outbox == []
