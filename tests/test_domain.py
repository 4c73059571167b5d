"""
Domain entity and value object tests.
"""

from datetime import datetime, time

import pytest

from clinicqueue.domain.entities.activity_log import ActivityLogEntry
from clinicqueue.domain.entities.appointment import Appointment
from clinicqueue.domain.entities.visit import ALLOWED_TRANSITIONS, Visit
from clinicqueue.domain.enums.statuses import (
    ActivityAction,
    ActivityTargetType,
    AppointmentStatus,
    CancellationReason,
    DoctorStatus,
    VisitStatus,
)
from clinicqueue.domain.errors import (
    InvalidDoctorDataError,
    InvalidPatientDataError,
    InvalidTransitionError,
)
from clinicqueue.domain.value_objects import (
    Actor,
    AppointmentId,
    IdempotencyKey,
    TokenCode,
    VisitId,
    doctor_initial,
)

from factories import SERVICE_DATE, make_doctor, make_patient


def make_visit(status=VisitStatus.WAITING, key=1, token="A001"):
    return Visit(
        visit_id=VisitId.generate(SERVICE_DATE).value,
        token=token,
        clinic_id="clinic_1",
        doctor_id="doctor_1",
        date=SERVICE_DATE,
        queue_position=key,
        patient=make_patient(),
        status=status,
    )


def make_appointment(status=AppointmentStatus.UPCOMING):
    return Appointment(
        appointment_id=AppointmentId.generate(SERVICE_DATE).value,
        user_id="user_1",
        clinic_id="clinic_1",
        clinic_name="City Clinic",
        doctor_id="doctor_1",
        doctor_name="Dr. Priya Sharma",
        date=SERVICE_DATE,
        token="A001",
        visit_id=VisitId.generate(SERVICE_DATE).value,
        status=status,
    )


class TestTokenCode:
    def test_build_pads_sequence(self):
        assert TokenCode.build("A", 1, 3).value == "A001"
        assert TokenCode.build("s", 12, 2).value == "S12"

    def test_build_never_pads_below_two_digits(self):
        assert TokenCode.build("A", 7, 1).value == "A07"

    def test_sequence_beyond_width_keeps_all_digits(self):
        assert TokenCode.build("A", 1234, 3).value == "A1234"

    def test_prefix_and_sequence(self):
        token = TokenCode("M05")
        assert token.prefix == "M"
        assert token.sequence == 5

    @pytest.mark.parametrize("value", ["", "A1", "a001", "AB01", "001", "A-01"])
    def test_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            TokenCode(value)

    def test_rejects_non_positive_sequence(self):
        with pytest.raises(ValueError):
            TokenCode.build("A", 0)

    def test_from_string_normalizes(self):
        assert TokenCode.from_string(" a001 ") == TokenCode("A001")


class TestDoctorInitial:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Dr. Priya Sharma", "S"),
            ("Dr Mehta", "M"),
            ("dr. anil kapoor", "K"),
            ("Sunita Rao", "R"),
            ("", "D"),
            ("Dr.", "D"),
            (None, "D"),
        ],
    )
    def test_surname_initial(self, name, expected):
        assert doctor_initial(name) == expected


class TestDoctor:
    def test_seeds_tokens_from_surname(self):
        doctor = make_doctor(name="Dr. Priya Sharma")
        assert doctor.current_token == "S01"
        assert doctor.next_token == "S01"
        assert doctor.status == DoctorStatus.NOT_ARRIVED

    def test_rejects_inverted_schedule(self):
        with pytest.raises(InvalidDoctorDataError):
            make_doctor(start_time=time(17, 0), end_time=time(9, 0))

    def test_rejects_unknown_working_day(self):
        with pytest.raises(InvalidDoctorDataError):
            make_doctor(working_days=["Funday"])

    def test_rejects_non_positive_capacity(self):
        with pytest.raises(InvalidDoctorDataError):
            make_doctor(max_tokens_per_day=0)

    def test_rejects_malformed_token(self):
        with pytest.raises(InvalidDoctorDataError):
            make_doctor(current_token="12")

    def test_any_status_reachable(self):
        doctor = make_doctor()
        for status in [DoctorStatus.BREAK, DoctorStatus.WITH_PATIENT, DoctorStatus.NOT_ARRIVED, DoctorStatus.AVAILABLE]:
            doctor.set_status(status)
            assert doctor.status == status

    def test_start_and_finish_consultation(self):
        doctor = make_doctor()
        doctor.set_status(DoctorStatus.AVAILABLE)

        doctor.start_consultation("A001", "A002")
        assert doctor.status == DoctorStatus.WITH_PATIENT
        assert doctor.current_token == "A001"
        assert doctor.next_token == "A002"

        doctor.finish_consultation()
        assert doctor.status == DoctorStatus.AVAILABLE
        assert doctor.completed_today == 1

    def test_finish_keeps_break_status(self):
        doctor = make_doctor()
        doctor.set_status(DoctorStatus.BREAK)
        doctor.finish_consultation()
        assert doctor.status == DoctorStatus.BREAK
        assert doctor.completed_today == 1

    def test_reset_day(self):
        doctor = make_doctor()
        doctor.start_consultation("A003", None)
        doctor.finish_consultation()

        doctor.reset_day(booked_for_day=2)
        assert doctor.status == DoctorStatus.NOT_ARRIVED
        assert doctor.current_token == doctor.seed_token == "S01"
        assert doctor.completed_today == 0
        assert doctor.total_patients_today == 2


class TestVisitTransitions:
    @pytest.mark.parametrize(
        "path",
        [
            [VisitStatus.ARRIVED, VisitStatus.WITH_DOCTOR, VisitStatus.COMPLETED],
            [VisitStatus.NO_SHOW],
            [VisitStatus.ARRIVED, VisitStatus.NO_SHOW],
        ],
    )
    def test_allowed_paths(self, path):
        visit = make_visit()
        for status in path:
            visit.transition_to(status)
        assert visit.status == path[-1]
        assert not visit.is_active

    @pytest.mark.parametrize(
        "start, target",
        [
            (VisitStatus.WAITING, VisitStatus.WITH_DOCTOR),
            (VisitStatus.WAITING, VisitStatus.COMPLETED),
            (VisitStatus.ARRIVED, VisitStatus.WAITING),
            (VisitStatus.WITH_DOCTOR, VisitStatus.NO_SHOW),
            (VisitStatus.COMPLETED, VisitStatus.ARRIVED),
            (VisitStatus.NO_SHOW, VisitStatus.ARRIVED),
            (VisitStatus.MISSED, VisitStatus.WAITING),
            (VisitStatus.WAITING, VisitStatus.MISSED),
        ],
    )
    def test_rejected_transitions(self, start, target):
        visit = make_visit(status=start)
        with pytest.raises(InvalidTransitionError) as exc:
            visit.transition_to(target)
        assert exc.value.details["current"] == start.value
        assert visit.status == start

    def test_terminal_states_have_no_exits(self):
        for status in (VisitStatus.COMPLETED, VisitStatus.MISSED, VisitStatus.NO_SHOW):
            assert ALLOWED_TRANSITIONS[status] == frozenset()

    def test_timestamps_follow_progress(self):
        visit = make_visit()
        at = datetime(2024, 6, 1, 9, 30)
        visit.transition_to(VisitStatus.ARRIVED, at=at)
        assert visit.arrived_at == at
        visit.transition_to(VisitStatus.WITH_DOCTOR)
        assert visit.consultation_started_at is not None
        visit.transition_to(VisitStatus.COMPLETED)
        assert visit.consultation_ended_at is not None

    def test_mark_missed_only_before_consultation(self):
        assert make_visit().mark_missed() == VisitStatus.WAITING
        with pytest.raises(InvalidTransitionError):
            make_visit(status=VisitStatus.WITH_DOCTOR).mark_missed()

    def test_patient_validation(self):
        with pytest.raises(InvalidPatientDataError):
            make_patient(name="R")
        with pytest.raises(InvalidPatientDataError):
            make_patient(phone="12345")


class TestAppointment:
    def test_cancel_is_idempotent(self):
        appointment = make_appointment()
        assert appointment.cancel() is True
        assert appointment.cancellation_reason == CancellationReason.PATIENT_CANCELLED
        assert appointment.cancel() is False
        assert appointment.status == AppointmentStatus.CANCELLED

    def test_cannot_cancel_completed(self):
        appointment = make_appointment()
        appointment.complete()
        with pytest.raises(InvalidTransitionError):
            appointment.cancel()

    def test_cannot_complete_cancelled(self):
        appointment = make_appointment()
        appointment.cancel(CancellationReason.NO_SHOW)
        with pytest.raises(InvalidTransitionError):
            appointment.complete()


class TestValueObjects:
    def test_dated_ids(self):
        visit_id = VisitId.generate(SERVICE_DATE)
        assert visit_id.value.startswith("VISIT-20240601-")
        assert AppointmentId.generate(SERVICE_DATE).value.startswith("APT-20240601-")
        with pytest.raises(ValueError):
            VisitId("APT-20240601-deadbeef")

    def test_ids_of_different_kinds_never_equal(self):
        assert VisitId("VISIT-20240601-deadbeef") != AppointmentId("APT-20240601-deadbeef")

    def test_idempotency_key_length(self):
        assert len(IdempotencyKey.generate().value) == 32
        with pytest.raises(ValueError):
            IdempotencyKey("short")
        with pytest.raises(ValueError):
            IdempotencyKey("x" * 65)

    def test_status_change_entry_details(self):
        entry = ActivityLogEntry.status_change(
            actor=Actor("handler_1", "Asha"),
            action=ActivityAction.PATIENT_STATUS_CHANGE,
            target_type=ActivityTargetType.PATIENT,
            target_id="VISIT-20240601-deadbeef",
            target_name="Ravi Kumar (A001)",
            clinic_id="clinic_1",
            old_value="waiting",
            new_value="with_doctor",
        )
        assert entry.details == "Updated patient status from waiting to with doctor"
        assert entry.entry_id is None
        stamped = entry.stamped("a" * 32, datetime(2024, 6, 1, 10, 0))
        assert stamped.entry_id == "a" * 32
        assert stamped.timestamp == datetime(2024, 6, 1, 10, 0)
