"""
Derived queue position tests.
"""

from clinicqueue.domain.entities.visit import Visit
from clinicqueue.domain.enums.statuses import VisitStatus
from clinicqueue.domain.services.queue_ordering import (
    booked_count,
    next_pending_visit,
    next_queue_key,
    pending_visits,
    position_of,
    rank_queue,
    summarize,
)

from factories import SERVICE_DATE, make_patient


def visit(key, status=VisitStatus.WAITING):
    return Visit(
        visit_id=f"VISIT-20240601-0000000{key}",
        token=f"A00{key}",
        clinic_id="clinic_1",
        doctor_id="doctor_1",
        date=SERVICE_DATE,
        queue_position=key,
        patient=make_patient(),
        status=status,
    )


def test_positions_are_contiguous_over_active_records():
    visits = [
        visit(3),
        visit(1, VisitStatus.COMPLETED),
        visit(2, VisitStatus.MISSED),
        visit(4, VisitStatus.ARRIVED),
        visit(5, VisitStatus.WITH_DOCTOR),
    ]

    ranked = rank_queue(visits)

    assert [r.position for r in ranked] == [1, 2, 3]
    assert [r.visit.token for r in ranked] == ["A003", "A004", "A005"]


def test_cancellation_closes_the_gap():
    visits = [visit(1), visit(2), visit(3)]
    assert position_of(visits[2].visit_id, visits) == 3

    visits[1].mark_missed()

    assert position_of(visits[2].visit_id, visits) == 2
    assert position_of(visits[1].visit_id, visits) is None


def test_include_inactive_appends_unranked_records():
    visits = [visit(1, VisitStatus.NO_SHOW), visit(2)]

    ranked = rank_queue(visits, include_inactive=True)

    assert [(r.position, r.visit.token) for r in ranked] == [(1, "A002"), (None, "A001")]


def test_next_queue_key_skips_past_terminal_records():
    visits = [visit(1, VisitStatus.COMPLETED), visit(2, VisitStatus.MISSED)]
    assert next_queue_key(visits) == 3
    assert next_queue_key([]) == 1


def test_next_pending_visit_skips_the_consulting_patient():
    visits = [visit(1, VisitStatus.WITH_DOCTOR), visit(2, VisitStatus.MISSED), visit(3), visit(4)]
    assert next_pending_visit(visits, visits[0]).token == "A003"
    assert next_pending_visit(visits, visits[3]) is None


def test_booked_count_frees_only_cancelled_slots():
    visits = [
        visit(1, VisitStatus.COMPLETED),
        visit(2, VisitStatus.NO_SHOW),
        visit(3, VisitStatus.MISSED),
        visit(4),
    ]
    assert booked_count(visits) == 3


def test_pending_visits_are_waiting_or_arrived():
    visits = [visit(1, VisitStatus.WITH_DOCTOR), visit(2, VisitStatus.ARRIVED), visit(3)]
    assert [v.token for v in pending_visits(visits)] == ["A002", "A003"]


def test_summarize_counts():
    visits = [
        visit(1, VisitStatus.COMPLETED),
        visit(2, VisitStatus.WITH_DOCTOR),
        visit(3, VisitStatus.ARRIVED),
        visit(4),
        visit(5, VisitStatus.NO_SHOW),
        visit(6, VisitStatus.MISSED),
    ]
    assert summarize(visits) == {
        "waiting": 2,
        "arrived": 1,
        "with_doctor": 1,
        "completed": 1,
        "no_show": 1,
        "missed": 1,
        "total": 6,
    }
