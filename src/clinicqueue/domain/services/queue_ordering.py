"""Derived queue ordering for one doctor on one date.

Positions are never stored as mutable state: every read ranks the active
records by their booking-order key, so cancellations never need a
renumbering step.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ..entities.visit import Visit
from ..enums.statuses import PENDING_VISIT_STATUSES, VisitStatus


@dataclass(frozen=True)
class RankedVisit:
    position: Optional[int]  # None for terminal records
    visit: Visit


def active_visits(visits: Iterable[Visit]) -> List[Visit]:
    """Active records sorted by booking order."""
    return sorted((v for v in visits if v.is_active), key=lambda v: v.queue_position)


def rank_queue(visits: Iterable[Visit], include_inactive: bool = False) -> List[RankedVisit]:
    """Rank active records 1..N; optionally append terminal ones unranked."""
    visits = list(visits)
    ranked = [
        RankedVisit(position=index, visit=visit)
        for index, visit in enumerate(active_visits(visits), start=1)
    ]
    if include_inactive:
        ranked.extend(
            RankedVisit(position=None, visit=visit)
            for visit in sorted(visits, key=lambda v: v.queue_position)
            if not visit.is_active
        )
    return ranked


def position_of(visit_id: str, visits: Iterable[Visit]) -> Optional[int]:
    """Derived position of one record, None when it is not in the active queue."""
    for index, visit in enumerate(active_visits(visits), start=1):
        if visit.visit_id == visit_id:
            return index
    return None


def next_queue_key(visits: Iterable[Visit]) -> int:
    """Ordering key for a new booking; its rank is always active count + 1."""
    return max((v.queue_position for v in visits), default=0) + 1


def next_pending_visit(visits: Iterable[Visit], after: Visit) -> Optional[Visit]:
    """First still-pending record booked after ``after``."""
    for visit in active_visits(visits):
        if visit.queue_position > after.queue_position and visit.status in PENDING_VISIT_STATUSES:
            return visit
    return None


def pending_visits(visits: Iterable[Visit]) -> List[Visit]:
    """Records still waiting to be seen, in queue order."""
    return [v for v in active_visits(visits) if v.status in PENDING_VISIT_STATUSES]


def booked_count(visits: Iterable[Visit]) -> int:
    """Bookings that still hold a token for the day.

    Only a patient cancellation (visit ``missed``) frees a slot; completed and
    no-show records keep theirs.
    """
    return sum(1 for v in visits if v.status != VisitStatus.MISSED)


def summarize(visits: Iterable[Visit]) -> Dict[str, int]:
    counts = Counter(v.status for v in visits)
    return {
        "waiting": counts[VisitStatus.WAITING] + counts[VisitStatus.ARRIVED],
        "arrived": counts[VisitStatus.ARRIVED],
        "with_doctor": counts[VisitStatus.WITH_DOCTOR],
        "completed": counts[VisitStatus.COMPLETED],
        "no_show": counts[VisitStatus.NO_SHOW],
        "missed": counts[VisitStatus.MISSED],
        "total": sum(counts.values()),
    }
