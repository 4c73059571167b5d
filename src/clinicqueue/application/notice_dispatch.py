"""Fire-and-forget delivery of patient notices.

Notices go out after the queue change is stored and outside any scope lock.
Delivery is at-most-once: a failed notice is logged and skipped, never
retried and never surfaced to the caller.
"""

import logging
from datetime import datetime
from typing import Awaitable, Callable, Iterable, List, Optional, Type, TypeVar

from clinicqueue.domain.entities.doctor import Doctor
from clinicqueue.domain.entities.visit import Visit
from clinicqueue.domain.events.queue_events import PatientNotice

logger = logging.getLogger(__name__)

N = TypeVar("N", bound=PatientNotice)


def build_notices(
    notice_type: Type[N],
    doctor: Doctor,
    visits: Iterable[Visit],
    raised_at: Optional[datetime] = None,
    **extra,
) -> List[N]:
    raised_at = raised_at or datetime.utcnow()
    return [
        notice_type(
            visit_id=visit.visit_id,
            appointment_id=visit.appointment_id,
            clinic_id=visit.clinic_id,
            doctor_id=doctor.doctor_id,
            doctor_name=doctor.name,
            patient_name=visit.patient.name,
            patient_phone=visit.patient.phone,
            token=visit.token,
            date=visit.date,
            raised_at=raised_at,
            **extra,
        )
        for visit in visits
    ]


async def dispatch_notices(send: Callable[[N], Awaitable[None]], notices: Iterable[N]) -> int:
    """Hand each notice to ``send``; returns how many were accepted."""
    delivered = 0
    for notice in notices:
        try:
            await send(notice)
            delivered += 1
        except Exception as e:
            logger.error(
                f"Failed to deliver {type(notice).__name__} for visit {notice.visit_id}: {e}",
                exc_info=True,
            )
    return delivered
