"""
Logging implementation of NotificationService.

Writes each notice to the log and keeps it in an outbox that an SMS/push
transport (or a test) can drain.
"""

import logging
from typing import List

from ...application.ports.services.notification_service import NotificationService
from ...core.exceptions import NotificationDeliveryError
from ...domain.events.queue_events import (
    DoctorArrivalNotice,
    DoctorDelayNotice,
    NextInQueueNotice,
    PatientNotice,
)

logger = logging.getLogger(__name__)


class LogNotificationService(NotificationService):
    """Records patient notices instead of delivering them."""

    def __init__(self, max_outbox: int = 1000):
        self._outbox: List[PatientNotice] = []
        self._max_outbox = max_outbox

    @property
    def outbox(self) -> List[PatientNotice]:
        return list(self._outbox)

    async def send_delay_notice(self, notice: DoctorDelayNotice) -> None:
        self._queue(notice, "Delay")

    async def send_next_in_queue(self, notice: NextInQueueNotice) -> None:
        self._queue(notice, "Next-in-queue")

    async def send_doctor_arrival(self, notice: DoctorArrivalNotice) -> None:
        self._queue(notice, "Doctor arrival")

    def _queue(self, notice: PatientNotice, kind: str) -> None:
        if not notice.patient_phone:
            raise NotificationDeliveryError(
                f"No contact number for visit {notice.visit_id}",
                {"visit_id": notice.visit_id},
            )

        logger.info(
            f"{kind} notice queued for visit {notice.visit_id} token={notice.token} "
            f"doctor={notice.doctor_id}: {notice.message}"
        )
        self._outbox.append(notice)
        if len(self._outbox) > self._max_outbox:
            self._outbox = self._outbox[-self._max_outbox:]

    def drain(self) -> List[PatientNotice]:
        """Hand over and clear pending notices."""
        notices, self._outbox = self._outbox, []
        return notices
