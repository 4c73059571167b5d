"""
Notification service interface.

Delivery transport (SMS, push) lives outside the queue core; implementations
receive notification intents and may fail without affecting queue state.
"""

from abc import ABC, abstractmethod

from clinicqueue.domain.events.queue_events import (
    DoctorArrivalNotice,
    DoctorDelayNotice,
    NextInQueueNotice,
)


class NotificationService(ABC):
    """Abstract notification dispatcher. Every method raises on failure."""

    @abstractmethod
    async def send_delay_notice(self, notice: DoctorDelayNotice) -> None:
        """Tell a waiting patient their doctor has not arrived."""
        pass

    @abstractmethod
    async def send_next_in_queue(self, notice: NextInQueueNotice) -> None:
        """Tell a patient they are next for the consultation room."""
        pass

    @abstractmethod
    async def send_doctor_arrival(self, notice: DoctorArrivalNotice) -> None:
        """Tell a booked patient their doctor has arrived."""
        pass
