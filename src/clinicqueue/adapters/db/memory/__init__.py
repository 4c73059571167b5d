from .repositories import (
    InMemoryActivityLogRepository,
    InMemoryAppointmentRepository,
    InMemoryDoctorRepository,
    InMemoryTokenCounterRepository,
    InMemoryVisitRepository,
)

__all__ = [
    "InMemoryActivityLogRepository",
    "InMemoryAppointmentRepository",
    "InMemoryDoctorRepository",
    "InMemoryTokenCounterRepository",
    "InMemoryVisitRepository",
]
