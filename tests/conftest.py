"""
Shared fixtures: in-memory repositories wired into the queue use cases, plus
an API client backed by fresh in-memory state.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from clinicqueue.adapters.db.memory import (
    InMemoryActivityLogRepository,
    InMemoryAppointmentRepository,
    InMemoryDoctorRepository,
    InMemoryTokenCounterRepository,
    InMemoryVisitRepository,
)
from clinicqueue.adapters.services.log_notification_service import LogNotificationService
from clinicqueue.application.scope_locks import ScopeLockRegistry
from clinicqueue.application.use_cases.allocate_token import TokenAllocator
from clinicqueue.application.use_cases.book_visit import BookVisitUseCase
from clinicqueue.application.use_cases.cancel_appointment import CancelAppointmentUseCase
from clinicqueue.application.use_cases.list_queue import ListQueueUseCase
from clinicqueue.application.use_cases.record_activity import ActivityLogRecorder
from clinicqueue.application.use_cases.set_doctor_status import SetDoctorStatusUseCase
from clinicqueue.application.use_cases.set_visit_status import SetVisitStatusUseCase
from clinicqueue.core.config import QueueSettings
from clinicqueue.domain.value_objects.queue_scope import Actor

from factories import make_doctor


@pytest.fixture(autouse=True)
def _queue_env(monkeypatch):
    """Keep tests on the in-memory backend regardless of the developer's .env."""
    monkeypatch.setenv("MONGO_BACKEND", "memory")
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.delenv("QUEUE_TOKEN_SCOPE", raising=False)
    monkeypatch.delenv("HANDLER_REQUIRE_HEADER", raising=False)


@pytest.fixture
def doctor_repo():
    return InMemoryDoctorRepository()


@pytest.fixture
def visit_repo():
    return InMemoryVisitRepository()


@pytest.fixture
def appointment_repo():
    return InMemoryAppointmentRepository()


@pytest.fixture
def activity_repo():
    return InMemoryActivityLogRepository()


@pytest.fixture
def counter_repo():
    return InMemoryTokenCounterRepository()


@pytest.fixture
def locks():
    return ScopeLockRegistry()


@pytest.fixture
def recorder(activity_repo):
    return ActivityLogRecorder(activity_repo)


@pytest.fixture
def notifier():
    return LogNotificationService()


@pytest.fixture
def actor():
    return Actor(handler_id="handler_1", handler_name="Asha")


@pytest.fixture
def queue_settings():
    return QueueSettings(token_scope="clinic", token_prefix="A", token_width=3)


@pytest.fixture
def allocator(doctor_repo, counter_repo, queue_settings):
    return TokenAllocator(doctor_repo, counter_repo, queue_settings)


@pytest.fixture
def book_visit(doctor_repo, visit_repo, appointment_repo, allocator, locks):
    return BookVisitUseCase(doctor_repo, visit_repo, appointment_repo, allocator, locks)


@pytest.fixture
def set_visit_status(visit_repo, doctor_repo, appointment_repo, recorder, notifier, locks):
    return SetVisitStatusUseCase(visit_repo, doctor_repo, appointment_repo, recorder, notifier, locks)


@pytest.fixture
def cancel_appointment(appointment_repo, visit_repo, recorder, locks):
    return CancelAppointmentUseCase(appointment_repo, visit_repo, recorder, locks)


@pytest.fixture
def set_doctor_status(doctor_repo, visit_repo, recorder, notifier, locks):
    return SetDoctorStatusUseCase(doctor_repo, visit_repo, recorder, notifier, locks)


@pytest.fixture
def list_queue(doctor_repo, visit_repo, locks):
    return ListQueueUseCase(doctor_repo, visit_repo, locks)


@pytest_asyncio.fixture
async def doctor(doctor_repo):
    """A registered doctor in clinic_1."""
    d = make_doctor()
    await doctor_repo.add(d)
    return d


@pytest.fixture
def client():
    """API client over a freshly built app with empty in-memory stores."""
    from clinicqueue.api.deps import reset_dependencies
    from clinicqueue.app import create_app
    from clinicqueue.core.config import reset_settings

    reset_settings()
    reset_dependencies()
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client
    reset_dependencies()
    reset_settings()
