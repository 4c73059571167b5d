"""FastAPI dependency providers.

Repositories are process-wide singletons selected by ``MONGO_BACKEND``;
``reset_dependencies()`` drops them (tests, settings reloads).
"""

from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Header, Request

from ..adapters.db.memory import (
    InMemoryActivityLogRepository,
    InMemoryAppointmentRepository,
    InMemoryDoctorRepository,
    InMemoryTokenCounterRepository,
    InMemoryVisitRepository,
)
from ..adapters.services.log_notification_service import LogNotificationService
from ..application.ports.repositories.activity_log_repo import ActivityLogRepository
from ..application.ports.repositories.appointment_repo import AppointmentRepository
from ..application.ports.repositories.doctor_repo import DoctorRepository
from ..application.ports.repositories.token_counter_repo import TokenCounterRepository
from ..application.ports.repositories.visit_repo import VisitRepository
from ..application.ports.services.notification_service import NotificationService
from ..application.scope_locks import ScopeLockRegistry
from ..application.use_cases.allocate_token import TokenAllocator
from ..application.use_cases.book_visit import BookVisitUseCase
from ..application.use_cases.cancel_appointment import CancelAppointmentUseCase
from ..application.use_cases.get_appointment import GetAppointmentUseCase, ListUserAppointmentsUseCase
from ..application.use_cases.list_queue import ListQueueUseCase
from ..application.use_cases.record_activity import ActivityLogRecorder
from ..application.use_cases.register_doctor import RegisterDoctorUseCase
from ..application.use_cases.set_doctor_status import SetDoctorStatusUseCase
from ..application.use_cases.set_visit_status import SetVisitStatusUseCase
from ..core.config import Settings, get_settings
from ..domain.value_objects.queue_scope import Actor
from .errors import UnauthorizedError


def _use_mongo() -> bool:
    return get_settings().database.backend == "mongo"


@lru_cache()
def get_doctor_repository() -> DoctorRepository:
    """Get doctor repository instance."""
    if _use_mongo():
        from ..adapters.db.mongo.repositories.doctor_repository import MongoDoctorRepository
        return MongoDoctorRepository()
    return InMemoryDoctorRepository()


@lru_cache()
def get_visit_repository() -> VisitRepository:
    """Get visit repository instance."""
    if _use_mongo():
        from ..adapters.db.mongo.repositories.visit_repository import MongoVisitRepository
        return MongoVisitRepository()
    return InMemoryVisitRepository()


@lru_cache()
def get_appointment_repository() -> AppointmentRepository:
    """Get appointment repository instance."""
    if _use_mongo():
        from ..adapters.db.mongo.repositories.appointment_repository import MongoAppointmentRepository
        return MongoAppointmentRepository()
    return InMemoryAppointmentRepository()


@lru_cache()
def get_activity_log_repository() -> ActivityLogRepository:
    """Get activity log repository instance."""
    if _use_mongo():
        from ..adapters.db.mongo.repositories.activity_log_repository import MongoActivityLogRepository
        return MongoActivityLogRepository()
    return InMemoryActivityLogRepository()


@lru_cache()
def get_token_counter_repository() -> TokenCounterRepository:
    """Get token counter repository instance."""
    if _use_mongo():
        from ..adapters.db.mongo.repositories.token_counter_repository import MongoTokenCounterRepository
        return MongoTokenCounterRepository()
    return InMemoryTokenCounterRepository()


@lru_cache()
def get_notification_service() -> NotificationService:
    """Get notification service instance."""
    return LogNotificationService()


@lru_cache()
def get_scope_locks() -> ScopeLockRegistry:
    """One lock registry per process."""
    return ScopeLockRegistry()


def reset_dependencies() -> None:
    """Drop every cached provider instance."""
    for provider in (
        get_doctor_repository,
        get_visit_repository,
        get_appointment_repository,
        get_activity_log_repository,
        get_token_counter_repository,
        get_notification_service,
        get_scope_locks,
    ):
        provider.cache_clear()


def get_app_settings() -> Settings:
    return get_settings()


def get_activity_recorder() -> ActivityLogRecorder:
    return ActivityLogRecorder(get_activity_log_repository())


def get_token_allocator() -> TokenAllocator:
    return TokenAllocator(
        get_doctor_repository(), get_token_counter_repository(), get_settings().queue
    )


def get_register_doctor_use_case() -> RegisterDoctorUseCase:
    return RegisterDoctorUseCase(get_doctor_repository(), get_settings().queue)


def get_book_visit_use_case() -> BookVisitUseCase:
    return BookVisitUseCase(
        get_doctor_repository(),
        get_visit_repository(),
        get_appointment_repository(),
        get_token_allocator(),
        get_scope_locks(),
    )


def get_set_visit_status_use_case() -> SetVisitStatusUseCase:
    return SetVisitStatusUseCase(
        get_visit_repository(),
        get_doctor_repository(),
        get_appointment_repository(),
        get_activity_recorder(),
        get_notification_service(),
        get_scope_locks(),
    )


def get_cancel_appointment_use_case() -> CancelAppointmentUseCase:
    return CancelAppointmentUseCase(
        get_appointment_repository(),
        get_visit_repository(),
        get_activity_recorder(),
        get_scope_locks(),
    )


def get_set_doctor_status_use_case() -> SetDoctorStatusUseCase:
    return SetDoctorStatusUseCase(
        get_doctor_repository(),
        get_visit_repository(),
        get_activity_recorder(),
        get_notification_service(),
        get_scope_locks(),
        timezone=get_settings().queue.timezone,
    )


def get_list_queue_use_case() -> ListQueueUseCase:
    return ListQueueUseCase(get_doctor_repository(), get_visit_repository(), get_scope_locks())


def get_get_appointment_use_case() -> GetAppointmentUseCase:
    return GetAppointmentUseCase(
        get_appointment_repository(), get_doctor_repository(), get_visit_repository()
    )


def get_list_user_appointments_use_case() -> ListUserAppointmentsUseCase:
    return ListUserAppointmentsUseCase(get_appointment_repository(), get_get_appointment_use_case())


def get_current_handler(
    request: Request,
    x_handler_id: Annotated[Optional[str], Header()] = None,
    x_handler_name: Annotated[Optional[str], Header()] = None,
) -> Actor:
    """
    Handler identity from the X-Handler-ID / X-Handler-Name headers.

    HandlerMiddleware normally resolves it first; the header fallback keeps
    routers usable without the middleware. When HANDLER_REQUIRE_HEADER is
    off, a missing header falls back to the configured front-desk identity.
    """
    bound = getattr(request.state, "handler", None)
    if isinstance(bound, Actor):
        return bound

    settings = get_settings().handler
    handler_id = (x_handler_id or "").strip()
    if not handler_id:
        if settings.require_header:
            raise UnauthorizedError("X-Handler-ID header is required")
        return Actor(handler_id=settings.default_id, handler_name=settings.default_name)
    handler_name = (x_handler_name or "").strip() or handler_id
    return Actor(handler_id=handler_id, handler_name=handler_name)


# Dependency annotations for FastAPI
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
DoctorRepositoryDep = Annotated[DoctorRepository, Depends(get_doctor_repository)]
VisitRepositoryDep = Annotated[VisitRepository, Depends(get_visit_repository)]
TokenAllocatorDep = Annotated[TokenAllocator, Depends(get_token_allocator)]
ActivityRecorderDep = Annotated[ActivityLogRecorder, Depends(get_activity_recorder)]
RegisterDoctorDep = Annotated[RegisterDoctorUseCase, Depends(get_register_doctor_use_case)]
BookVisitDep = Annotated[BookVisitUseCase, Depends(get_book_visit_use_case)]
SetVisitStatusDep = Annotated[SetVisitStatusUseCase, Depends(get_set_visit_status_use_case)]
CancelAppointmentDep = Annotated[CancelAppointmentUseCase, Depends(get_cancel_appointment_use_case)]
SetDoctorStatusDep = Annotated[SetDoctorStatusUseCase, Depends(get_set_doctor_status_use_case)]
ListQueueDep = Annotated[ListQueueUseCase, Depends(get_list_queue_use_case)]
GetAppointmentDep = Annotated[GetAppointmentUseCase, Depends(get_get_appointment_use_case)]
ListUserAppointmentsDep = Annotated[ListUserAppointmentsUseCase, Depends(get_list_user_appointments_use_case)]
CurrentHandlerDep = Annotated[Actor, Depends(get_current_handler)]
