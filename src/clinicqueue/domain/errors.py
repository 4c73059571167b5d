"""
Domain-specific error types for business rule violations.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class InvalidTransitionError(DomainError):
    """Requested state change is not permitted by the state machine."""

    def __init__(self, entity: str, entity_id: str, current: str, requested: str) -> None:
        message = (
            f"Cannot change {entity} '{entity_id}' from '{current}' to '{requested}'"
        )
        super().__init__(
            message,
            "INVALID_TRANSITION",
            {
                "entity": entity,
                "entity_id": entity_id,
                "current": current,
                "requested": requested,
            },
        )


class DuplicateDoctorError(DomainError):
    """A doctor with this ID is already registered."""

    def __init__(self, doctor_id: str) -> None:
        message = f"Doctor with ID '{doctor_id}' already exists"
        super().__init__(message, "DOCTOR_ALREADY_EXISTS", {"doctor_id": doctor_id})


class NotFoundError(DomainError):
    """Referenced record does not exist in scope."""


class DoctorNotFoundError(NotFoundError):
    """Doctor not found."""

    def __init__(self, doctor_id: str) -> None:
        message = f"Doctor with ID '{doctor_id}' not found"
        super().__init__(message, "DOCTOR_NOT_FOUND", {"doctor_id": doctor_id})


class VisitNotFoundError(NotFoundError):
    """Visit not found."""

    def __init__(self, visit_id: str) -> None:
        message = f"Visit with ID '{visit_id}' not found"
        super().__init__(message, "VISIT_NOT_FOUND", {"visit_id": visit_id})


class AppointmentNotFoundError(NotFoundError):
    """Appointment not found."""

    def __init__(self, appointment_id: str) -> None:
        message = f"Appointment with ID '{appointment_id}' not found"
        super().__init__(
            message, "APPOINTMENT_NOT_FOUND", {"appointment_id": appointment_id}
        )


class CapacityExceededError(DomainError):
    """Doctor has no tokens left for the day."""

    def __init__(self, doctor_id: str, date: str, max_tokens: int) -> None:
        message = (
            f"Doctor '{doctor_id}' is fully booked on {date} (max {max_tokens} tokens)"
        )
        super().__init__(
            message,
            "CAPACITY_EXCEEDED",
            {"doctor_id": doctor_id, "date": date, "max_tokens_per_day": max_tokens},
        )


class StaleReadError(DomainError):
    """A write was based on a snapshot that has since changed."""

    def __init__(self, entity: str, entity_id: str, expected: int, actual: int) -> None:
        message = (
            f"{entity.capitalize()} '{entity_id}' changed since it was read "
            f"(expected version {expected}, found {actual}); re-read and retry"
        )
        super().__init__(
            message,
            "STALE_READ",
            {
                "entity": entity,
                "entity_id": entity_id,
                "expected_version": expected,
                "actual_version": actual,
            },
        )


class InvalidDoctorDataError(DomainError):
    """Invalid doctor data."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        message = f"Invalid doctor data. Field: {field}, {reason}"
        super().__init__(
            message, "INVALID_DOCTOR_DATA", {"field": field, "value": value}
        )


class InvalidPatientDataError(DomainError):
    """Invalid patient data."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        message = f"Invalid patient data. Field: {field}, {reason}"
        super().__init__(
            message, "INVALID_PATIENT_DATA", {"field": field, "value": value}
        )
