"""
Exception handling for the clinic queue service.

Infrastructure-level errors; business rule violations live in
``clinicqueue.domain.errors``.
"""

from typing import Any, Dict, Optional


class ClinicQueueException(Exception):
    """Base exception class for infrastructure errors."""

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


class ConfigurationError(ClinicQueueException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "CONFIG_ERROR", details)


class ExternalServiceError(ClinicQueueException):
    """Raised when there's an external service error."""

    def __init__(
        self, service: str, message: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.service = service
        full_message = f"{service} service error: {message}"
        super().__init__(full_message, "EXTERNAL_SERVICE_ERROR", details)


class NotificationDeliveryError(ExternalServiceError):
    """Raised when a patient notification cannot be handed off."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__("Notification", message, details)
