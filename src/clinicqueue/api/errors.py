from typing import Dict


class APIError(Exception):
    def __init__(self, code: str, message: str, http_status: int = 400, details: dict = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details


class UnauthorizedError(APIError):
    def __init__(self, message: str = "Unauthorized", details: dict = None):
        super().__init__("UNAUTHORIZED", message, 401, details)


# Domain error codes -> HTTP status
DOMAIN_ERROR_STATUS: Dict[str, int] = {
    "INVALID_TRANSITION": 409,
    "CAPACITY_EXCEEDED": 409,
    "STALE_READ": 409,
    "DOCTOR_ALREADY_EXISTS": 409,
    "DOCTOR_NOT_FOUND": 404,
    "VISIT_NOT_FOUND": 404,
    "APPOINTMENT_NOT_FOUND": 404,
    "INVALID_DOCTOR_DATA": 422,
    "INVALID_PATIENT_DATA": 422,
}


def status_for_domain_error(error_code: str) -> int:
    if error_code in DOMAIN_ERROR_STATUS:
        return DOMAIN_ERROR_STATUS[error_code]
    if error_code and error_code.endswith("_NOT_FOUND"):
        return 404
    return 400
