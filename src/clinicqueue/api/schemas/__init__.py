"""
API schemas package.
"""

# Common schemas
from .common import ApiResponse, ErrorResponse, PatientDetails

# Doctor schemas
from .doctors import (
    DoctorSchema,
    DoctorStatusUpdateRequest,
    DoctorStatusUpdateResponse,
    RegisterDoctorRequest,
    TokenPreviewSchema,
)

# Visit and queue schemas
from .visits import (
    BookVisitRequest,
    BookVisitResponse,
    QueueEntrySchema,
    QueueSchema,
    VisitSchema,
    VisitStatusUpdateRequest,
    VisitStatusUpdateResponse,
)

# Appointment schemas
from .appointments import (
    AppointmentSchema,
    CancelAppointmentRequest,
    CancelAppointmentResponse,
)

# Activity schemas
from .activity import (
    ActivityEntrySchema,
    HandlerSessionRequest,
    RecordActivityRequest,
)

__all__ = [
    "ApiResponse",
    "ErrorResponse",
    "PatientDetails",
    "DoctorSchema",
    "DoctorStatusUpdateRequest",
    "DoctorStatusUpdateResponse",
    "RegisterDoctorRequest",
    "TokenPreviewSchema",
    "BookVisitRequest",
    "BookVisitResponse",
    "QueueEntrySchema",
    "QueueSchema",
    "VisitSchema",
    "VisitStatusUpdateRequest",
    "VisitStatusUpdateResponse",
    "AppointmentSchema",
    "CancelAppointmentRequest",
    "CancelAppointmentResponse",
    "ActivityEntrySchema",
    "HandlerSessionRequest",
    "RecordActivityRequest",
]
