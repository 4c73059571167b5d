"""
MongoDB Beanie models for visit records, appointments, the activity log and
token counters.
"""

from datetime import datetime
from typing import Optional

from beanie import Document
from pydantic import BaseModel, Field
from pymongo import ASCENDING, IndexModel


class PatientInfoMongo(BaseModel):
    """Embedded patient details captured at booking."""

    name: str = Field(..., description="Patient name")
    age: int = Field(..., description="Patient age")
    phone: str = Field(..., description="Contact number")
    reason: Optional[str] = Field(None, description="Reason for visit")


class VisitMongo(Document):
    """MongoDB model for a patient visit record."""

    visit_id: str = Field(..., description="Visit ID", unique=True)
    token: str = Field(..., description="Queue token")
    clinic_id: str = Field(..., description="Clinic ID")
    doctor_id: str = Field(..., description="Doctor ID")
    service_date: str = Field(..., description="Service date (YYYY-MM-DD)")
    queue_position: int = Field(..., description="Booking-order key")
    patient: PatientInfoMongo
    appointment_id: Optional[str] = Field(None, description="Linked appointment ID")
    status: str = Field(default="waiting")
    booked_at: datetime = Field(default_factory=datetime.utcnow)
    arrived_at: Optional[datetime] = None
    consultation_started_at: Optional[datetime] = None
    consultation_ended_at: Optional[datetime] = None
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    version: int = Field(default=0, description="Optimistic concurrency version")

    class Settings:
        name = "visits"
        indexes = [
            IndexModel([("visit_id", ASCENDING)], unique=True),
            [("doctor_id", 1), ("service_date", 1), ("queue_position", 1)],
            "status",
        ]


class AppointmentMongo(Document):
    """MongoDB model for a patient-facing booking."""

    appointment_id: str = Field(..., description="Appointment ID", unique=True)
    user_id: str = Field(..., description="Booking user ID")
    clinic_id: str
    clinic_name: str
    doctor_id: str
    doctor_name: str
    service_date: str = Field(..., description="Service date (YYYY-MM-DD)")
    token: str
    visit_id: str
    time_slot: Optional[str] = None
    status: str = Field(default="upcoming")
    cancellation_reason: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    cancelled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    version: int = Field(default=0, description="Optimistic concurrency version")

    class Settings:
        name = "appointments"
        indexes = [
            IndexModel([("appointment_id", ASCENDING)], unique=True),
            [("user_id", 1), ("service_date", 1)],
            "visit_id",
        ]


class ActivityLogMongo(Document):
    """MongoDB model for an append-only activity entry."""

    entry_id: str = Field(..., description="Entry ID", unique=True)
    handler_id: str
    handler_name: str
    action: str
    target_type: str
    target_id: str
    target_name: str
    details: str
    clinic_id: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "activity_log"
        indexes = [
            IndexModel([("entry_id", ASCENDING)], unique=True),
            [("clinic_id", 1), ("timestamp", -1)],
        ]


class TokenCounterMongo(Document):
    """One document per token scope; ``sequence`` only moves forward."""

    scope_key: str = Field(..., description="Allocation scope key", unique=True)
    sequence: int = Field(default=0)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "token_counters"
        indexes = [
            IndexModel([("scope_key", ASCENDING)], unique=True),
        ]
