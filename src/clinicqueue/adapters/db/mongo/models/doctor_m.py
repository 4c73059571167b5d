"""MongoDB Beanie model for Doctor documents."""

from datetime import datetime
from typing import List, Optional

from beanie import Document
from pydantic import Field
from pymongo import ASCENDING, IndexModel


class DoctorMongo(Document):
    """MongoDB model for Doctor entity."""

    doctor_id: str = Field(..., description="Doctor ID", unique=True)
    clinic_id: str = Field(..., description="Owning clinic ID")
    name: str = Field(..., description="Doctor display name")
    specialty: str = Field(..., description="Specialty")
    experience: Optional[str] = Field(None, description="Free-text experience summary")
    working_days: List[str] = Field(default_factory=list)
    start_time: str = Field(..., description="HH:MM")
    end_time: str = Field(..., description="HH:MM")
    consultation_duration_minutes: int = Field(default=15)
    max_tokens_per_day: int = Field(default=20)
    status: str = Field(default="not_arrived", description="not_arrived/available/with_patient/break")
    current_token: str = Field(..., description="Token currently being served")
    next_token: str = Field(..., description="Token expected next")
    total_patients_today: int = Field(default=0)
    completed_today: int = Field(default=0)
    version: int = Field(default=0, description="Optimistic concurrency counter")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "doctors"
        indexes = [
            IndexModel([("doctor_id", ASCENDING)], unique=True),
            "clinic_id",
            "status",
            "created_at",
        ]
