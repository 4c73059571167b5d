"""Doctor domain entity: schedule plus live queue state for a service day."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time
from typing import List, Optional

from ..enums.statuses import DoctorStatus
from ..errors import InvalidDoctorDataError
from ..value_objects.token_code import TokenCode

WEEKDAYS = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]

DEFAULT_WORKING_DAYS = WEEKDAYS[:5]


@dataclass
class Doctor:
    """Doctor domain entity.

    Status is free-form between the four values: staff may set any of them
    directly. Token fields always hold well-formed token codes, seeded from
    the surname initial when the doctor is created.
    """

    doctor_id: str
    clinic_id: str
    name: str
    specialty: str
    experience: Optional[str] = None
    working_days: List[str] = field(default_factory=lambda: list(DEFAULT_WORKING_DAYS))
    start_time: time = time(9, 0)
    end_time: time = time(17, 0)
    consultation_duration_minutes: int = 15
    max_tokens_per_day: int = 20
    status: DoctorStatus = DoctorStatus.NOT_ARRIVED
    current_token: str = ""
    next_token: str = ""
    total_patients_today: int = 0
    completed_today: int = 0
    version: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        self.status = DoctorStatus(self.status)
        if not self.current_token:
            self.current_token = TokenCode.seed_for(self.name).value
        if not self.next_token:
            self.next_token = self.current_token
        self._validate_doctor_data()

    def _validate_doctor_data(self) -> None:
        """Schedule and identity checks."""
        if not self.doctor_id or not self.doctor_id.strip():
            raise InvalidDoctorDataError("doctor_id", self.doctor_id, "must be a non-empty string")

        if not self.clinic_id or not self.clinic_id.strip():
            raise InvalidDoctorDataError("clinic_id", self.clinic_id, "must be a non-empty string")

        if not self.name or len(self.name.strip()) < 2:
            raise InvalidDoctorDataError("name", self.name, "must be at least 2 characters")

        if len(self.name) > 120:
            raise InvalidDoctorDataError("name", self.name[:80], "too long (max 120 characters)")

        unknown_days = [d for d in self.working_days if d not in WEEKDAYS]
        if unknown_days:
            raise InvalidDoctorDataError("working_days", unknown_days, "unknown weekday names")

        if self.start_time >= self.end_time:
            raise InvalidDoctorDataError(
                "start_time", self.start_time.isoformat(), "must be earlier than end_time"
            )

        if self.consultation_duration_minutes <= 0:
            raise InvalidDoctorDataError(
                "consultation_duration_minutes",
                self.consultation_duration_minutes,
                "must be positive",
            )

        if self.max_tokens_per_day <= 0:
            raise InvalidDoctorDataError(
                "max_tokens_per_day", self.max_tokens_per_day, "must be a positive integer"
            )

        for field_name in ("current_token", "next_token"):
            value = getattr(self, field_name)
            try:
                TokenCode(value)
            except ValueError as e:
                raise InvalidDoctorDataError(field_name, value, str(e)) from e

    @property
    def seed_token(self) -> str:
        return TokenCode.seed_for(self.name).value

    def set_status(self, new_status: DoctorStatus) -> DoctorStatus:
        """Set availability; any value is reachable. Returns the previous status."""
        old_status = self.status
        self.status = DoctorStatus(new_status)
        self.updated_at = datetime.utcnow()
        return old_status

    def start_consultation(self, token: str, next_token: Optional[str]) -> None:
        """A patient entered the room: advance the displayed tokens."""
        self.status = DoctorStatus.WITH_PATIENT
        self.current_token = TokenCode(token).value
        if next_token:
            self.next_token = TokenCode(next_token).value
        self.updated_at = datetime.utcnow()

    def finish_consultation(self) -> None:
        self.completed_today += 1
        if self.status == DoctorStatus.WITH_PATIENT:
            self.status = DoctorStatus.AVAILABLE
        self.updated_at = datetime.utcnow()

    def register_booking(self) -> None:
        self.total_patients_today += 1
        self.updated_at = datetime.utcnow()

    def reset_day(self, booked_for_day: int) -> None:
        """Start a fresh service day (explicit reset job only)."""
        self.status = DoctorStatus.NOT_ARRIVED
        self.current_token = self.seed_token
        self.next_token = self.seed_token
        self.total_patients_today = booked_for_day
        self.completed_today = 0
        self.updated_at = datetime.utcnow()
