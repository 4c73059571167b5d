"""
Common schemas shared by every router: response envelopes and small
reusable components.
"""

import re
import uuid
from datetime import datetime
from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, Field, validator

T = TypeVar("T")

# ============================================================================
# BASE RESPONSE SCHEMAS
# ============================================================================


class ApiResponse(BaseModel, Generic[T]):
    success: bool = Field(True, description="Operation success status")
    message: str = Field("", description="Response message")
    timestamp: str = Field(
        default_factory=lambda: datetime.utcnow().isoformat(),
        description="Response timestamp",
    )
    request_id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Request ID for tracking")
    data: Optional[T] = Field(None, description="Response payload")


class ErrorResponse(BaseModel):
    """Standardized error response schema."""

    success: bool = Field(False, description="Operation success status")
    error: str = Field(..., description="Error type/code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: str = Field(
        default_factory=lambda: datetime.utcnow().isoformat(),
        description="Error timestamp",
    )
    request_id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Request ID for tracking")


# ============================================================================
# REUSABLE COMPONENT SCHEMAS
# ============================================================================


class PatientDetails(BaseModel):
    """Patient details captured at booking."""

    name: str = Field(..., min_length=2, max_length=80, description="Patient full name")
    age: int = Field(..., ge=0, le=150, description="Age")
    phone: str = Field(..., min_length=8, max_length=20, description="Contact number")
    reason: Optional[str] = Field(None, max_length=500, description="Reason for visit")

    @validator("name")
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

    @validator("phone")
    def validate_phone(cls, v):
        s = (v or "").strip().replace(" ", "").replace("-", "")
        if re.fullmatch(r"^\+[1-9]\d{7,14}$", s):
            return s
        if re.fullmatch(r"^\d{8,16}$", s):
            return s
        raise ValueError("Phone must be E.164 format or 8-16 local digits")
