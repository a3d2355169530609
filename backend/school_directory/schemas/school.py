"""
School Directory — Pydantic Request/Response Schemas
======================================================

What:  Pydantic models defining the API contract.
How:   SchoolCreate validates the multipart form fields of POST /api/schools;
       the response models shape every JSON body the API returns and feed
       the OpenAPI docs.
"""

import re
from datetime import datetime
from typing import Any, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

CONTACT_PATTERN = r"^[0-9]{7,15}$"


def is_valid_email(value: str) -> bool:
    """
    Bare addr-spec check (local@domain).

    The display-name form `Name <addr@host>` is rejected, and no DNS lookup
    is made.
    """
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class SchoolCreate(BaseModel):
    """
    Server-side validation of a new school record.

    Every text field is stripped; blank or whitespace-only values count as
    missing. `students` arrives as form text and must parse as an integer > 0.
    """

    name: str
    address: str
    city: str
    state: str
    contact: str
    email_id: str
    students: int

    @field_validator("name", "address", "city", "state", "contact", "email_id", mode="before")
    @classmethod
    def require_text(cls, v: Any, info: ValidationInfo) -> str:
        if v is None or (isinstance(v, str) and not v.strip()):
            raise PydanticCustomError("missing_field", "{field} is required", {"field": info.field_name})
        if not isinstance(v, str):
            raise PydanticCustomError("text_expected", "{field} must be text", {"field": info.field_name})
        return v.strip()

    @field_validator("contact")
    @classmethod
    def contact_digits(cls, v: str) -> str:
        if not re.match(CONTACT_PATTERN, v):
            raise PydanticCustomError("contact_format", "Contact must be 7 to 15 digits")
        return v

    @field_validator("email_id")
    @classmethod
    def email_format(cls, v: str) -> str:
        if not is_valid_email(v):
            raise PydanticCustomError("email_format", "Email address is not valid")
        return v

    @field_validator("students", mode="before")
    @classmethod
    def positive_integer(cls, v: Any) -> int:
        if v is None or (isinstance(v, str) and not v.strip()):
            raise PydanticCustomError("missing_field", "{field} is required", {"field": "students"})
        if isinstance(v, bool):
            raise PydanticCustomError("students_format", "Number of students must be a positive integer")
        if isinstance(v, int):
            number = v
        else:
            text = str(v).strip()
            if not re.match(r"^[0-9]+$", text):
                raise PydanticCustomError("students_format", "Number of students must be a positive integer")
            number = int(text)
        if number <= 0:
            raise PydanticCustomError("students_format", "Number of students must be a positive integer")
        return number


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class SchoolResponse(BaseModel):
    """Full representation of a stored school record."""

    id: int = Field(description="Store-assigned identifier")
    name: str
    address: str
    city: str
    state: str
    contact: str
    email_id: str
    students: int = Field(default=0, description="Number of students")
    image: Optional[str] = Field(
        default=None,
        description="Public path of the school image (null when none was uploaded)",
    )
    created_at: datetime = Field(description="When the record was created")

    model_config = {"from_attributes": True}


class SchoolCreatedResponse(BaseModel):
    """Returned by POST /api/schools with HTTP 201."""

    message: str = Field(default="School added successfully")
    id: int = Field(description="Identifier assigned to the new school")
    image: Optional[str] = Field(default=None, description="Stored image path or null")


class StatsResponse(BaseModel):
    """
    Aggregate counts over every record, computed at query time.

    totalStudents is display text: "1.5K+" from 1000 upwards, else the plain
    number ("999").
    """

    total_schools: int = Field(alias="totalSchools")
    total_students: str = Field(alias="totalStudents")
    total_cities: int = Field(alias="totalCities")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    """
    Standardized error body for every failed request.

    Example:
        {
            "error": "not_found",
            "message": "School with ID '42' was not found",
            "details": null,
            "request_id": "a1b2c3d4"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Constant acknowledgement returned by GET /health."""

    status: str = Field(default="API is running")
    version: str
    uptime_seconds: float
