"""
School Directory — Submission Form Validation
===============================================

What:  Rules the "Add School" page checks before anything is sent to the API.
How:   SchoolForm validates raw form text; validate_form() returns either the
       cleaned form or a {field: message} dict for inline errors.

Rules (first failing rule per field wins):
    name      at least 2 characters        "Name is required"
    address   at least 5 characters        "Address is required"
    city      at least 2 characters        "City is required"
    state     at least 2 characters        "State is required"
    contact   at least 7 characters        "Contact must be at least 7 digits"
              at most 15 characters        "Contact too long"
              digits only                  "Contact must contain only digits"
    email_id  valid address                "Invalid email"
    students  present                      "Number of students is required"
              digits only                  "Must be a valid number"
              greater than 0               "Must be greater than 0"
"""

import base64
import re
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from school_directory.schemas.school import is_valid_email
from school_directory.services.upload_service import ALLOWED_CONTENT_TYPES, ImageUpload

FORM_FIELDS = ("name", "address", "city", "state", "contact", "email_id", "students")

_MIN_LENGTHS = {
    "name": (2, "Name is required"),
    "address": (5, "Address is required"),
    "city": (2, "City is required"),
    "state": (2, "State is required"),
}

_DIGITS = re.compile(r"^[0-9]+$")


def _fail(message: str) -> PydanticCustomError:
    return PydanticCustomError("form_error", message)


class SchoolForm(BaseModel):
    name: str
    address: str
    city: str
    state: str
    contact: str
    email_id: str
    students: int

    @field_validator("name", "address", "city", "state", "contact", "email_id", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("name", "address", "city", "state")
    @classmethod
    def min_length(cls, v: str, info) -> str:
        minimum, message = _MIN_LENGTHS[info.field_name]
        if len(v) < minimum:
            raise _fail(message)
        return v

    @field_validator("contact")
    @classmethod
    def contact_digits(cls, v: str) -> str:
        if len(v) < 7:
            raise _fail("Contact must be at least 7 digits")
        if len(v) > 15:
            raise _fail("Contact too long")
        if not _DIGITS.match(v):
            raise _fail("Contact must contain only digits")
        return v

    @field_validator("email_id")
    @classmethod
    def email_format(cls, v: str) -> str:
        if not is_valid_email(v):
            raise _fail("Invalid email")
        return v

    @field_validator("students", mode="before")
    @classmethod
    def students_count(cls, v: Any) -> int:
        text = "" if v is None else str(v).strip()
        if not text:
            raise _fail("Number of students is required")
        if not _DIGITS.match(text):
            raise _fail("Must be a valid number")
        number = int(text)
        if number <= 0:
            raise _fail("Must be greater than 0")
        return number

    def as_form_data(self) -> Dict[str, str]:
        """Every field as text, ready for a multipart POST."""
        return {name: str(value) for name, value in self.model_dump().items()}


def validate_form(values: Mapping[str, Any]) -> Tuple[Optional[SchoolForm], Dict[str, str]]:
    """
    Returns (form, {}) when every rule passes, else (None, errors).

    `errors` maps a field name to the message shown under that input.
    """
    try:
        return SchoolForm(**{name: values.get(name) for name in FORM_FIELDS}), {}
    except ValidationError as e:
        errors: Dict[str, str] = {}
        for err in e.errors():
            field = str(err["loc"][0]) if err["loc"] else "form"
            errors.setdefault(field, err["msg"])
        return None, errors


def image_preview(upload: Optional[ImageUpload]) -> Optional[str]:
    """
    In-memory data URL of a selected image, for re-rendering the preview.

    Returns None when nothing was selected or the content type is not an
    image the upload handler would accept.
    """
    if upload is None or not upload.filename or not upload.content:
        return None
    content_type = (upload.content_type or "").split(";")[0].strip().lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        return None
    encoded = base64.b64encode(upload.content).decode("ascii")
    return f"data:{content_type};base64,{encoded}"
