"""
School Directory — School Service (Business Logic Orchestrator)
=================================================================

What:  Composes the upload handler and the record store for every endpoint.
Who:   Called by the route handlers; holds no per-request state.

Creation Flow (POST /api/schools):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────┐
    │  Form    │───▶│  Validate   │───▶│  Store image │───▶│  Insert  │
    │  (Route) │    │  fields     │    │  (optional)  │    │  (SQL)   │
    └──────────┘    └─────────────┘    └──────────────┘    └──────────┘

    Field validation runs before anything touches disk or database, so a
    rejected payload never leaves a partial insert or an orphan file.
    An insert failure removes the image that was just written.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from school_directory.exceptions import SchoolDirectoryError, ValidationError
from school_directory.schemas.school import (
    SchoolCreate,
    SchoolCreatedResponse,
    SchoolResponse,
    StatsResponse,
)
from school_directory.services.school_store import SchoolStore
from school_directory.services.upload_service import ImageUpload, UploadService

logger = logging.getLogger(__name__)


def format_student_total(total: int) -> str:
    """
    Display text for the student sum.

    >>> format_student_total(1500)
    '1.5K+'
    >>> format_student_total(999)
    '999'
    """
    if total >= 1000:
        return f"{total / 1000:.1f}K+"
    return str(total)


def validate_school_fields(fields: Dict[str, Any]) -> SchoolCreate:
    """
    Validate raw form fields.

    Raises:
        ValidationError: the first failing field becomes the message; every
            failing field is listed under context["errors"]
    """
    try:
        return SchoolCreate(**{name: fields.get(name) for name in SchoolCreate.model_fields})
    except PydanticValidationError as e:
        errors: Dict[str, str] = {}
        for err in e.errors():
            field = str(err["loc"][0]) if err["loc"] else "form"
            errors.setdefault(field, err["msg"])
        first_field = next(iter(errors))
        raise ValidationError(
            message=errors[first_field],
            field=first_field,
            context={"errors": errors},
        )


class SchoolService:
    """
    Business logic for school records.

    Error Handling:
        ValidationError and NotFoundError propagate unchanged; store failures
        arrive as DatabaseError from the record store.
    """

    def __init__(self, store: SchoolStore, uploads: UploadService):
        self.store = store
        self.uploads = uploads

    async def list_schools(self) -> List[SchoolResponse]:
        rows = await self.store.list_all()
        return [SchoolResponse.model_validate(row) for row in rows]

    async def get_school(self, school_id: int) -> SchoolResponse:
        row = await self.store.get_by_id(school_id)
        return SchoolResponse.model_validate(row)

    async def create_school(
        self,
        fields: Dict[str, Any],
        image: Optional[ImageUpload] = None,
    ) -> SchoolCreatedResponse:
        """
        Validate → store image → insert.

        Args:
            fields: raw form values (name, address, city, state, contact,
                    email_id, students); missing keys count as blank
            image:  optional uploaded file

        Returns:
            SchoolCreatedResponse with the new id and image reference

        Raises:
            ValidationError:  invalid field or rejected upload (400)
            FileStorageError: image could not be written (500)
            DatabaseError:    insert failed (500)
        """
        school = validate_school_fields(fields)
        image_ref = await self.uploads.save(image)

        record = school.model_dump()
        record["image"] = image_ref

        try:
            new_id = await self.store.insert(record)
        except SchoolDirectoryError:
            await self.uploads.cleanup(image_ref)
            raise

        logger.info("School '%s' created with id %d", school.name, new_id)
        return SchoolCreatedResponse(
            message="School added successfully",
            id=new_id,
            image=image_ref,
        )

    async def get_stats(self) -> StatsResponse:
        stats = await self.store.aggregate_stats()
        return StatsResponse(
            total_schools=stats.total_schools,
            total_students=format_student_total(stats.total_students),
            total_cities=stats.total_cities,
        )
