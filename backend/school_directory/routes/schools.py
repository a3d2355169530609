"""
School Directory — School Route Handlers
==========================================

What:  GET /api/schools, POST /api/schools, GET /api/schools/{id}.
How:   Reads the request, delegates to SchoolService, returns JSON.
Who:   Called by the server-rendered views through DirectoryClient, or by any
       HTTP client.

POST /api/schools (multipart/form-data):
    name, address, city, state, contact, email_id, students   text fields
    image                                                     optional file

    Every text field is declared optional here so that a missing field is
    reported as a 400 validation error by the service instead of FastAPI's 422.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile

from school_directory.dependencies import get_school_service, get_upload_service
from school_directory.schemas.school import (
    ErrorResponse,
    SchoolCreatedResponse,
    SchoolResponse,
)
from school_directory.services.school_service import SchoolService
from school_directory.services.upload_service import ImageUpload, UploadService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Schools"])


@router.get(
    "/schools",
    response_model=List[SchoolResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all schools",
    description="Returns every school record, most recently created first.",
)
async def list_schools(
    service: SchoolService = Depends(get_school_service),
) -> List[SchoolResponse]:
    return await service.list_schools()


@router.post(
    "/schools",
    status_code=201,
    response_model=SchoolCreatedResponse,
    responses={
        201: {"description": "School created", "model": SchoolCreatedResponse},
        400: {"description": "Missing or invalid field, or rejected image", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Add a school",
    description=(
        "Creates a school from multipart form data. The optional `image` must be "
        "a JPEG, PNG or GIF of at most 5MB."
    ),
)
async def create_school(
    name: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    state: Optional[str] = Form(None),
    contact: Optional[str] = Form(None),
    email_id: Optional[str] = Form(None),
    students: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None, description="School image (jpeg, jpg, png, gif; max 5MB)"),
    service: SchoolService = Depends(get_school_service),
    uploads: UploadService = Depends(get_upload_service),
) -> SchoolCreatedResponse:
    fields = {
        "name": name,
        "address": address,
        "city": city,
        "state": state,
        "contact": contact,
        "email_id": email_id,
        "students": students,
    }

    upload = None
    if image is not None:
        try:
            # One byte past the limit is enough to detect an oversized file
            content = await image.read(uploads.max_size + 1)
            upload = ImageUpload(
                filename=image.filename,
                content_type=image.content_type,
                content=content,
            )
        finally:
            await image.close()

    logger.info(
        "Received create request: name=%s, image=%s",
        name,
        upload.filename if upload else None,
    )
    return await service.create_school(fields, upload)


@router.get(
    "/schools/{school_id}",
    response_model=SchoolResponse,
    responses={
        404: {"description": "School not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single school by ID",
)
async def get_school(
    school_id: int = Path(..., description="Identifier of the school"),
    service: SchoolService = Depends(get_school_service),
) -> SchoolResponse:
    return await service.get_school(school_id)
