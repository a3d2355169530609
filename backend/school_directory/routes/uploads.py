"""
School Directory — Stored Image Route
=======================================

What:  GET /uploads/{path}, serves stored school images.
How:   The public reference saved on a record (/uploads/schoolImages/<file>)
       is resolved by UploadService, which refuses paths outside the upload
       root and raises NotFoundError for missing files.
"""

import mimetypes

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from school_directory.dependencies import get_upload_service
from school_directory.schemas.school import ErrorResponse
from school_directory.services.upload_service import UploadService

router = APIRouter(tags=["Uploads"])


@router.get(
    "/uploads/{file_path:path}",
    summary="Serve stored school images",
    responses={
        200: {"description": "Image file"},
        400: {"description": "Invalid path", "model": ErrorResponse},
        404: {"description": "File not found", "model": ErrorResponse},
    },
)
async def serve_upload(
    file_path: str,
    uploads: UploadService = Depends(get_upload_service),
) -> FileResponse:
    full_path = uploads.resolve(file_path)
    media_type, _ = mimetypes.guess_type(full_path.name)
    return FileResponse(
        path=str(full_path),
        media_type=media_type or "application/octet-stream",
        headers={"Cache-Control": "public, max-age=86400"},
    )
