"""
School Directory — Upload Handler
===================================

What:  Validates and stores the optional image attached to a new school.
How:   Checks extension, declared content type and size, then writes the bytes
       under <upload_root>/schoolImages with a generated filename.
Who:   Called by SchoolService while creating a school; resolve() is used by
       the /uploads route to serve stored images.

Validation:
    1. Extension:     .jpeg .jpg .png .gif (case-insensitive)
    2. Content type:  image/jpeg image/jpg image/png image/gif (declared by client)
    3. Size:          at most max_upload_size bytes (5 MiB by default)

    Both 1 and 2 must pass; a .pdf declared as image/png is still rejected.

Filenames:
    school-<epoch ms>-<random 0..999999999><ext>
    e.g. school-1718000000000-483920117.png

    Timestamp plus random suffix is treated as unique; no collision check.

Directory Structure:
    uploads/                      ← upload_root, served at /uploads
    └── schoolImages/
        ├── school-1718000000000-483920117.png
        └── school-1718000004211-9123.jpg
"""

import logging
import os
import random
import time
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional

import aiofiles

from school_directory.config import Settings
from school_directory.exceptions import FileStorageError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif"}

# Form field carrying the file
UPLOAD_FIELD = "image"

PUBLIC_PREFIX = "/uploads"
IMAGES_DIR = "schoolImages"


@dataclass
class ImageUpload:
    """One file part read from a multipart request."""

    filename: Optional[str]
    content_type: Optional[str]
    content: bytes


class UploadService:
    """
    Upload handler for school images.

    Lifecycle of an upload:
        1. Route reads at most max_upload_size + 1 bytes from the multipart part
        2. validate() checks extension, content type and size
        3. store() writes the file and returns its public reference
        4. If the insert fails afterwards, cleanup() removes the file
    """

    def __init__(self, settings: Settings):
        self.upload_root = Path(settings.upload_root).resolve()
        self.images_dir = self.upload_root / IMAGES_DIR
        self.max_size = settings.max_upload_size

    def validate_extension(self, filename: str) -> str:
        """Returns the normalized extension (lowercase, with dot)."""
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message="Only image files are allowed (jpeg, jpg, png, gif)",
                field=UPLOAD_FIELD,
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_content_type(self, content_type: Optional[str]) -> None:
        declared = (content_type or "").split(";")[0].strip().lower()
        if declared not in ALLOWED_CONTENT_TYPES:
            raise ValidationError(
                message="Only image files are allowed (jpeg, jpg, png, gif)",
                field=UPLOAD_FIELD,
                context={"content_type": declared, "allowed": sorted(ALLOWED_CONTENT_TYPES)},
            )

    def validate_size(self, size: int) -> None:
        if size > self.max_size:
            max_mb = self.max_size / (1024 * 1024)
            raise ValidationError(
                message=f"Image is too large. Maximum size is {max_mb:.0f}MB.",
                field=UPLOAD_FIELD,
                context={"max_size": self.max_size, "actual_size": size},
            )

    def validate(self, filename: str, content_type: Optional[str], content: bytes) -> str:
        """
        Run every check; returns the extension to store the file under.

        Raises:
            ValidationError: disallowed extension or content type, or oversize
        """
        ext = self.validate_extension(filename)
        self.validate_content_type(content_type)
        self.validate_size(len(content))
        return ext

    def generate_filename(self, extension: str) -> str:
        timestamp = int(time.time() * 1000)
        suffix = random.randint(0, 999_999_999)
        return f"school-{timestamp}-{suffix}{extension}"

    async def store(self, content: bytes, extension: str) -> str:
        """
        Write validated content to the images directory.

        Returns:
            Public reference, e.g. /uploads/schoolImages/school-1718000000000-42.png

        Raises:
            FileStorageError if the directory or the file cannot be written
        """
        filename = self.generate_filename(extension)
        absolute_path = self.images_dir / filename

        try:
            self.images_dir.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store image at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

        logger.info("Image stored: %s (%d bytes)", filename, len(content))
        return f"{PUBLIC_PREFIX}/{IMAGES_DIR}/{filename}"

    async def save(self, upload: Optional[ImageUpload]) -> Optional[str]:
        """
        Validate and store one upload.

        No upload, or a file part without a filename, yields None, which
        becomes a null image reference on the record.
        """
        if upload is None or not upload.filename:
            return None
        ext = self.validate(upload.filename, upload.content_type, upload.content)
        return await self.store(upload.content, ext)

    def resolve(self, reference: str) -> Path:
        """
        Map a public reference or a path relative to /uploads onto disk.

        Raises:
            ValidationError: the path escapes the upload root
            NotFoundError:   no such file
        """
        relative = reference
        if relative.startswith(PUBLIC_PREFIX + "/"):
            relative = relative[len(PUBLIC_PREFIX) + 1:]

        full_path = (self.upload_root / PurePosixPath(relative)).resolve()
        if full_path != self.upload_root and self.upload_root not in full_path.parents:
            raise ValidationError(message="Invalid file path", context={"path": reference})

        if not full_path.is_file():
            raise NotFoundError(resource="file", resource_id=reference)
        return full_path

    async def cleanup(self, reference: Optional[str]) -> None:
        """
        Best-effort removal of a stored image (after a failed insert).

        Failures are logged and never raised.
        """
        if not reference:
            return
        try:
            path = self.resolve(reference)
            os.remove(path)
            logger.info("Cleaned up image: %s", path.name)
        except NotFoundError:
            logger.debug("Cleanup: image already gone: %s", reference)
        except (OSError, ValidationError) as e:
            logger.warning("Failed to clean up image %s: %s", reference, str(e))

