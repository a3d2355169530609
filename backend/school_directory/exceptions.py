"""
School Directory — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for each error scenario.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers in main.py turn them into JSON error responses.
Who:   Raised by services and the record store; caught by global handlers.

Exception Hierarchy:
    SchoolDirectoryError (base)
    ├── ValidationError            → 400 Bad Request
    ├── NotFoundError              → 404 Not Found
    ├── FileStorageError           → 500 Internal Server Error
    ├── DatabaseError              → 500 Internal Server Error
    ├── ColumnAlreadyExistsError   → never reaches HTTP (schema migration signal)
    └── ApiClientError             → rendered by the web views as a notification
"""

from typing import Any, Dict, Optional


class SchoolDirectoryError(Exception):
    """
    Base exception for all School Directory errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SchoolDirectoryError):
    """
    Raised when client input fails validation.

    When:    Missing or blank required field, malformed contact or e-mail,
             non-positive student count, disallowed or oversized upload.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Number of students must be a positive integer",
            "details": {"field": "students"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(SchoolDirectoryError):
    """
    Raised when a requested resource does not exist.

    When:    GET /api/schools/{id} with an unknown identifier, or a stored
             image that is no longer on disk.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class FileStorageError(SchoolDirectoryError):
    """
    Raised when writing an uploaded image to disk fails.

    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(SchoolDirectoryError):
    """
    Raised when a store operation fails (connectivity, SQL error, ...).

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; the underlying
    error type travels in `context` and is only logged.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ColumnAlreadyExistsError(SchoolDirectoryError):
    """
    Raised by an additive column migration whose column is already present.

    The record store swallows exactly this kind during schema initialization;
    every other migration failure is logged as an error.
    """

    def __init__(self, table: str, column: str):
        super().__init__(
            message=f"Column '{column}' already exists on table '{table}'",
            context={"table": table, "column": column},
        )
        self.table = table
        self.column = column


class ApiClientError(SchoolDirectoryError):
    """
    Raised by the web views' API client on a transport failure or a
    non-2xx response.

    Attributes:
        status_code: HTTP status of the failed response (None on transport error)
    """

    def __init__(
        self,
        message: str = "The directory API could not be reached",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code
