"""
School Directory — FastAPI Dependencies
=========================================

What:  Hands the per-application components to route handlers.
How:   create_app() builds the components once from Settings and keeps them
       on app.state; these dependencies read them back for each request.
"""

from fastapi import Request

from school_directory.config import Settings
from school_directory.services.school_service import SchoolService
from school_directory.services.upload_service import UploadService
from school_directory.web.client import DirectoryClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_school_service(request: Request) -> SchoolService:
    return request.app.state.school_service


def get_upload_service(request: Request) -> UploadService:
    return request.app.state.upload_service


def get_directory_client(request: Request) -> DirectoryClient:
    """API client used by the server-rendered views."""
    return request.app.state.directory_client
