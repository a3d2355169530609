"""
School Directory — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite file (aiosqlite) and upload directory
       under tmp_path, so tests never share state.

Fixture Hierarchy:
    test_settings ─┬─ store        initialized SchoolStore
                   ├─ uploads      UploadService
                   └─ app ── client        httpx AsyncClient over ASGITransport
                          └─ live_client   DirectoryClient calling the same app
"""

import os
import tempfile

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["UPLOAD_ROOT"] = tempfile.mkdtemp(prefix="school_directory_test_")
os.environ["LOG_LEVEL"] = "WARNING"

from school_directory.config import Settings  # noqa: E402
from school_directory.database import EngineConnectionProvider  # noqa: E402
from school_directory.main import create_app  # noqa: E402
from school_directory.services.school_store import SchoolStore  # noqa: E402
from school_directory.services.upload_service import UploadService  # noqa: E402
from school_directory.web.client import DirectoryClient  # noqa: E402


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at a per-test SQLite file and upload root."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'schools.db'}",
        upload_root=str(tmp_path / "uploads"),
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def store(test_settings):
    store = SchoolStore(EngineConnectionProvider(test_settings))
    await store.initialize()
    yield store
    await store.dispose()


@pytest.fixture
def uploads(test_settings):
    return UploadService(test_settings)


@pytest_asyncio.fixture
async def app(test_settings):
    """
    Application with an initialized schema.

    ASGITransport does not run the lifespan, so the schema is initialized
    here the way startup would.
    """
    application = create_app(test_settings)
    await application.state.store.initialize()
    yield application
    await application.state.store.dispose()


@pytest_asyncio.fixture
async def client(app):
    """
    HTTPX AsyncClient talking to the app in-process.

    Usage:
        async def test_health(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def live_client(app):
    """Points the web views' API client at the same in-process app."""
    directory_client = DirectoryClient("http://test", transport=ASGITransport(app=app))
    app.state.directory_client = directory_client
    return directory_client


@pytest.fixture
def failing_client(app):
    """Web views' API client whose every request fails with a connection error."""

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    directory_client = DirectoryClient("http://test", transport=httpx.MockTransport(refuse))
    app.state.directory_client = directory_client
    return directory_client


@pytest.fixture
def sample_image_bytes():
    """PNG signature plus padding; uploads are checked by name and content type only."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def school_fields():
    """Valid form fields for a new school."""
    return {
        "name": "Green Valley High School",
        "address": "123 Education Street",
        "city": "Mumbai",
        "state": "Maharashtra",
        "contact": "9876543210",
        "email_id": "contact@greenvalley.edu",
        "students": "1200",
    }


@pytest.fixture
def school_record(school_fields):
    """A validated record as the store receives it."""
    record = dict(school_fields)
    record["students"] = int(record["students"])
    record["image"] = None
    return record
