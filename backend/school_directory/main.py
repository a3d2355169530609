"""
School Directory — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the per-application components from Settings,
       registers middleware, exception handlers, routes and static assets.
Who:   Called by uvicorn (school_directory.main:app) and by the tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐        │
    │  │  Req ID  │→│ Logging  │→│ GZip │→│ CORS │        │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘        │
    │                                                     │
    │  Routes:                                            │
    │  /api/schools  /api/stats  /uploads  /health        │
    │  /  /schools  /add-school  /static                  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ValidationError→400 │ NotFound→404 │ DB/File→500   │
    └─────────────────────────────────────────────────────┘

Components (one each per app, kept on app.state):
    EngineConnectionProvider → SchoolStore ┐
    UploadService ─────────────────────────┴→ SchoolService
    DirectoryClient (web views → REST API)

Lifecycle:
    Startup:  logging, upload directory, schema initialization
    Shutdown: dispose the connection provider
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from school_directory import __version__
from school_directory.config import Settings
from school_directory.database import EngineConnectionProvider
from school_directory.exceptions import (
    DatabaseError,
    FileStorageError,
    NotFoundError,
    SchoolDirectoryError,
    ValidationError,
)
from school_directory.middleware.logging import RequestLoggingMiddleware
from school_directory.middleware.request_id import RequestIDMiddleware, request_id_var
from school_directory.routes import health, schools, stats, uploads
from school_directory.services.school_service import SchoolService
from school_directory.services.school_store import SchoolStore
from school_directory.services.upload_service import UploadService
from school_directory.web import pages
from school_directory.web.client import DirectoryClient

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "An internal error occurred. Please try again later."


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.log_level == "DEBUG" else logging.WARNING
    )
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    store: SchoolStore = app.state.store
    upload_service: UploadService = app.state.upload_service

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings)
    logger.info("=" * 60)
    logger.info("School Directory %s starting up...", __version__)

    upload_service.images_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Upload directory: %s", upload_service.images_dir)

    if settings.run_startup_migrations:
        await store.initialize()
    else:
        logger.info("Startup migrations disabled; expecting `alembic upgrade head`")

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("API docs: http://%s:%d/docs", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("School Directory shutting down...")
    await store.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details=None) -> dict:
    return {
        "error": error,
        "message": message,
        "details": details,
        "request_id": request_id_var.get(""),
    }


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and one JSON error shape.

    Handler hierarchy:
        ValidationError        → 400 Bad Request
        NotFoundError          → 404 Not Found
        FileStorageError       → 500 Internal Server Error
        DatabaseError          → 500 Internal Server Error
        SchoolDirectoryError   → 500 Internal Server Error
        Exception (fallback)   → 500 Internal Server Error

    5xx responses never carry internal details; those are logged server-side.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body("not_found", exc.message),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", GENERIC_SERVER_ERROR),
        )

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        rid = request_id_var.get("")
        logger.error("[%s] File storage error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", GENERIC_SERVER_ERROR),
        )

    @app.exception_handler(SchoolDirectoryError)
    async def handle_application_error(request: Request, exc: SchoolDirectoryError):
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", GENERIC_SERVER_ERROR),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again later.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: configuration to build from; read from the environment
                  when omitted (tests pass their own)
    """
    settings = settings or Settings()

    app = FastAPI(
        title="School Directory API",
        description=(
            "Directory of schools: list, search and add schools with an "
            "optional image, plus aggregate statistics."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Components ────────────────────────────────────────────────────────
    store = SchoolStore(EngineConnectionProvider(settings))
    upload_service = UploadService(settings)

    app.state.settings = settings
    app.state.store = store
    app.state.upload_service = upload_service
    app.state.school_service = SchoolService(store, upload_service)
    app.state.directory_client = DirectoryClient(
        base_url=settings.api_url,
        timeout=settings.api_timeout,
    )

    # ── Middleware ────────────────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID runs first.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    app.include_router(schools.router)
    app.include_router(stats.router)
    app.include_router(uploads.router)
    app.include_router(health.router)
    app.include_router(pages.router)

    app.mount("/static", StaticFiles(directory=str(pages.STATIC_DIR)), name="static")

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "school_directory.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


app = create_app()
