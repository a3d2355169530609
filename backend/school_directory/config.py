"""
School Directory — Application Configuration
==============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads environment variables (or a .env file),
       validates types/ranges, and exposes them as one `Settings` object.
Who:   Constructed once at startup and passed to create_app(), which hands it
       to the connection provider, record store, upload handler and views.

Connection settings use the plain PORT, DB_HOST, DB_USER, DB_PASSWORD and
DB_NAME variables; DATABASE_URL overrides the DB_* parts when set.
"""

from typing import List, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults. Attributes are grouped by concern.
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3001, ge=1, le=65535)

    # ── Database ──────────────────────────────────────────────────────────
    # Individual connection parts; DATABASE_URL overrides all of them.
    db_driver: str = Field(
        default="postgresql+asyncpg",
        description="SQLAlchemy async driver, e.g. postgresql+asyncpg or mysql+aiomysql",
    )
    db_host: str = Field(default="localhost")
    db_port: Optional[int] = Field(default=5432, ge=1, le=65535)
    db_user: str = Field(default="school_directory")
    db_password: str = Field(default="")
    db_name: str = Field(default="school_directory")
    database_url: Optional[str] = Field(
        default=None,
        description="Full async database URL (takes precedence over DB_* parts)",
    )

    # 0 = open and close a connection for every store operation.
    # > 0 = keep a pool of that many connections.
    db_pool_size: int = Field(default=0, ge=0, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)

    # Set to false when several instances share one database; run
    # `alembic upgrade head` once per deployment instead.
    run_startup_migrations: bool = Field(default=True)

    # ── Uploads ───────────────────────────────────────────────────────────
    # Served publicly under /uploads; images land in <upload_root>/schoolImages
    upload_root: str = Field(default="./uploads")

    # 5 MiB
    max_upload_size: int = Field(default=5 * 1024 * 1024, ge=1024, le=52_428_800)

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Web views ─────────────────────────────────────────────────────────
    # Where the server-rendered pages reach the REST API.
    api_base_url: Optional[str] = Field(default=None)
    api_timeout: float = Field(default=10.0, gt=0, le=120)

    @property
    def api_url(self) -> str:
        """Base URL of the REST API; defaults to this server's own port."""
        if self.api_base_url:
            return self.api_base_url.rstrip("/")
        return f"http://localhost:{self.port}"

    # ── Logging ───────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @property
    def database_dsn(self) -> Union[str, URL]:
        """
        The URL handed to create_async_engine().

        DATABASE_URL wins when set; otherwise the DB_* parts are assembled
        with URL.create so passwords need no manual escaping.
        """
        if self.database_url:
            return self.database_url
        return URL.create(
            drivername=self.db_driver,
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )


# Default instance for uvicorn's `school_directory.main:app` and Alembic.
settings = Settings()
