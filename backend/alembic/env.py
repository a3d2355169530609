"""
Alembic Migration Environment
===============================

What:  Runs the managed migrations against the same database the app uses.
How:   Builds an async engine from Settings.database_dsn and runs the
       revisions through connection.run_sync().
Who:   Called by `alembic` CLI commands (upgrade, downgrade, revision).

Deployments with several app instances set RUN_STARTUP_MIGRATIONS=false and
run `alembic upgrade head` once instead of letting each instance migrate.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine
from alembic import context

from school_directory.config import settings
from school_directory.database import Base

# Registers the schools table on Base.metadata for --autogenerate
from school_directory.models.school import School  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str:
    dsn = settings.database_dsn
    if isinstance(dsn, str):
        return dsn
    return dsn.render_as_string(hide_password=False)


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout without connecting."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    connectable = create_async_engine(settings.database_dsn, poolclass=pool.NullPool)

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
