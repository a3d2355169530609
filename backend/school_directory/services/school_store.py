"""
School Directory — Record Store
=================================

What:  Persistence for school records and the lifecycle of the `schools` table.
How:   SQLAlchemy Core statements against schools_table, each operation run on
       a connection acquired from the ConnectionProvider.
Who:   Called by SchoolService (API layer) and by the lifespan (initialize).

Operations:
    list_all()          SELECT ... ORDER BY created_at DESC, id DESC
    get_by_id(id)       SELECT ... WHERE id = :id        → NotFoundError if absent
    insert(record)      INSERT ...                       → new id
    aggregate_stats()   COUNT(*), COUNT(DISTINCT city), COALESCE(SUM(students), 0)
    initialize()        CREATE TABLE IF NOT EXISTS + additive column migrations

Schema Lifecycle:
    initialize() is safe on every startup. The table is created when absent,
    then each entry in ADDITIVE_COLUMNS is added to tables created by an older
    revision. A column that is already there raises ColumnAlreadyExistsError,
    which is the expected steady state and is skipped. Any other migration
    failure is logged and startup continues.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import desc, distinct, func, inspect, select, text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection

from school_directory.database import Base, ConnectionProvider
from school_directory.exceptions import (
    ColumnAlreadyExistsError,
    DatabaseError,
    NotFoundError,
)
from school_directory.models.school import schools_table

logger = logging.getLogger(__name__)

# Columns introduced after the first revision of the table: (name, DDL type clause)
ADDITIVE_COLUMNS: Sequence[Tuple[str, str]] = (
    ("students", "INTEGER NOT NULL DEFAULT 0"),
)

# Driver error codes meaning "duplicate column"
#   1060    MySQL / MariaDB  ER_DUP_FIELDNAME
#   42701   PostgreSQL       duplicate_column (SQLSTATE)
DUPLICATE_COLUMN_CODES = {1060, "42701"}

# Identifiers outside a signed 64-bit integer cannot exist in the table
MIN_ID = -(2 ** 63)
MAX_ID = 2 ** 63 - 1


@dataclass(frozen=True)
class SchoolStats:
    """Raw aggregates over every record."""

    total_schools: int
    total_cities: int
    total_students: int


class SchoolStore:
    """
    Record store for the `schools` table.

    Every public method acquires its own connection; nothing is cached
    between calls.
    """

    def __init__(self, provider: ConnectionProvider):
        self.provider = provider

    # ── Schema lifecycle ──────────────────────────────────────────────────

    async def initialize(self) -> None:
        """Create the table if missing, then apply additive column migrations."""
        try:
            async with self.provider.acquire() as conn:
                await conn.run_sync(Base.metadata.create_all, tables=[schools_table], checkfirst=True)
        except SQLAlchemyError as e:
            logger.error("Could not create table '%s': %s", schools_table.name, str(e))
            return

        for column, ddl in ADDITIVE_COLUMNS:
            try:
                await self.add_column(schools_table.name, column, ddl)
                logger.info("Added column '%s' to table '%s'", column, schools_table.name)
            except ColumnAlreadyExistsError:
                continue
            except SQLAlchemyError as e:
                logger.error(
                    "Migration adding column '%s' to '%s' failed: %s",
                    column,
                    schools_table.name,
                    str(e),
                )

        logger.info("Table '%s' is ready", schools_table.name)

    async def add_column(self, table: str, column: str, ddl: str) -> None:
        """
        ALTER TABLE ... ADD COLUMN, idempotently.

        Raises:
            ColumnAlreadyExistsError: the column is present, either before the
                statement ran or because another instance added it first
        """
        async with self.provider.acquire() as conn:
            if column in await _column_names(conn, table):
                raise ColumnAlreadyExistsError(table, column)
            try:
                await conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {ddl}"))
            except DBAPIError as e:
                if _error_code(e) in DUPLICATE_COLUMN_CODES:
                    raise ColumnAlreadyExistsError(table, column) from e
                raise

    async def dispose(self) -> None:
        await self.provider.dispose()

    # ── Queries ───────────────────────────────────────────────────────────

    async def list_all(self) -> List[Dict[str, Any]]:
        """All records, newest first."""
        query = select(schools_table).order_by(
            desc(schools_table.c.created_at),
            desc(schools_table.c.id),
        )
        try:
            async with self.provider.acquire() as conn:
                result = await conn.execute(query)
                return [dict(row._mapping) for row in result]
        except SQLAlchemyError as e:
            logger.error("Database error listing schools: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch schools",
                context={"error_type": type(e).__name__},
            )

    async def get_by_id(self, school_id: int) -> Dict[str, Any]:
        """
        One record by identifier.

        Raises:
            NotFoundError: no record has this id
            DatabaseError: query failed
        """
        if not MIN_ID <= school_id <= MAX_ID:
            raise NotFoundError(resource="school", resource_id=str(school_id))

        query = select(schools_table).where(schools_table.c.id == school_id)
        try:
            async with self.provider.acquire() as conn:
                row = (await conn.execute(query)).first()
        except SQLAlchemyError as e:
            logger.error("Database error fetching school %s: %s", school_id, str(e))
            raise DatabaseError(
                message="Failed to fetch school",
                context={"school_id": school_id, "error_type": type(e).__name__},
            )

        if row is None:
            raise NotFoundError(resource="school", resource_id=str(school_id))
        return dict(row._mapping)

    async def insert(self, record: Dict[str, Any]) -> int:
        """
        Persist a validated record and return its assigned identifier.

        `record` holds name, address, city, state, contact, email_id,
        students and image; id and created_at are assigned here.
        """
        try:
            async with self.provider.acquire() as conn:
                result = await conn.execute(schools_table.insert().values(**record))
                new_id = result.inserted_primary_key[0]
        except SQLAlchemyError as e:
            logger.error("Database error inserting school: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to add school",
                context={"error_type": type(e).__name__},
            )

        logger.info("School %s inserted", new_id)
        return int(new_id)

    async def aggregate_stats(self) -> SchoolStats:
        query = select(
            func.count(schools_table.c.id),
            func.count(distinct(schools_table.c.city)),
            func.coalesce(func.sum(schools_table.c.students), 0),
        )
        try:
            async with self.provider.acquire() as conn:
                total_schools, total_cities, total_students = (await conn.execute(query)).one()
        except SQLAlchemyError as e:
            logger.error("Database error computing stats: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch stats",
                context={"error_type": type(e).__name__},
            )

        return SchoolStats(
            total_schools=int(total_schools or 0),
            total_cities=int(total_cities or 0),
            total_students=int(total_students or 0),
        )


async def _column_names(conn: AsyncConnection, table: str) -> set:
    return await conn.run_sync(
        lambda sync_conn: {col["name"] for col in inspect(sync_conn).get_columns(table)}
    )


def _error_code(exc: DBAPIError) -> Optional[Any]:
    """
    Driver error code of a DBAPI failure.

    PostgreSQL drivers expose the SQLSTATE (pgcode / sqlstate); MySQL drivers
    put the numeric error code first in args.
    """
    orig = exc.orig
    if orig is None:
        return None
    for attr in ("pgcode", "sqlstate"):
        code = getattr(orig, attr, None)
        if code:
            return code
    args = getattr(orig, "args", ())
    if args and isinstance(args[0], int):
        return args[0]
    return None
