"""
School Directory — Record Store Tests
=======================================

What:  Tests for SchoolStore queries and the schema lifecycle.
How:   A real SQLite database per test (aiosqlite), plus a provider that
       always fails for the error paths.

What we test:
    ✅ Insert assigns increasing ids; list is newest first
    ✅ get_by_id raises NotFoundError for unknown ids
    ✅ Aggregates on empty and populated tables
    ✅ initialize() is idempotent and upgrades a table without `students`
    ✅ Duplicate-column detection by driver error code
    ✅ SQL failures surface as DatabaseError
"""

from contextlib import asynccontextmanager

import pytest
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, OperationalError

from school_directory.database import ConnectionProvider, EngineConnectionProvider
from school_directory.exceptions import ColumnAlreadyExistsError, DatabaseError, NotFoundError
from school_directory.services import school_store
from school_directory.services.school_store import SchoolStore, _error_code

LEGACY_TABLE = """
CREATE TABLE schools (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    address TEXT NOT NULL,
    city TEXT NOT NULL,
    state TEXT NOT NULL,
    contact VARCHAR(15) NOT NULL,
    email_id TEXT NOT NULL,
    image TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL
)
"""


class BrokenProvider(ConnectionProvider):
    """Every acquire() fails as if the database were unreachable."""

    @asynccontextmanager
    async def acquire(self):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))
        yield

    async def dispose(self):
        pass


def _record(school_record, **overrides):
    record = dict(school_record)
    record.update(overrides)
    return record


class TestQueries:

    @pytest.mark.asyncio
    async def test_insert_assigns_increasing_ids(self, store, school_record):
        first = await store.insert(_record(school_record, name="First School"))
        second = await store.insert(_record(school_record, name="Second School"))
        assert second > first

    @pytest.mark.asyncio
    async def test_list_newest_first(self, store, school_record):
        await store.insert(_record(school_record, name="Older School"))
        await store.insert(_record(school_record, name="Newer School"))

        rows = await store.list_all()

        assert [row["name"] for row in rows] == ["Newer School", "Older School"]
        assert rows[0]["created_at"] is not None

    @pytest.mark.asyncio
    async def test_list_empty(self, store):
        assert await store.list_all() == []

    @pytest.mark.asyncio
    async def test_get_by_id_round_trip(self, store, school_record):
        new_id = await store.insert(_record(school_record, image="/uploads/schoolImages/a.png"))

        row = await store.get_by_id(new_id)

        assert row["id"] == new_id
        assert row["email_id"] == school_record["email_id"]
        assert row["students"] == 1200
        assert row["image"] == "/uploads/schoolImages/a.png"

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, store):
        with pytest.raises(NotFoundError, match="School with ID '999' was not found"):
            await store.get_by_id(999)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("school_id", [2 ** 63, -(2 ** 63) - 1, 10 ** 20])
    async def test_get_by_id_beyond_integer_range(self, store, school_id):
        with pytest.raises(NotFoundError):
            await store.get_by_id(school_id)

    @pytest.mark.asyncio
    async def test_stats_on_empty_table(self, store):
        stats = await store.aggregate_stats()
        assert (stats.total_schools, stats.total_cities, stats.total_students) == (0, 0, 0)

    @pytest.mark.asyncio
    async def test_stats_counts_distinct_cities(self, store, school_record):
        await store.insert(_record(school_record, city="Mumbai", students=700))
        await store.insert(_record(school_record, city="Mumbai", students=300))
        await store.insert(_record(school_record, city="Delhi", students=500))

        stats = await store.aggregate_stats()

        assert stats.total_schools == 3
        assert stats.total_cities == 2
        assert stats.total_students == 1500


class TestSchemaLifecycle:

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, store, school_record):
        await store.insert(school_record)
        await store.initialize()
        await store.initialize()
        assert len(await store.list_all()) == 1

    @pytest.mark.asyncio
    async def test_initialize_upgrades_legacy_table(self, test_settings):
        provider = EngineConnectionProvider(test_settings)
        async with provider.acquire() as conn:
            await conn.execute(text(LEGACY_TABLE))
            await conn.execute(text(
                "INSERT INTO schools (name, address, city, state, contact, email_id) "
                "VALUES ('Old School', '1 Old Road', 'Pune', 'Maharashtra', '1234567', 'old@school.edu')"
            ))

        store = SchoolStore(provider)
        try:
            await store.initialize()
            rows = await store.list_all()
            stats = await store.aggregate_stats()
        finally:
            await store.dispose()

        assert rows[0]["students"] == 0
        assert stats.total_students == 0

    @pytest.mark.asyncio
    async def test_add_existing_column_raises(self, store):
        with pytest.raises(ColumnAlreadyExistsError) as exc_info:
            await store.add_column("schools", "students", "INTEGER NOT NULL DEFAULT 0")
        assert exc_info.value.column == "students"

    @pytest.mark.asyncio
    async def test_other_migration_failures_are_logged(self, store, monkeypatch, caplog):
        async def no_columns(conn, table):
            return set()

        # The inspection misses the column, so the ALTER itself fails
        monkeypatch.setattr(school_store, "_column_names", no_columns)

        with pytest.raises(OperationalError):
            await store.add_column("schools", "students", "INTEGER NOT NULL DEFAULT 0")

        await store.initialize()
        assert "Migration adding column 'students'" in caplog.text

    def test_error_code_postgres(self):
        class PgError(Exception):
            pgcode = "42701"

        assert _error_code(DBAPIError("ALTER", {}, PgError())) == "42701"

    def test_error_code_asyncpg_sqlstate(self):
        class AsyncpgError(Exception):
            sqlstate = "42701"

        assert _error_code(DBAPIError("ALTER", {}, AsyncpgError())) == "42701"

    def test_error_code_mysql(self):
        orig = Exception(1060, "Duplicate column name 'students'")
        assert _error_code(DBAPIError("ALTER", {}, orig)) == 1060

    def test_error_code_unknown(self):
        assert _error_code(DBAPIError("ALTER", {}, Exception("something else"))) is None


class TestFailures:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "operation, args, message",
        [
            ("list_all", (), "Failed to fetch schools"),
            ("get_by_id", (1,), "Failed to fetch school"),
            ("aggregate_stats", (), "Failed to fetch stats"),
        ],
    )
    async def test_queries_raise_database_error(self, operation, args, message):
        store = SchoolStore(BrokenProvider())
        with pytest.raises(DatabaseError, match=message):
            await getattr(store, operation)(*args)

    @pytest.mark.asyncio
    async def test_insert_raises_database_error(self, school_record):
        store = SchoolStore(BrokenProvider())
        with pytest.raises(DatabaseError, match="Failed to add school"):
            await store.insert(school_record)

    @pytest.mark.asyncio
    async def test_initialize_survives_unreachable_database(self):
        await SchoolStore(BrokenProvider()).initialize()
