"""Tests for schema migrations."""

import sqlite3

import pytest

from insightvault.providers.migrations import (
    MIGRATIONS,
    SCHEMA_VERSION,
    migrate_sqlite,
    pending_migrations,
)


def _tables(conn: sqlite3.Connection) -> set[str]:
    rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
    return {row[0] for row in rows}


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    yield connection
    connection.close()


class TestMigrationList:
    """The migration list itself."""

    def test_versions_are_strictly_increasing(self):
        versions = [m.version for m in MIGRATIONS]
        assert versions == sorted(set(versions))
        assert SCHEMA_VERSION == versions[-1] == 2

    def test_pending_from_scratch(self):
        assert [m.version for m in pending_migrations(0)] == [1, 2]

    def test_pending_from_v1(self):
        assert [m.version for m in pending_migrations(1)] == [2]

    def test_nothing_pending_at_latest(self):
        assert pending_migrations(SCHEMA_VERSION) == []


class TestSqliteMigration:
    """Applying migrations to SQLite."""

    def test_fresh_database(self, conn):
        assert migrate_sqlite(conn) == 2
        assert {"prompts", "entries"} <= _tables(conn)
        assert conn.execute("PRAGMA user_version").fetchone()[0] == 2

    def test_rerun_is_noop(self, conn):
        migrate_sqlite(conn)
        conn.execute("INSERT INTO prompts VALUES ('p1', 'A', 'B', 1)")

        assert migrate_sqlite(conn) == 2
        assert conn.execute("SELECT COUNT(*) FROM prompts").fetchone()[0] == 1

    def test_upgrade_from_v1_keeps_prompts(self, conn):
        migrate_sqlite(conn, MIGRATIONS[:1])
        assert _tables(conn) == {"prompts"}
        conn.execute("INSERT INTO prompts VALUES ('p1', 'A', 'B', 1)")

        assert migrate_sqlite(conn) == 2
        assert "entries" in _tables(conn)
        assert conn.execute("SELECT id FROM prompts").fetchall() == [("p1",)]

    def test_each_step_is_idempotent(self, conn):
        for migration in MIGRATIONS:
            migration.apply_sqlite(conn)
            migration.apply_sqlite(conn)
        assert {"prompts", "entries"} <= _tables(conn)
