"""Ordered, additive schema migrations for the local store.

Each step creates the collections it introduces if they are absent and never
drops or rewrites existing data, so re-applying a step is harmless. Bump the
schema by appending a new step; never edit a released one.
"""

import logging
import sqlite3
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Migration:
    """One additive schema step."""

    version: int
    description: str
    collections: tuple[str, ...]
    statements: tuple[str, ...]

    def apply_sqlite(self, conn: sqlite3.Connection) -> None:
        for statement in self.statements:
            conn.execute(statement)


MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        version=1,
        description="Create prompt templates collection",
        collections=("prompts",),
        statements=(
            """
            CREATE TABLE IF NOT EXISTS prompts (
                id          TEXT PRIMARY KEY,
                title       TEXT NOT NULL,
                content     TEXT NOT NULL,
                created_at  INTEGER NOT NULL
            )
            """,
        ),
    ),
    Migration(
        version=2,
        description="Create analysis entries collection with timestamp index",
        collections=("entries",),
        statements=(
            """
            CREATE TABLE IF NOT EXISTS entries (
                id               TEXT PRIMARY KEY,
                title            TEXT NOT NULL,
                original_text    TEXT NOT NULL,
                analysis         TEXT NOT NULL,
                prompt_id        TEXT NOT NULL,
                prompt_snapshot  TEXT NOT NULL,
                timestamp        INTEGER NOT NULL
            )
            """,
            "CREATE INDEX IF NOT EXISTS idx_entries_timestamp ON entries (timestamp)",
        ),
    ),
)

SCHEMA_VERSION = MIGRATIONS[-1].version


def pending_migrations(
    current_version: int,
    migrations: tuple[Migration, ...] = MIGRATIONS,
) -> list[Migration]:
    """Return the steps newer than ``current_version``, in version order."""
    return sorted(
        (m for m in migrations if m.version > current_version),
        key=lambda m: m.version,
    )


def migrate_sqlite(
    conn: sqlite3.Connection,
    migrations: tuple[Migration, ...] = MIGRATIONS,
) -> int:
    """
    Bring a SQLite database up to the newest schema version.

    The applied version is tracked in ``PRAGMA user_version``.

    Args:
        conn: Open connection; the caller owns commit/rollback.
        migrations: Migration steps to consider.

    Returns:
        The schema version after migration.
    """
    current = conn.execute("PRAGMA user_version").fetchone()[0]
    for migration in pending_migrations(current, migrations):
        logger.info(f"Applying schema migration v{migration.version}: {migration.description}")
        migration.apply_sqlite(conn)
        current = migration.version
        # PRAGMA does not accept bound parameters
        conn.execute(f"PRAGMA user_version = {int(current)}")
    return current
