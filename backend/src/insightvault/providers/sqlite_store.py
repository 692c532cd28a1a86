"""SQLite-backed local store."""

import asyncio
import logging
import os
import sqlite3
from collections.abc import Callable
from contextlib import closing
from typing import Any, TypeVar

from insightvault.errors import StorageIOError, StorageUnavailable
from insightvault.models.analysis_entry import AnalysisEntry
from insightvault.models.prompt_template import PromptTemplate
from insightvault.providers.base import LocalStore
from insightvault.providers.migrations import migrate_sqlite

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PROMPT_COLUMNS = "id, title, content, created_at"
_ENTRY_COLUMNS = "id, title, original_text, analysis, prompt_id, prompt_snapshot, timestamp"

_UPSERT_PROMPT = f"""
INSERT INTO prompts ({_PROMPT_COLUMNS}) VALUES (:id, :title, :content, :created_at)
ON CONFLICT(id) DO UPDATE SET
    title = excluded.title,
    content = excluded.content,
    created_at = excluded.created_at
"""

_UPSERT_ENTRY = f"""
INSERT INTO entries ({_ENTRY_COLUMNS})
VALUES (:id, :title, :original_text, :analysis, :prompt_id, :prompt_snapshot, :timestamp)
ON CONFLICT(id) DO UPDATE SET
    title = excluded.title,
    original_text = excluded.original_text,
    analysis = excluded.analysis,
    prompt_id = excluded.prompt_id,
    prompt_snapshot = excluded.prompt_snapshot,
    timestamp = excluded.timestamp
"""

# rowid is stable across upserts, so it orders ties by first insertion
_SELECT_ENTRIES = f"SELECT {_ENTRY_COLUMNS} FROM entries ORDER BY timestamp DESC, rowid DESC"


class SqliteLocalStore(LocalStore):
    """
    Local store persisted to a single SQLite file.

    Each operation opens its own short-lived connection in a worker thread, so
    concurrent operations never share a connection.
    """

    def __init__(self, db_path: str):
        """
        Initialize SqliteLocalStore.

        Args:
            db_path: Path of the database file; parent directories are created.
        """
        super().__init__()
        self.db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _setup_sync(self) -> int:
        directory = os.path.dirname(self.db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with closing(self._connect()) as conn:
            with conn:
                return migrate_sqlite(conn)

    async def _setup(self) -> None:
        try:
            version = await asyncio.to_thread(self._setup_sync)
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Cannot open local store at {self.db_path}: {e}")
            raise StorageUnavailable(f"Cannot open local store at {self.db_path}") from e
        logger.info(f"Opened {self.db_path} (schema v{version})")

    async def _run(self, operation: Callable[[sqlite3.Connection], T]) -> T:
        """Run ``operation`` in one transaction on a worker thread."""
        self._require_initialized()

        def _execute() -> T:
            with closing(self._connect()) as conn:
                with conn:
                    return operation(conn)

        try:
            return await asyncio.to_thread(_execute)
        except sqlite3.Error as e:
            logger.error(f"Local store operation failed: {e}")
            raise StorageIOError(str(e)) from e

    @staticmethod
    def _row_dict(row: sqlite3.Row) -> dict[str, Any]:
        return {key: row[key] for key in row.keys()}

    # Prompt templates

    async def list_prompt_templates(self) -> list[PromptTemplate]:
        rows = await self._run(
            lambda conn: conn.execute(f"SELECT {_PROMPT_COLUMNS} FROM prompts").fetchall()
        )
        return [PromptTemplate.from_store(row["id"], self._row_dict(row)) for row in rows]

    async def get_prompt_template(self, template_id: str) -> PromptTemplate | None:
        row = await self._run(
            lambda conn: conn.execute(
                f"SELECT {_PROMPT_COLUMNS} FROM prompts WHERE id = ?", (template_id,)
            ).fetchone()
        )
        if row is None:
            return None
        return PromptTemplate.from_store(row["id"], self._row_dict(row))

    async def upsert_prompt_template(self, template: PromptTemplate) -> None:
        data = template.to_store()
        await self._run(lambda conn: conn.execute(_UPSERT_PROMPT, data))

    async def delete_prompt_template(self, template_id: str) -> None:
        await self._run(lambda conn: conn.execute("DELETE FROM prompts WHERE id = ?", (template_id,)))

    # Analysis entries

    async def list_analysis_entries(self) -> list[AnalysisEntry]:
        rows = await self._run(lambda conn: conn.execute(_SELECT_ENTRIES).fetchall())
        return [AnalysisEntry.from_store(row["id"], self._row_dict(row)) for row in rows]

    async def get_analysis_entry(self, entry_id: str) -> AnalysisEntry | None:
        row = await self._run(
            lambda conn: conn.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM entries WHERE id = ?", (entry_id,)
            ).fetchone()
        )
        if row is None:
            return None
        return AnalysisEntry.from_store(row["id"], self._row_dict(row))

    async def upsert_analysis_entry(self, entry: AnalysisEntry) -> None:
        data = entry.to_store()
        await self._run(lambda conn: conn.execute(_UPSERT_ENTRY, data))

    async def delete_analysis_entry(self, entry_id: str) -> None:
        await self._run(lambda conn: conn.execute("DELETE FROM entries WHERE id = ?", (entry_id,)))
