"""Service for browsing and deleting saved analysis entries."""

import logging

from insightvault.models.analysis_entry import AnalysisEntry
from insightvault.providers.base import LocalStore

logger = logging.getLogger(__name__)


class EntryService:
    """Read and delete access to the analysis history."""

    def __init__(self, store: LocalStore):
        """Initialize EntryService."""
        self.store = store

    async def list_entries(self, query: str | None = None) -> list[AnalysisEntry]:
        """
        List entries, most recent first.

        Args:
            query: Optional case-insensitive filter on title or analysis text.
        """
        entries = await self.store.list_analysis_entries()
        if not query:
            return entries

        needle = query.lower()
        return [
            entry
            for entry in entries
            if needle in entry.title.lower() or needle in entry.analysis.lower()
        ]

    async def get(self, entry_id: str) -> AnalysisEntry | None:
        """Get an entry by ID."""
        return await self.store.get_analysis_entry(entry_id)

    async def delete(self, entry_id: str) -> None:
        """Delete an entry. Unknown IDs are ignored."""
        await self.store.delete_analysis_entry(entry_id)
        logger.info(f"Deleted analysis entry {entry_id}")
