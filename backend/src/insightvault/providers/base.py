"""Abstract base class for the local store - persistence abstraction layer."""

import asyncio
import logging
from abc import ABC, abstractmethod

from insightvault.errors import StorageIOError
from insightvault.models.analysis_entry import AnalysisEntry
from insightvault.models.prompt_template import PromptTemplate

logger = logging.getLogger(__name__)


class LocalStore(ABC):
    """
    Durable key-value persistence for two independent collections.

    Collections:
    - prompts: PromptTemplate records keyed by id
    - entries: AnalysisEntry records keyed by id, listed newest first

    Every operation is a self-contained async round trip that either returns a
    value or raises StorageIOError. ``initialize()`` must complete before any
    other operation; concurrent callers share a single underlying setup.
    """

    PROMPTS_COLLECTION = "prompts"
    ENTRIES_COLLECTION = "entries"

    def __init__(self):
        self._initialized = False
        self._init_lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """
        Establish or upgrade the storage schema.

        Idempotent. A failed setup leaves the store uninitialized so that a
        later call can try again.

        Raises:
            StorageUnavailable: If persistent storage cannot be provided.
        """
        if self._initialized:
            return
        async with self._init_lock:
            if self._initialized:
                return
            await self._setup()
            self._initialized = True
            logger.info(f"{type(self).__name__} initialized")

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise StorageIOError("Local store is not initialized")

    @abstractmethod
    async def _setup(self) -> None:
        """Backend-specific schema setup, run once by initialize()."""
        pass

    # Prompt templates

    @abstractmethod
    async def list_prompt_templates(self) -> list[PromptTemplate]:
        """Return all templates. Order is unspecified."""
        pass

    @abstractmethod
    async def get_prompt_template(self, template_id: str) -> PromptTemplate | None:
        """Return a template by ID, or None if absent."""
        pass

    @abstractmethod
    async def upsert_prompt_template(self, template: PromptTemplate) -> None:
        """Insert the template, or overwrite it wholesale if the ID exists."""
        pass

    @abstractmethod
    async def delete_prompt_template(self, template_id: str) -> None:
        """Remove a template. Absent IDs are a no-op."""
        pass

    # Analysis entries

    @abstractmethod
    async def list_analysis_entries(self) -> list[AnalysisEntry]:
        """
        Return all entries ordered by descending timestamp.

        Entries sharing a timestamp are returned most recently inserted first.
        """
        pass

    @abstractmethod
    async def get_analysis_entry(self, entry_id: str) -> AnalysisEntry | None:
        """Return an entry by ID, or None if absent."""
        pass

    @abstractmethod
    async def upsert_analysis_entry(self, entry: AnalysisEntry) -> None:
        """Insert the entry, or overwrite it wholesale if the ID exists."""
        pass

    @abstractmethod
    async def delete_analysis_entry(self, entry_id: str) -> None:
        """Remove an entry. Absent IDs are a no-op."""
        pass
