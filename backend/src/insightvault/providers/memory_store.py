"""In-process local store, for tests and ephemeral runs."""

import itertools

from insightvault.models.analysis_entry import AnalysisEntry
from insightvault.models.prompt_template import PromptTemplate
from insightvault.providers.base import LocalStore


class InMemoryLocalStore(LocalStore):
    """Local store kept in plain dicts. Contents are lost with the process."""

    def __init__(self):
        super().__init__()
        self._prompts: dict[str, dict] = {}
        self._entries: dict[str, dict] = {}
        # First-insertion sequence per entry ID, for stable tie ordering
        self._entry_seq: dict[str, int] = {}
        self._counter = itertools.count()

    async def _setup(self) -> None:
        pass

    # Prompt templates

    async def list_prompt_templates(self) -> list[PromptTemplate]:
        self._require_initialized()
        return [PromptTemplate.from_store(doc_id, data) for doc_id, data in self._prompts.items()]

    async def get_prompt_template(self, template_id: str) -> PromptTemplate | None:
        self._require_initialized()
        data = self._prompts.get(template_id)
        if data is None:
            return None
        return PromptTemplate.from_store(template_id, data)

    async def upsert_prompt_template(self, template: PromptTemplate) -> None:
        self._require_initialized()
        self._prompts[template.id] = template.to_store()

    async def delete_prompt_template(self, template_id: str) -> None:
        self._require_initialized()
        self._prompts.pop(template_id, None)

    # Analysis entries

    async def list_analysis_entries(self) -> list[AnalysisEntry]:
        self._require_initialized()
        ordered = sorted(
            self._entries.items(),
            key=lambda item: (item[1]["timestamp"], self._entry_seq[item[0]]),
            reverse=True,
        )
        return [AnalysisEntry.from_store(doc_id, data) for doc_id, data in ordered]

    async def get_analysis_entry(self, entry_id: str) -> AnalysisEntry | None:
        self._require_initialized()
        data = self._entries.get(entry_id)
        if data is None:
            return None
        return AnalysisEntry.from_store(entry_id, data)

    async def upsert_analysis_entry(self, entry: AnalysisEntry) -> None:
        self._require_initialized()
        if entry.id not in self._entry_seq:
            self._entry_seq[entry.id] = next(self._counter)
        self._entries[entry.id] = entry.to_store()

    async def delete_analysis_entry(self, entry_id: str) -> None:
        self._require_initialized()
        self._entries.pop(entry_id, None)
        self._entry_seq.pop(entry_id, None)
