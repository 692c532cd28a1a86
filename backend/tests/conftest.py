"""Shared fixtures: in-memory and SQLite stores, and fakes for the Gemini client."""

from types import SimpleNamespace

import pytest

from insightvault.errors import GenerationError
from insightvault.models.analysis_entry import AnalysisEntry
from insightvault.models.prompt_template import PromptTemplate
from insightvault.providers.memory_store import InMemoryLocalStore
from insightvault.providers.sqlite_store import SqliteLocalStore
from insightvault.services.generation_gateway import ContextDocument, GenerationGateway
from insightvault.services.prompts import KNOWLEDGE_BASE_FALLBACK


class FakeModels:
    """Stands in for ``genai.Client().aio.models``."""

    def __init__(self, text: str | None = "Generated text", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[dict] = []

    async def generate_content(self, *, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


class FakeGenaiClient:
    """Minimal google-genai client exposing only the async models API."""

    def __init__(self, text: str | None = "Generated text", error: Exception | None = None):
        self.models = FakeModels(text=text, error=error)
        self.aio = SimpleNamespace(models=self.models)


class FakeGateway:
    """Records gateway calls without touching the network."""

    max_context_entries = 50

    def __init__(
        self,
        analysis: str = "Generated analysis",
        answer: str = "An answer",
        error: Exception | None = None,
    ):
        self.analysis = analysis
        self.answer = answer
        self.error = error
        self.analysis_calls: list[tuple[str, str]] = []
        self.question_calls: list[tuple[str, ContextDocument]] = []
        self.context_entries: list[AnalysisEntry] = []

    async def generate_analysis(self, input_text: str, instruction: str) -> str:
        self.analysis_calls.append((input_text, instruction))
        if self.error:
            raise GenerationError(str(self.error)) from self.error
        return self.analysis

    def build_context_document(self, entries: list[AnalysisEntry]) -> ContextDocument:
        self.context_entries = entries
        return GenerationGateway(
            client=None, max_context_entries=self.max_context_entries
        ).build_context_document(entries)

    async def answer_question(self, question: str, context: ContextDocument) -> str:
        self.question_calls.append((question, context))
        if self.error:
            raise GenerationError(str(self.error)) from self.error
        return self.answer or KNOWLEDGE_BASE_FALLBACK


def make_entry(
    entry_id: str,
    timestamp: int,
    title: str | None = None,
    analysis: str = "Some analysis",
    original_text: str = "Original text",
) -> AnalysisEntry:
    return AnalysisEntry(
        id=entry_id,
        title=title or f"Entry {entry_id}",
        original_text=original_text,
        analysis=analysis,
        prompt_id="prompt-1",
        prompt_snapshot="Summarize",
        timestamp=timestamp,
    )


def make_template(template_id: str = "prompt-1", title: str = "Summary", content: str = "Summarize X"):
    return PromptTemplate(id=template_id, title=title, content=content, created_at=1_700_000_000_000)


@pytest.fixture
async def memory_store():
    store = InMemoryLocalStore()
    await store.initialize()
    return store


@pytest.fixture
async def sqlite_store(tmp_path):
    store = SqliteLocalStore(db_path=str(tmp_path / "vault" / "insightvault.db"))
    await store.initialize()
    return store


@pytest.fixture(params=["memory", "sqlite"])
async def store(request, tmp_path):
    """Each initialized store backend in turn."""
    if request.param == "memory":
        backend = InMemoryLocalStore()
    else:
        backend = SqliteLocalStore(db_path=str(tmp_path / "insightvault.db"))
    await backend.initialize()
    return backend


@pytest.fixture
def fake_gateway():
    return FakeGateway()
