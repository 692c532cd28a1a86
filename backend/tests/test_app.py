"""Tests for the FastAPI application."""

import pytest
from httpx import ASGITransport, AsyncClient

from conftest import FakeGenaiClient
from insightvault.dependencies import (
    get_generation_gateway,
    get_local_store,
    get_session_registry,
)
from insightvault.errors import StorageIOError, StorageUnavailable
from insightvault.main import create_app, lifespan
from insightvault.middleware.rate_limit import SESSION_HEADER, limiter
from insightvault.providers.memory_store import InMemoryLocalStore
from insightvault.services.generation_gateway import GenerationGateway
from insightvault.services.prompts import KNOWLEDGE_BASE_FALLBACK
from insightvault.services.session_registry import SessionRegistry


@pytest.fixture
def genai_client():
    return FakeGenaiClient(text="Generated text")


@pytest.fixture
def app(genai_client):
    """Create a fresh app instance for testing.

    Note: ASGITransport does not invoke the lifespan handler, so the store is
    initialized lazily by the first request and no default template is seeded.
    """
    app = create_app()
    store = InMemoryLocalStore()
    gateway = GenerationGateway(client=genai_client)
    registry = SessionRegistry()
    app.dependency_overrides[get_local_store] = lambda: store
    app.dependency_overrides[get_generation_gateway] = lambda: gateway
    app.dependency_overrides[get_session_registry] = lambda: registry
    limiter.reset()
    return app


@pytest.fixture
async def client(app):
    """Create an async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _create_prompt(client, title="Summary", content="Summarize X") -> dict:
    response = await client.post("/api/prompts", json={"title": title, "content": content})
    assert response.status_code == 201
    return response.json()


class TestHealthCheck:
    """Tests for the health check endpoint."""

    async def test_health_returns_healthy_status(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    async def test_health_reports_storage_failure(self, app, client):
        app.state.storage_error = "disk is read-only"
        response = await client.get("/health")
        assert response.status_code == 503
        assert response.json()["status"] == "unavailable"

    async def test_health_recovers_once_store_initializes(self, app, client):
        app.state.storage_error = "disk is read-only"

        assert (await client.get("/api/prompts")).status_code == 200

        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestPromptEndpoints:
    """Prompt template CRUD plus import/export."""

    async def test_create_list_update_delete(self, client):
        created = await _create_prompt(client)

        listed = (await client.get("/api/prompts")).json()["prompts"]
        assert [p["id"] for p in listed] == [created["id"]]

        response = await client.put(
            f"/api/prompts/{created['id']}", json={"title": "Summary v2", "content": "Summarize Y"}
        )
        assert response.status_code == 200
        assert response.json()["content"] == "Summarize Y"
        assert response.json()["createdAt"] == created["createdAt"]

        response = await client.delete(f"/api/prompts/{created['id']}")
        assert response.status_code == 200
        assert (await client.get(f"/api/prompts/{created['id']}")).status_code == 404

    async def test_create_requires_content(self, client):
        response = await client.post("/api/prompts", json={"title": "Summary", "content": ""})
        assert response.status_code == 422

    async def test_update_unknown_returns_404(self, client):
        response = await client.put("/api/prompts/missing", json={"title": "A", "content": "B"})
        assert response.status_code == 404

    async def test_export_sets_download_filename(self, client):
        await _create_prompt(client)

        response = await client.get("/api/prompts/export")

        assert response.status_code == 200
        assert 'filename="prompts_backup_' in response.headers["content-disposition"]
        (item,) = response.json()
        assert set(item) == {"id", "title", "content", "createdAt"}

    async def test_import_list(self, client):
        response = await client.post(
            "/api/prompts/import",
            json=[{"title": "A", "content": "B"}, {"title": "No content"}],
        )

        assert response.status_code == 200
        assert response.json() == {"imported": 1, "skipped": 1}

    async def test_import_rejects_non_list(self, client):
        response = await client.post("/api/prompts/import", json={"not": "a list"})

        assert response.status_code == 400
        assert (await client.get("/api/prompts")).json()["prompts"] == []


class TestAnalysisEndpoints:
    """Running, saving and browsing analyses."""

    async def test_empty_input_rejected(self, client, genai_client):
        prompt = await _create_prompt(client)

        response = await client.post(
            "/api/analysis/run", json={"input_text": "   ", "prompt_id": prompt["id"]}
        )

        assert response.status_code == 400
        assert genai_client.models.calls == []

    async def test_run_then_save_in_same_session(self, client):
        prompt = await _create_prompt(client)

        response = await client.post(
            "/api/analysis/run", json={"input_text": "Transcript T", "prompt_id": prompt["id"]}
        )
        assert response.status_code == 200
        assert response.json()["status"] == "ready"
        assert response.json()["draft"]["result"] == "Generated text"
        session_id = response.headers[SESSION_HEADER]

        response = await client.post(
            "/api/analysis/save", json={"title": "Interview 1"}, headers={SESSION_HEADER: session_id}
        )
        assert response.status_code == 201
        entry = response.json()
        assert entry["prompt_snapshot"] == "Summarize X"

        listed = (await client.get("/api/entries")).json()
        assert listed["total"] == 1
        assert listed["entries"][0]["id"] == entry["id"]

    async def test_save_from_other_session_rejected(self, client):
        prompt = await _create_prompt(client)
        await client.post(
            "/api/analysis/run", json={"input_text": "Transcript", "prompt_id": prompt["id"]}
        )

        # No session header: a fresh session with nothing to save
        response = await client.post("/api/analysis/save", json={})

        assert response.status_code == 400

    async def test_generation_failure_returns_502(self, client, genai_client):
        prompt = await _create_prompt(client)
        genai_client.models.error = ConnectionError("offline")
        state = await client.get("/api/analysis/state")
        headers = {SESSION_HEADER: state.headers[SESSION_HEADER]}

        response = await client.post(
            "/api/analysis/run",
            json={"input_text": "Transcript", "prompt_id": prompt["id"]},
            headers=headers,
        )

        assert response.status_code == 502
        state = (await client.get("/api/analysis/state", headers=headers)).json()
        assert state["status"] == "failed"
        assert state["error"]

    async def test_entry_search_and_delete(self, client):
        prompt = await _create_prompt(client)
        run = await client.post(
            "/api/analysis/run", json={"input_text": "Transcript", "prompt_id": prompt["id"]}
        )
        headers = {SESSION_HEADER: run.headers[SESSION_HEADER]}
        entry = (await client.post("/api/analysis/save", json={"title": "Pricing call"}, headers=headers)).json()

        assert (await client.get("/api/entries", params={"q": "PRICING"})).json()["total"] == 1
        assert (await client.get("/api/entries", params={"q": "nothing"})).json()["total"] == 0

        assert (await client.delete(f"/api/entries/{entry['id']}")).status_code == 200
        assert (await client.get(f"/api/entries/{entry['id']}")).status_code == 404


class TestKnowledgeBaseEndpoints:
    """Asking questions over saved entries."""

    async def test_ask_with_no_entries(self, client, genai_client):
        genai_client.models.text = None

        response = await client.post("/api/knowledge-base/ask", json={"question": "Anything?"})

        assert response.status_code == 200
        body = response.json()
        assert body["message"]["role"] == "model"
        assert body["message"]["text"] == KNOWLEDGE_BASE_FALLBACK
        assert body["entries_considered"] == 0

        conversation = (
            await client.get(
                "/api/knowledge-base/conversation",
                headers={SESSION_HEADER: response.headers[SESSION_HEADER]},
            )
        ).json()
        assert [m["role"] for m in conversation["messages"]] == ["user", "model"]
        assert conversation["status"] == "idle"

    async def test_empty_question_rejected(self, client):
        response = await client.post("/api/knowledge-base/ask", json={"question": " "})
        assert response.status_code == 400


class TestAppRouting:
    """Tests that app routes are correctly mounted."""

    async def test_unknown_route_returns_404(self, client):
        response = await client.get("/nonexistent")
        assert response.status_code == 404


class UnopenableStore(InMemoryLocalStore):
    """A store whose setup always fails."""

    async def _setup(self) -> None:
        raise StorageUnavailable("disk is read-only")


class TestLifespan:
    """Startup initializes the store and seeds a default template."""

    async def test_seeds_default_template(self, monkeypatch):
        store = InMemoryLocalStore()
        monkeypatch.setattr("insightvault.main.get_local_store", lambda: store)
        app = create_app()

        async with lifespan(app):
            assert app.state.storage_error is None
            assert len(await store.list_prompt_templates()) == 1

    async def test_unavailable_store_is_recorded(self, monkeypatch):
        monkeypatch.setattr("insightvault.main.get_local_store", lambda: UnopenableStore())
        app = create_app()

        async with lifespan(app):
            assert app.state.storage_error == "disk is read-only"

    async def test_seed_failure_does_not_abort_startup(self, monkeypatch):
        store = InMemoryLocalStore()

        async def failing_list():
            raise StorageIOError("database is locked")

        monkeypatch.setattr(store, "list_prompt_templates", failing_list)
        monkeypatch.setattr("insightvault.main.get_local_store", lambda: store)
        app = create_app()

        async with lifespan(app):
            assert app.state.storage_error is None
            assert store.initialized
