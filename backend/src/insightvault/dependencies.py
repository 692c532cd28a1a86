"""Dependency injection for FastAPI."""

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, Response

from insightvault.config import Settings, get_settings
from insightvault.middleware.rate_limit import SESSION_HEADER
from insightvault.providers.base import LocalStore
from insightvault.providers.firestore_store import FirestoreLocalStore
from insightvault.providers.memory_store import InMemoryLocalStore
from insightvault.providers.sqlite_store import SqliteLocalStore
from insightvault.services.analysis_orchestrator import AnalysisOrchestrator
from insightvault.services.entry_service import EntryService
from insightvault.services.generation_gateway import GenerationGateway
from insightvault.services.prompt_template_service import PromptTemplateService
from insightvault.services.session_registry import SessionRegistry


@lru_cache
def get_local_store() -> LocalStore:
    """Get cached local store for the configured backend."""
    settings = get_settings()
    if settings.storage_backend == "firestore":
        return FirestoreLocalStore(
            project_id=settings.gcp_project_id,
            use_emulator=settings.use_firebase_emulator,
            emulator_host=settings.firestore_emulator_host,
        )
    if settings.storage_backend == "memory":
        return InMemoryLocalStore()
    return SqliteLocalStore(db_path=settings.sqlite_path)


async def get_initialized_store(
    store: Annotated[LocalStore, Depends(get_local_store)],
) -> LocalStore:
    """Get the local store, initializing it on first use."""
    await store.initialize()
    return store


@lru_cache
def get_generation_gateway() -> GenerationGateway:
    """Get cached GenerationGateway."""
    return GenerationGateway.from_settings(get_settings())


@lru_cache
def get_session_registry() -> SessionRegistry:
    """Get cached SessionRegistry."""
    settings = get_settings()
    return SessionRegistry(ttl=timedelta(minutes=settings.session_ttl_minutes))


def get_prompt_template_service(
    store: Annotated[LocalStore, Depends(get_initialized_store)],
) -> PromptTemplateService:
    """Get PromptTemplateService instance."""
    return PromptTemplateService(store=store)


def get_entry_service(
    store: Annotated[LocalStore, Depends(get_initialized_store)],
) -> EntryService:
    """Get EntryService instance."""
    return EntryService(store=store)


def get_orchestrator(
    response: Response,
    store: Annotated[LocalStore, Depends(get_initialized_store)],
    gateway: Annotated[GenerationGateway, Depends(get_generation_gateway)],
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
    session_id: Annotated[str | None, Header(alias=SESSION_HEADER)] = None,
) -> AnalysisOrchestrator:
    """
    Get the AnalysisOrchestrator for the caller's session.

    The session ID travels in the ``X-Session-Id`` header; the (possibly new)
    ID is echoed back on every response.
    """
    session_id, orchestrator = registry.get_or_create(
        session_id,
        factory=lambda: AnalysisOrchestrator(store=store, gateway=gateway),
    )
    response.headers[SESSION_HEADER] = session_id
    return orchestrator


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
LocalStoreDep = Annotated[LocalStore, Depends(get_initialized_store)]
GenerationGatewayDep = Annotated[GenerationGateway, Depends(get_generation_gateway)]
SessionRegistryDep = Annotated[SessionRegistry, Depends(get_session_registry)]
PromptTemplateServiceDep = Annotated[PromptTemplateService, Depends(get_prompt_template_service)]
EntryServiceDep = Annotated[EntryService, Depends(get_entry_service)]
OrchestratorDep = Annotated[AnalysisOrchestrator, Depends(get_orchestrator)]
