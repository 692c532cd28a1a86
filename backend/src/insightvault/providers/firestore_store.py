"""Firestore-backed local store."""

import logging
import os

from google.api_core import exceptions as gcp_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import firestore

from insightvault.errors import StorageIOError, StorageUnavailable
from insightvault.models.analysis_entry import AnalysisEntry
from insightvault.models.prompt_template import PromptTemplate
from insightvault.providers.base import LocalStore
from insightvault.providers.migrations import SCHEMA_VERSION, pending_migrations

logger = logging.getLogger(__name__)


class FirestoreLocalStore(LocalStore):
    """
    Local store kept in two Firestore collections.

    Firestore creates collections on first write, so migrations only record
    the applied schema version in a ``_meta/schema`` document.
    """

    META_COLLECTION = "_meta"
    SCHEMA_DOCUMENT = "schema"

    def __init__(
        self,
        project_id: str,
        use_emulator: bool = False,
        emulator_host: str = "localhost:8080",
        client: firestore.Client | None = None,
    ):
        """
        Initialize FirestoreLocalStore.

        Args:
            project_id: GCP project ID.
            use_emulator: Whether to use Firebase Emulator.
            emulator_host: Emulator host:port.
            client: Pre-built Firestore client; created on initialize() if omitted.
        """
        super().__init__()
        self.project_id = project_id
        self.use_emulator = use_emulator
        self.emulator_host = emulator_host
        self._client = client

    @property
    def client(self) -> firestore.Client:
        """Get the Firestore client instance."""
        self._require_initialized()
        return self._client

    async def _setup(self) -> None:
        if self.use_emulator:
            os.environ["FIRESTORE_EMULATOR_HOST"] = self.emulator_host

        try:
            if self._client is None:
                self._client = firestore.Client(project=self.project_id or None)

            meta_ref = self._client.collection(self.META_COLLECTION).document(self.SCHEMA_DOCUMENT)
            meta = meta_ref.get()
            current = (meta.to_dict() or {}).get("version", 0) if meta.exists else 0

            steps = pending_migrations(current)
            if steps:
                collections = [c for step in steps for c in step.collections]
                meta_ref.set({"version": SCHEMA_VERSION}, merge=True)
                logger.info(
                    f"Firestore schema v{current} -> v{SCHEMA_VERSION} (collections: {collections})"
                )
        except (auth_exceptions.GoogleAuthError, gcp_exceptions.GoogleAPIError) as e:
            logger.error(f"Cannot reach Firestore project '{self.project_id}': {e}")
            raise StorageUnavailable(f"Firestore is unavailable: {e}") from e

    def _collection(self, name: str):
        return self.client.collection(name)

    # Prompt templates

    async def list_prompt_templates(self) -> list[PromptTemplate]:
        try:
            docs = self._collection(self.PROMPTS_COLLECTION).stream()
            return [PromptTemplate.from_store(doc.id, doc.to_dict()) for doc in docs]
        except gcp_exceptions.GoogleAPIError as e:
            raise StorageIOError(str(e)) from e

    async def get_prompt_template(self, template_id: str) -> PromptTemplate | None:
        try:
            doc = self._collection(self.PROMPTS_COLLECTION).document(template_id).get()
        except gcp_exceptions.GoogleAPIError as e:
            raise StorageIOError(str(e)) from e
        if not doc.exists:
            return None
        return PromptTemplate.from_store(doc.id, doc.to_dict())

    async def upsert_prompt_template(self, template: PromptTemplate) -> None:
        try:
            self._collection(self.PROMPTS_COLLECTION).document(template.id).set(template.to_store())
        except gcp_exceptions.GoogleAPIError as e:
            raise StorageIOError(str(e)) from e

    async def delete_prompt_template(self, template_id: str) -> None:
        # Firestore deletes of missing documents succeed silently
        try:
            self._collection(self.PROMPTS_COLLECTION).document(template_id).delete()
        except gcp_exceptions.GoogleAPIError as e:
            raise StorageIOError(str(e)) from e

    # Analysis entries

    async def list_analysis_entries(self) -> list[AnalysisEntry]:
        # Ties on timestamp fall back to document name order, which is stable
        query = self._collection(self.ENTRIES_COLLECTION).order_by(
            "timestamp", direction=firestore.Query.DESCENDING
        )
        try:
            return [AnalysisEntry.from_store(doc.id, doc.to_dict()) for doc in query.stream()]
        except gcp_exceptions.GoogleAPIError as e:
            raise StorageIOError(str(e)) from e

    async def get_analysis_entry(self, entry_id: str) -> AnalysisEntry | None:
        try:
            doc = self._collection(self.ENTRIES_COLLECTION).document(entry_id).get()
        except gcp_exceptions.GoogleAPIError as e:
            raise StorageIOError(str(e)) from e
        if not doc.exists:
            return None
        return AnalysisEntry.from_store(doc.id, doc.to_dict())

    async def upsert_analysis_entry(self, entry: AnalysisEntry) -> None:
        try:
            self._collection(self.ENTRIES_COLLECTION).document(entry.id).set(entry.to_store())
        except gcp_exceptions.GoogleAPIError as e:
            raise StorageIOError(str(e)) from e

    async def delete_analysis_entry(self, entry_id: str) -> None:
        try:
            self._collection(self.ENTRIES_COLLECTION).document(entry_id).delete()
        except gcp_exceptions.GoogleAPIError as e:
            raise StorageIOError(str(e)) from e
