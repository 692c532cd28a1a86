"""Shared helpers for persisted models."""

import time
from typing import Any, Self

from pydantic import BaseModel


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


class StoredModel(BaseModel):
    """Base for records kept in the local store, keyed by ``id``."""

    id: str

    def to_store(self) -> dict[str, Any]:
        """Convert to a plain dict for any store backend."""
        return self.model_dump(mode="json")

    @classmethod
    def from_store(cls, doc_id: str, data: dict[str, Any]) -> Self:
        """Create from a stored document."""
        return cls.model_validate({**data, "id": doc_id})
