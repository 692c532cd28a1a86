"""Analysis entry model: the persisted result of one template applied to one text."""

import uuid
from datetime import datetime

from pydantic import ConfigDict, Field

from insightvault.models.base import StoredModel, now_ms


def default_entry_title(moment: datetime | None = None) -> str:
    """Timestamped label used when an entry is saved without a title."""
    moment = moment or datetime.now()
    return f"Analysis - {moment.strftime('%Y-%m-%d %H:%M:%S')}"


class AnalysisEntry(StoredModel):
    """
    Saved analysis result.

    ``prompt_snapshot`` holds the template content at generation time and is
    independent of the live template; ``prompt_id`` is informational and may
    refer to a template that no longer exists. Entries are immutable once
    created.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), min_length=1, description="Entry ID")
    title: str = Field(..., min_length=1, description="Display title")
    original_text: str = Field(..., description="Input text that was analyzed")
    analysis: str = Field(..., min_length=1, description="Generated analysis text")
    prompt_id: str = Field(..., description="ID of the template used")
    prompt_snapshot: str = Field(..., min_length=1, description="Template content at generation time")
    timestamp: int = Field(default_factory=now_ms, description="Creation time (epoch milliseconds)")

    @property
    def created_date(self) -> str:
        """Creation date as ISO ``YYYY-MM-DD`` in local time."""
        return datetime.fromtimestamp(self.timestamp / 1000).date().isoformat()
