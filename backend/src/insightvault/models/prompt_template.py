"""Prompt template model for saved, reusable analysis instructions."""

import uuid

from pydantic import ConfigDict, Field

from insightvault.models.base import StoredModel, now_ms


class PromptTemplate(StoredModel):
    """A saved instruction applied to arbitrary input text."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), min_length=1, description="Template ID")
    title: str = Field(..., min_length=1, description="Display title")
    content: str = Field(..., min_length=1, description="Instruction text")
    created_at: int = Field(
        default_factory=now_ms,
        alias="createdAt",
        description="Creation time (epoch milliseconds)",
    )

    def to_export(self) -> dict:
        """Convert to the JSON shape used by template import/export."""
        return self.model_dump(mode="json", by_alias=True)
