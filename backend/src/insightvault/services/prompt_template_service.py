"""Service for managing prompt templates."""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from insightvault.errors import ValidationError
from insightvault.models.base import now_ms
from insightvault.models.prompt_template import PromptTemplate
from insightvault.providers.base import LocalStore
from insightvault.services.prompts import DEFAULT_TEMPLATE_CONTENT, DEFAULT_TEMPLATE_TITLE

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Outcome of a template import."""

    imported: list[PromptTemplate] = field(default_factory=list)
    skipped: int = 0


class PromptTemplateService:
    """Manages saved prompt templates."""

    def __init__(self, store: LocalStore):
        """Initialize PromptTemplateService."""
        self.store = store

    @staticmethod
    def _validate(title: str | None, content: str | None) -> tuple[str, str]:
        title = (title or "").strip()
        content = (content or "").strip()
        if not title:
            raise ValidationError("Template title is required")
        if not content:
            raise ValidationError("Template content is required")
        return title, content

    async def list_templates(self) -> list[PromptTemplate]:
        """List templates, oldest first."""
        templates = await self.store.list_prompt_templates()
        return sorted(templates, key=lambda t: t.created_at)

    async def get(self, template_id: str) -> PromptTemplate | None:
        """Get a template by ID."""
        return await self.store.get_prompt_template(template_id)

    async def create(self, title: str, content: str) -> PromptTemplate:
        """Create a new template."""
        title, content = self._validate(title, content)
        template = PromptTemplate(id=str(uuid.uuid4()), title=title, content=content)
        await self.store.upsert_prompt_template(template)

        logger.info(f"Created prompt template {template.id}")
        return template

    async def update(self, template_id: str, title: str, content: str) -> PromptTemplate | None:
        """
        Replace a template's title and content.

        The ID and creation time are preserved. Returns None if the template
        does not exist.
        """
        title, content = self._validate(title, content)
        existing = await self.store.get_prompt_template(template_id)
        if existing is None:
            return None

        updated = existing.model_copy(update={"title": title, "content": content})
        await self.store.upsert_prompt_template(updated)

        logger.info(f"Updated prompt template {template_id}")
        return updated

    async def delete(self, template_id: str) -> None:
        """Delete a template. Unknown IDs are ignored."""
        await self.store.delete_prompt_template(template_id)
        logger.info(f"Deleted prompt template {template_id}")

    async def seed_default(self) -> PromptTemplate | None:
        """Create the default template if the store has none."""
        if await self.store.list_prompt_templates():
            return None

        template = await self.create(DEFAULT_TEMPLATE_TITLE, DEFAULT_TEMPLATE_CONTENT)
        logger.info("Seeded default prompt template")
        return template

    async def export_templates(self) -> list[dict[str, Any]]:
        """Serialize all templates to the import/export JSON shape."""
        return [template.to_export() for template in await self.list_templates()]

    async def import_templates(self, payload: Any) -> ImportResult:
        """
        Import templates from parsed JSON.

        Each item with a non-empty title and content is upserted; a missing ID
        is generated and a missing ``createdAt`` defaults to now. Other items
        are skipped.

        Raises:
            ValidationError: If the payload is not a list. Nothing is written.
        """
        if not isinstance(payload, list):
            raise ValidationError("Invalid format: expected a list of templates")

        result = ImportResult()
        for item in payload:
            if not isinstance(item, dict) or not item.get("title") or not item.get("content"):
                result.skipped += 1
                continue
            try:
                template = PromptTemplate.model_validate(
                    {
                        **item,
                        "id": item.get("id") or str(uuid.uuid4()),
                        "createdAt": item.get("createdAt") or item.get("created_at") or now_ms(),
                    }
                )
            except PydanticValidationError:
                result.skipped += 1
                continue

            await self.store.upsert_prompt_template(template)
            result.imported.append(template)

        logger.info(f"Imported {len(result.imported)} prompt templates ({result.skipped} skipped)")
        return result
