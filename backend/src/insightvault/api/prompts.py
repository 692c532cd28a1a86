"""Prompt template API endpoints."""

import logging
from datetime import date
from typing import Annotated, Any

from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from insightvault.dependencies import PromptTemplateServiceDep

logger = logging.getLogger(__name__)

router = APIRouter()


# Request/Response models
class PromptTemplateRequest(BaseModel):
    """Request body for creating or replacing a prompt template."""

    title: str = Field(..., min_length=1, max_length=200, description="Display title")
    content: str = Field(..., min_length=1, max_length=20000, description="Instruction text")


class ImportResponse(BaseModel):
    """Result of a template import."""

    imported: int
    skipped: int


@router.get("/prompts")
async def list_prompts(prompt_service: PromptTemplateServiceDep):
    """List saved prompt templates."""
    prompts = await prompt_service.list_templates()

    return {"prompts": [p.to_export() for p in prompts]}


@router.post("/prompts", status_code=201)
async def create_prompt(
    request: PromptTemplateRequest,
    prompt_service: PromptTemplateServiceDep,
):
    """Save a new prompt template."""
    prompt = await prompt_service.create(title=request.title, content=request.content)

    return prompt.to_export()


@router.get("/prompts/export")
async def export_prompts(prompt_service: PromptTemplateServiceDep):
    """Download all templates as a JSON list of {id, title, content, createdAt}."""
    data = await prompt_service.export_templates()
    filename = f"prompts_backup_{date.today().isoformat()}.json"

    return JSONResponse(
        content=data,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/prompts/import", response_model=ImportResponse)
async def import_prompts(
    payload: Annotated[Any, Body(description="JSON list of templates")],
    prompt_service: PromptTemplateServiceDep,
):
    """
    Import templates from a previously exported JSON list.

    Items missing a title or content are skipped; a payload that is not a list
    is rejected and nothing is imported.
    """
    result = await prompt_service.import_templates(payload)

    return ImportResponse(imported=len(result.imported), skipped=result.skipped)


@router.get("/prompts/{prompt_id}")
async def get_prompt(prompt_id: str, prompt_service: PromptTemplateServiceDep):
    """Get a prompt template by ID."""
    prompt = await prompt_service.get(prompt_id)

    if not prompt:
        raise HTTPException(status_code=404, detail="Prompt not found")

    return prompt.to_export()


@router.put("/prompts/{prompt_id}")
async def update_prompt(
    prompt_id: str,
    request: PromptTemplateRequest,
    prompt_service: PromptTemplateServiceDep,
):
    """Replace a prompt template's title and content."""
    prompt = await prompt_service.update(
        template_id=prompt_id,
        title=request.title,
        content=request.content,
    )

    if not prompt:
        raise HTTPException(status_code=404, detail="Prompt not found")

    return prompt.to_export()


@router.delete("/prompts/{prompt_id}")
async def delete_prompt(prompt_id: str, prompt_service: PromptTemplateServiceDep):
    """Delete a prompt template. Deleting an unknown ID succeeds."""
    await prompt_service.delete(prompt_id)

    return {"status": "deleted"}
