"""Analyzer API endpoints: run a template against text, then save the result."""

import logging

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from insightvault.dependencies import OrchestratorDep
from insightvault.middleware.rate_limit import generation_limit, limiter

logger = logging.getLogger(__name__)

router = APIRouter()


class RunAnalysisRequest(BaseModel):
    """Request body for running an analysis."""

    input_text: str = Field(..., description="Text to analyze")
    prompt_id: str | None = Field(None, description="ID of the template to apply")


class SaveAnalysisRequest(BaseModel):
    """Request body for saving the current result."""

    title: str | None = Field(None, max_length=200, description="Entry title")


@router.get("/analysis/state")
async def get_analysis_state(orchestrator: OrchestratorDep):
    """Current analyzer state for this session."""
    return orchestrator.state.model_dump(mode="json")


@router.post("/analysis/run")
@limiter.limit(generation_limit)
async def run_analysis(
    request: Request,
    body: RunAnalysisRequest,
    orchestrator: OrchestratorDep,
):
    """
    Apply a saved template to the input text.

    The result is held in the session until saved or reset.
    """
    draft = await orchestrator.run_analysis(body.input_text, body.prompt_id)

    return {
        "status": orchestrator.state.status.value,
        "draft": draft.model_dump(mode="json"),
    }


@router.post("/analysis/save", status_code=201)
async def save_analysis(body: SaveAnalysisRequest, orchestrator: OrchestratorDep):
    """Persist the current result as an analysis entry."""
    entry = await orchestrator.save_result(title=body.title)

    return entry.model_dump(mode="json")


@router.post("/analysis/reset")
async def reset_analysis(orchestrator: OrchestratorDep):
    """Discard the current result."""
    orchestrator.reset()

    return orchestrator.state.model_dump(mode="json")
