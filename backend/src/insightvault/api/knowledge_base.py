"""Knowledge-base chat API endpoints."""

import logging

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from insightvault.dependencies import OrchestratorDep
from insightvault.middleware.rate_limit import generation_limit, limiter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["knowledge-base"])


class AskRequest(BaseModel):
    """Request body for a knowledge-base question."""

    question: str = Field(..., max_length=2000, description="The question to answer")


class ChatMessageResponse(BaseModel):
    """One chat turn."""

    role: str
    text: str
    timestamp: int


class AskResponse(BaseModel):
    """Reply to a knowledge-base question."""

    message: ChatMessageResponse
    entries_considered: int = Field(..., description="Entries sent as context")
    entries_excluded: int = Field(..., description="Older entries left out of the context")


@router.post("/knowledge-base/ask", response_model=AskResponse)
@limiter.limit(generation_limit)
async def ask_question(
    request: Request,
    body: AskRequest,
    orchestrator: OrchestratorDep,
):
    """
    Ask a question answered only from saved entries.

    The question and reply are appended to the session's conversation.
    """
    result = await orchestrator.ask(body.question)

    return AskResponse(
        message=ChatMessageResponse(**result.message.model_dump(mode="json")),
        entries_considered=result.entries_considered,
        entries_excluded=result.entries_excluded,
    )


@router.get("/knowledge-base/conversation")
async def get_conversation(orchestrator: OrchestratorDep):
    """The session's conversation so far."""
    return {
        "status": orchestrator.conversation_status.value,
        "messages": [m.model_dump(mode="json") for m in orchestrator.conversation],
    }
