"""Transient view state held by the analysis orchestrator."""

from enum import Enum

from pydantic import BaseModel, Field


class AnalyzerStatus(str, Enum):
    """States of the run-analysis flow."""

    IDLE = "idle"
    VALIDATING = "validating"
    GENERATING = "generating"
    READY = "ready"
    FAILED = "failed"


class ConversationStatus(str, Enum):
    """States of the ask-a-question flow."""

    IDLE = "idle"
    WAITING = "waiting"


class AnalysisDraft(BaseModel):
    """A generated, not yet saved, analysis."""

    input_text: str
    result: str
    prompt_id: str
    prompt_snapshot: str = Field(..., description="Template content captured at generation time")


class AnalyzerState(BaseModel):
    """Snapshot of the analyzer view state."""

    status: AnalyzerStatus = AnalyzerStatus.IDLE
    draft: AnalysisDraft | None = None
    error: str | None = None
