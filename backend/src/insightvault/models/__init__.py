"""Data models for InsightVault."""

from insightvault.models.analysis_entry import AnalysisEntry, default_entry_title
from insightvault.models.base import StoredModel, now_ms
from insightvault.models.chat import ChatMessage, ChatRole
from insightvault.models.prompt_template import PromptTemplate
from insightvault.models.session import (
    AnalysisDraft,
    AnalyzerState,
    AnalyzerStatus,
    ConversationStatus,
)

__all__ = [
    # Stored records
    "StoredModel",
    "PromptTemplate",
    "AnalysisEntry",
    "default_entry_title",
    "now_ms",
    # Chat
    "ChatMessage",
    "ChatRole",
    # Orchestrator state
    "AnalysisDraft",
    "AnalyzerState",
    "AnalyzerStatus",
    "ConversationStatus",
]
