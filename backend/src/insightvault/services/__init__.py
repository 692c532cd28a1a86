"""Services for InsightVault."""

from insightvault.services.analysis_orchestrator import AnalysisOrchestrator, AskResult
from insightvault.services.entry_service import EntryService
from insightvault.services.generation_gateway import ContextDocument, GenerationGateway
from insightvault.services.prompt_template_service import ImportResult, PromptTemplateService
from insightvault.services.session_registry import SessionRegistry

__all__ = [
    "AnalysisOrchestrator",
    "AskResult",
    "ContextDocument",
    "EntryService",
    "GenerationGateway",
    "ImportResult",
    "PromptTemplateService",
    "SessionRegistry",
]
