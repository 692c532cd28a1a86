"""Analysis orchestrator: sequences user actions across the store and the gateway."""

import logging
from dataclasses import dataclass

from insightvault.errors import GenerationError, StorageIOError, ValidationError
from insightvault.models.analysis_entry import AnalysisEntry, default_entry_title
from insightvault.models.chat import ChatMessage, ChatRole
from insightvault.models.session import (
    AnalysisDraft,
    AnalyzerState,
    AnalyzerStatus,
    ConversationStatus,
)
from insightvault.providers.base import LocalStore
from insightvault.services.generation_gateway import GenerationGateway

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Please enter text to analyze."
NO_TEMPLATE_MESSAGE = "Please select a prompt."
GENERATION_FAILED_MESSAGE = "Failed to generate analysis. Please check your connection and API key."
SEARCH_FAILED_MESSAGE = "Sorry, I encountered an error searching your database."


@dataclass(frozen=True)
class AskResult:
    """A knowledge-base reply plus how much of the history grounded it."""

    message: ChatMessage
    entries_considered: int
    entries_excluded: int


class AnalysisOrchestrator:
    """
    Coordinates one user's analyzer and knowledge-base conversation.

    Holds transient view state only: the current analysis draft and the chat
    history. Nothing here is persisted except through ``store``. Failures are
    never retried; the user re-triggers the action.

    Run analysis:
        IDLE -> VALIDATING -> GENERATING -> READY | FAILED
        READY --save_result()--> IDLE

    Ask a question:
        IDLE -> WAITING -> IDLE, appending a user and a model message.
    """

    def __init__(self, store: LocalStore, gateway: GenerationGateway):
        """
        Initialize AnalysisOrchestrator.

        Args:
            store: Local store for templates and entries.
            gateway: Text-generation gateway.
        """
        self.store = store
        self.gateway = gateway

        self._status = AnalyzerStatus.IDLE
        self._draft: AnalysisDraft | None = None
        self._error: str | None = None

        self._conversation: list[ChatMessage] = []
        self._conversation_status = ConversationStatus.IDLE

    # =========================================================================
    # Run analysis
    # =========================================================================

    @property
    def state(self) -> AnalyzerState:
        return AnalyzerState(status=self._status, draft=self._draft, error=self._error)

    def _reject(self, message: str) -> None:
        # Validation failures leave the status and draft as they were
        self._error = message
        raise ValidationError(message)

    async def run_analysis(self, input_text: str, template_id: str | None) -> AnalysisDraft:
        """
        Apply a saved template to input text.

        Args:
            input_text: Text to analyze.
            template_id: ID of the template to apply.

        Returns:
            The generated draft, ready to save.

        Raises:
            ValidationError: Empty input, no template selected, unknown
                template, or an analysis already in progress. The gateway is
                not called.
            GenerationError: The model call failed; state becomes FAILED.
        """
        if self._status in (AnalyzerStatus.VALIDATING, AnalyzerStatus.GENERATING):
            self._reject("An analysis is already running.")
        if not input_text or not input_text.strip():
            self._reject(EMPTY_INPUT_MESSAGE)
        if not template_id:
            self._reject(NO_TEMPLATE_MESSAGE)

        previous = self._status
        self._status = AnalyzerStatus.VALIDATING
        try:
            template = await self.store.get_prompt_template(template_id)
        except StorageIOError:
            self._status = previous
            raise
        if template is None:
            self._status = previous
            self._reject(NO_TEMPLATE_MESSAGE)

        self._status = AnalyzerStatus.GENERATING
        self._draft = None
        self._error = None

        # Captured before the call so later template edits cannot leak in
        snapshot = template.content
        try:
            result = await self.gateway.generate_analysis(input_text, snapshot)
        except GenerationError:
            self._status = AnalyzerStatus.FAILED
            self._error = GENERATION_FAILED_MESSAGE
            raise

        self._draft = AnalysisDraft(
            input_text=input_text,
            result=result,
            prompt_id=template.id,
            prompt_snapshot=snapshot,
        )
        self._status = AnalyzerStatus.READY
        logger.info(f"Generated analysis with template {template.id}")
        return self._draft

    async def save_result(self, title: str | None = None) -> AnalysisEntry:
        """
        Persist the ready draft as an analysis entry and return to IDLE.

        Args:
            title: Display title; a timestamped label is used when blank.

        Raises:
            ValidationError: No generated result to save.
            StorageIOError: The write failed; the draft is kept for another try.
        """
        if self._status != AnalyzerStatus.READY or self._draft is None:
            self._reject("There is no analysis result to save.")

        draft = self._draft
        entry = AnalysisEntry(
            title=(title or "").strip() or default_entry_title(),
            original_text=draft.input_text,
            analysis=draft.result,
            prompt_id=draft.prompt_id,
            prompt_snapshot=draft.prompt_snapshot,
        )
        await self.store.upsert_analysis_entry(entry)

        self.reset()
        logger.info(f"Saved analysis entry {entry.id}")
        return entry

    def reset(self) -> None:
        """Discard any draft or error and return to IDLE."""
        self._status = AnalyzerStatus.IDLE
        self._draft = None
        self._error = None

    # =========================================================================
    # Ask a question
    # =========================================================================

    @property
    def conversation(self) -> list[ChatMessage]:
        return list(self._conversation)

    @property
    def conversation_status(self) -> ConversationStatus:
        return self._conversation_status

    async def ask(self, question: str) -> AskResult:
        """
        Ask a question over the saved entries.

        Provider or storage failures do not raise: an apology message is
        appended instead.

        Raises:
            ValidationError: Empty question, or a question already pending.
        """
        if not question or not question.strip():
            raise ValidationError("Please enter a question.")
        if self._conversation_status == ConversationStatus.WAITING:
            raise ValidationError("A question is already being answered.")

        self._conversation.append(ChatMessage(role=ChatRole.USER, text=question))
        self._conversation_status = ConversationStatus.WAITING

        considered = excluded = 0
        try:
            entries = await self.store.list_analysis_entries()
            context = self.gateway.build_context_document(entries)
            considered, excluded = context.included, context.excluded
            answer = await self.gateway.answer_question(question, context)
        except (GenerationError, StorageIOError) as e:
            logger.warning(f"Knowledge base question failed: {e}")
            answer = SEARCH_FAILED_MESSAGE
        finally:
            self._conversation_status = ConversationStatus.IDLE

        reply = ChatMessage(role=ChatRole.MODEL, text=answer)
        self._conversation.append(reply)
        return AskResult(message=reply, entries_considered=considered, entries_excluded=excluded)
