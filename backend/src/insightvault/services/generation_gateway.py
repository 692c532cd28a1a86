"""Text-generation gateway: one Gemini call per domain request."""

import logging
from dataclasses import dataclass

from google import genai
from google.genai import types

from insightvault.errors import GenerationError
from insightvault.models.analysis_entry import AnalysisEntry
from insightvault.services.prompts import (
    ANALYSIS_FALLBACK,
    ANALYSIS_INPUT_PART,
    ANALYSIS_INSTRUCTION_PART,
    CONTEXT_ENTRY_TEMPLATE,
    KNOWLEDGE_BASE_CONTEXT_PART,
    KNOWLEDGE_BASE_FALLBACK,
    KNOWLEDGE_BASE_QUESTION_PART,
    KNOWLEDGE_BASE_SYSTEM_PROMPT,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContextDocument:
    """Bounded text summary of prior entries used to ground a question."""

    text: str
    included: int
    excluded: int


class GenerationGateway:
    """
    Stateless wrapper around Gemini ``generate_content``.

    The knowledge-base path does no retrieval or ranking: it sends the
    ``max_context_entries`` most recent entries, each with an excerpt of at most
    ``excerpt_chars`` characters of its original text. Older entries are not
    visible to the model.
    """

    def __init__(
        self,
        client: genai.Client,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.3,
        max_context_entries: int = 50,
        excerpt_chars: int = 300,
    ):
        """
        Initialize GenerationGateway.

        Args:
            client: google-genai client (AI Studio or Vertex AI).
            model: Model name used for every call.
            temperature: Sampling temperature for analyses; kept low so repeated
                runs of one template stay consistent.
            max_context_entries: Entries included in a knowledge-base context.
            excerpt_chars: Characters of original text quoted per entry.
        """
        self._client = client
        self.model = model
        self.temperature = temperature
        self.max_context_entries = max_context_entries
        self.excerpt_chars = excerpt_chars

    @classmethod
    def from_settings(cls, settings) -> "GenerationGateway":
        """Build a gateway and its GenAI client from application settings."""
        if settings.use_vertexai:
            client = genai.Client(
                vertexai=True,
                project=settings.gcp_project_id,
                location=settings.vertex_ai_location,
            )
        else:
            client = genai.Client(api_key=settings.gemini_api_key or None)

        return cls(
            client=client,
            model=settings.generation_model,
            temperature=settings.analysis_temperature,
            max_context_entries=settings.kb_max_context_entries,
            excerpt_chars=settings.kb_excerpt_chars,
        )

    async def _generate(
        self,
        parts: list[str],
        config: types.GenerateContentConfig,
    ) -> str | None:
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=[
                    types.Content(
                        role="user",
                        parts=[types.Part.from_text(text=part) for part in parts],
                    )
                ],
                config=config,
            )
        except Exception as e:
            logger.exception(f"Gemini call failed (model={self.model})")
            raise GenerationError(f"Text generation failed: {e}") from e

        return response.text

    async def generate_analysis(self, input_text: str, instruction: str) -> str:
        """
        Apply an instruction to input text.

        Args:
            input_text: Text to analyze.
            instruction: Template content.

        Returns:
            Generated text, or a fixed fallback if the model returned nothing.

        Raises:
            GenerationError: On any transport, authentication or quota failure.
        """
        text = await self._generate(
            parts=[
                ANALYSIS_INSTRUCTION_PART.format(instruction=instruction),
                ANALYSIS_INPUT_PART.format(input_text=input_text),
            ],
            config=types.GenerateContentConfig(temperature=self.temperature),
        )
        return text or ANALYSIS_FALLBACK

    def build_context_document(self, entries: list[AnalysisEntry]) -> ContextDocument:
        """
        Render the most recent entries into a context document.

        Args:
            entries: Entries ordered most recent first.
        """
        selected = entries[: self.max_context_entries]
        blocks = [
            CONTEXT_ENTRY_TEMPLATE.format(
                id=entry.id,
                date=entry.created_date,
                title=entry.title,
                analysis=entry.analysis,
                excerpt_chars=self.excerpt_chars,
                excerpt=entry.original_text[: self.excerpt_chars],
            )
            for entry in selected
        ]
        return ContextDocument(
            text="\n".join(blocks),
            included=len(selected),
            excluded=len(entries) - len(selected),
        )

    async def answer_from_entries(self, question: str, entries: list[AnalysisEntry]) -> str:
        """
        Answer a question grounded only in stored entries.

        Args:
            question: User question.
            entries: Entries ordered most recent first; only the first
                ``max_context_entries`` are sent.

        Returns:
            Generated answer, or a fixed "don't know" fallback if the model
            returned nothing.

        Raises:
            GenerationError: On any transport, authentication or quota failure.
        """
        return await self.answer_question(question, self.build_context_document(entries))

    async def answer_question(self, question: str, context: ContextDocument) -> str:
        """
        Answer a question from an already built context document.

        Raises:
            GenerationError: On any transport, authentication or quota failure.
        """
        if context.excluded:
            logger.warning(
                f"Knowledge base context truncated: {context.excluded} older entries excluded "
                f"(limit {self.max_context_entries})"
            )

        text = await self._generate(
            parts=[
                KNOWLEDGE_BASE_CONTEXT_PART.format(context=context.text),
                KNOWLEDGE_BASE_QUESTION_PART.format(question=question),
            ],
            config=types.GenerateContentConfig(system_instruction=KNOWLEDGE_BASE_SYSTEM_PROMPT),
        )
        return text or KNOWLEDGE_BASE_FALLBACK
