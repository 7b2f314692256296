"""
AI question extraction.

Turns extracted document text into validated Question records using an
LLM provider.
"""

from __future__ import annotations

import logging

from quiz_extract_ai.config import Settings
from quiz_extract_ai.errors import GenerationFailure
from quiz_extract_ai.llm import LLMProvider, create_llm_provider_from_config
from quiz_extract_ai.models import Question
from quiz_extract_ai.questions.parsing import MalformedResponse, parse_response
from quiz_extract_ai.questions.prompt import SYSTEM_PROMPT, build_prompt
from quiz_extract_ai.questions.validation import normalize_question

logger = logging.getLogger(__name__)

# How much of a bad response to show in diagnostics
_EXCERPT_CHARS = 300


class QuestionExtractor:
    """
    Extracts multiple-choice questions from text with a language model.

    A failed model call raises GenerationFailure. A response that cannot be
    parsed yields an empty list. Questions that fail validation are dropped
    individually; the rest are returned.
    """

    def __init__(
        self,
        provider: LLMProvider,
        *,
        temperature: float = 0.2,
        max_tokens: int = 4096,
        max_input_chars: int = 0,
        skip_model_on_empty_text: bool = False,
    ):
        """
        Initialize question extractor.

        Args:
            provider: LLM provider used for generation.
            temperature: Sampling temperature.
            max_tokens: Maximum output tokens.
            max_input_chars: Truncate text before prompting (0 = no limit).
            skip_model_on_empty_text: Return [] for blank text without calling the model.
        """
        self._provider = provider
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._max_input_chars = max_input_chars
        self._skip_model_on_empty_text = skip_model_on_empty_text

    @classmethod
    def from_settings(cls, settings: Settings) -> QuestionExtractor:
        return cls(
            create_llm_provider_from_config(settings.generation),
            temperature=settings.generation.temperature,
            max_tokens=settings.generation.max_tokens,
            max_input_chars=settings.extraction.max_input_chars,
            skip_model_on_empty_text=settings.extraction.skip_model_on_empty_text,
        )

    @property
    def provider(self) -> LLMProvider:
        return self._provider

    async def extract_questions(
        self,
        text: str,
        topic_id: str | None = None,
        subtopic_id: str | None = None,
    ) -> list[Question]:
        """
        Extract questions from document text.

        Args:
            text: Plain text of the document.
            topic_id: Topic reference attached to every question.
            subtopic_id: Subtopic reference attached to every question.

        Returns:
            Validated questions in the order the model produced them.

        Raises:
            GenerationFailure: If the model call fails.
        """
        if self._skip_model_on_empty_text and not text.strip():
            logger.info("Document text is blank, skipping question generation")
            return []

        prompt = build_prompt(text, max_chars=self._max_input_chars)

        try:
            response = await self._provider.chat(
                prompt,
                system_prompt=SYSTEM_PROMPT,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except Exception as e:
            logger.error(
                "Question generation failed with %s (%s): %s",
                self._provider.name,
                self._provider.model,
                e,
            )
            raise GenerationFailure(
                f"Question generation failed: {e}",
                provider=self._provider.name,
                model=self._provider.model,
            ) from e

        outcome = parse_response(response.content)
        if isinstance(outcome, MalformedResponse):
            logger.warning(
                "Discarding malformed model output (%s): %r",
                outcome.reason,
                outcome.raw[:_EXCERPT_CHARS],
            )
            return []

        if outcome.recovered:
            logger.warning("Model output was not valid JSON; recovered a question array from it")

        questions: list[Question] = []
        for index, item in enumerate(outcome.items, start=1):
            try:
                question = normalize_question(item, topic_id=topic_id, subtopic_id=subtopic_id)
            except ValueError as e:
                logger.info("Dropping question %d: %s", index, e)
                continue
            except Exception as e:
                # Model output is untrusted; one odd item must not lose the batch
                logger.warning(
                    "Dropping question %d after unexpected %s: %s", index, type(e).__name__, e
                )
                continue
            questions.append(question)

        logger.info(
            "Extracted %d of %d questions (model=%s, tokens=%d)",
            len(questions),
            len(outcome.items),
            response.model or self._provider.model,
            response.total_tokens,
        )
        return questions
