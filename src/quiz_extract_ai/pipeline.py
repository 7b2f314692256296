"""
Question extraction pipeline.

Coordinates text extraction and AI question extraction for one uploaded
document. This is the single entry point a request handler calls.
"""

from __future__ import annotations

import logging

from quiz_extract_ai.config import Settings
from quiz_extract_ai.extraction import TextExtractor
from quiz_extract_ai.models import Question
from quiz_extract_ai.questions import QuestionExtractor

logger = logging.getLogger(__name__)


class QuestionPipeline:
    """
    Bytes in, validated questions out.

    Example:
        pipeline = QuestionPipeline.from_settings(load_config())
        questions = await pipeline.run(data, "exam.pdf", topic_id="t1")
    """

    def __init__(self, text_extractor: TextExtractor, question_extractor: QuestionExtractor):
        self._text_extractor = text_extractor
        self._question_extractor = question_extractor

    @classmethod
    def from_settings(cls, settings: Settings) -> QuestionPipeline:
        """
        Build the pipeline described by the configuration.

        Raises:
            ValueError: If no API key is configured for the generation provider.
        """
        return cls(
            TextExtractor.from_settings(settings),
            QuestionExtractor.from_settings(settings),
        )

    @property
    def text_extractor(self) -> TextExtractor:
        return self._text_extractor

    @property
    def question_extractor(self) -> QuestionExtractor:
        return self._question_extractor

    async def run(
        self,
        data: bytes,
        filename: str | None,
        topic_id: str | None = None,
        subtopic_id: str | None = None,
    ) -> list[Question]:
        """
        Extract questions from an uploaded document.

        Args:
            data: Raw file contents.
            filename: Original filename; its suffix selects the extraction strategy.
            topic_id: Topic reference attached to every question.
            subtopic_id: Subtopic reference attached to every question.

        Returns:
            Validated questions, possibly empty.

        Raises:
            UnsupportedFormatError: If the file type is not supported.
            DocumentDecodeError: If a PDF or DOCX cannot be opened.
            GenerationFailure: If the model call fails.
        """
        text = await self._text_extractor.extract(data, filename)
        logger.debug("Prompting with %d characters from %s", len(text), filename)

        return await self._question_extractor.extract_questions(
            text, topic_id=topic_id, subtopic_id=subtopic_id
        )

    async def aclose(self) -> None:
        """Release the model client."""
        await self._question_extractor.provider.aclose()
