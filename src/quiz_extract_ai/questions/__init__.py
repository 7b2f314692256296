"""
Question extraction: prompt construction, response parsing and validation.
"""

from quiz_extract_ai.questions.extractor import QuestionExtractor
from quiz_extract_ai.questions.parsing import (
    MalformedResponse,
    ParsedQuestions,
    ParseOutcome,
    parse_response,
    sanitize_response,
)
from quiz_extract_ai.questions.prompt import SYSTEM_PROMPT, build_prompt
from quiz_extract_ai.questions.validation import (
    InvalidQuestion,
    normalize_question,
    resolve_answer,
    strip_label,
    strip_option_labels,
)

__all__ = [
    "QuestionExtractor",
    "ParseOutcome",
    "ParsedQuestions",
    "MalformedResponse",
    "parse_response",
    "sanitize_response",
    "SYSTEM_PROMPT",
    "build_prompt",
    "InvalidQuestion",
    "normalize_question",
    "resolve_answer",
    "strip_label",
    "strip_option_labels",
]
