"""
Question records produced by the extraction pipeline.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

OPTION_COUNT = 4


class QuestionType(str, Enum):
    """Question type tags understood by the assessment bank."""

    MCQ = "mcq"
    TRUE_FALSE = "true_false"


@dataclass
class Question:
    """A single multiple-choice question ready to hand to the persistence layer."""

    text: str
    options: list[str]
    correct_answer: str
    type: QuestionType = QuestionType.MCQ
    explanation: str | None = None
    points: int = 1
    topic_id: str | None = None
    subtopic_id: str | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire shape used by the assessment service."""
        return {
            "id": self.id,
            "text": self.text,
            "type": self.type.value,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
            "explanation": self.explanation,
            "points": self.points,
            "topicId": self.topic_id,
            "subtopicId": self.subtopic_id,
        }


class RawQuestion(BaseModel):
    """
    One question object as emitted by the language model.

    Validation is deliberately loose here: every field is optional and
    scalar values are coerced to strings. The strict checks live in
    ``questions.validation``.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    text: str = Field(default="", validation_alias=AliasChoices("text", "question"))
    options: list[str] = Field(default_factory=list, validation_alias=AliasChoices("options", "choices"))
    correct_answer: str = Field(
        default="",
        validation_alias=AliasChoices("correctAnswer", "correct_answer", "answer"),
    )
    type: str | None = None
    points: int | None = None
    explanation: str | None = None

    @field_validator("text", "correct_answer", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        if v is None:
            return ""
        if isinstance(v, (str, int, float)):
            return str(v)
        return v

    @field_validator("options", mode="before")
    @classmethod
    def _coerce_options(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, dict):
            # {"a": "...", "b": "..."} keyed options keep their insertion order
            v = list(v.values())
        if isinstance(v, list):
            return ["" if item is None else str(item) for item in v]
        return v

    @field_validator("points", mode="before")
    @classmethod
    def _coerce_points(cls, v: Any) -> int | None:
        # json.loads turns 1e999 and Infinity into inf; int(nan) raises ValueError
        try:
            return int(v)
        except (TypeError, ValueError, OverflowError):
            return None

    @field_validator("explanation", "type", mode="before")
    @classmethod
    def _coerce_optional(cls, v: Any) -> str | None:
        if v is None:
            return None
        return str(v)
