"""
Validation and repair of model-emitted questions.

The model is asked to return clean four-option questions whose answer is one
of the options, but nothing guarantees it. Every item goes through
``normalize_question``, which either returns a well-formed ``Question`` or
raises ``InvalidQuestion``.

Answer policy: the answer is matched against the options ignoring case,
repeated whitespace and enumeration labels, and is then rewritten to the
option's exact text. A bare letter ("B", "c)") picks the option at that
position when no option text matches. Anything else is dropped.
"""

from __future__ import annotations

import re
from typing import Any

from quiz_extract_ai.models import OPTION_COUNT, Question, QuestionType, RawQuestion

# "110)", "1.", "(a)", "b)", "C:", "iv)", "Q5.", "Q:", "Question 3:"
# Option-style labels need trailing whitespace so "3.14" or "1.5 kg" survive.
# A lone letter followed by "." is left alone ("J. K. Rowling"); see strip_option_labels.
_LABEL = re.compile(
    r"""^\s*(?:
        Q(?:uestion)?\s*\d*\s*[.:)]\s*
        | \(?(?:\d{1,3}|[ivxIVX]{2,4})[).:\]]\s+
        | \(?[A-Za-z][):\]]\s+
    )""",
    re.VERBOSE,
)

# "A. Paris" - only a label when every option carries the next letter in turn
_LETTER_DOT = re.compile(r"^\s*([A-Za-z])\.\s+")

# "B", "b)", "(c)", "D." - a positional answer for a four-option question
_LETTER_ANSWER = re.compile(r"^\(?([A-Da-d])\)?[.)]?$")


class InvalidQuestion(ValueError):
    """A model-emitted question that cannot be repaired."""


def strip_label(value: str) -> str:
    """Remove one leading enumeration label and surrounding whitespace."""
    value = value.strip()
    stripped = _LABEL.sub("", value, count=1).strip()
    # Never strip a label that is the whole value ("A." as an option)
    return stripped or value


def strip_option_labels(options: list[str]) -> list[str]:
    """
    Remove enumeration labels from a whole option list.

    "A. Paris" style labels are only removed when every option carries one
    and the letters run a, b, c, ... in order, so initials such as
    "C. S. Lewis" in a single option are kept.
    """
    matches = [_LETTER_DOT.match(option) for option in options]
    letters = [match.group(1).lower() if match else "" for match in matches]
    if options and letters == [chr(ord("a") + i) for i in range(len(options))]:
        return [
            option[match.end() :].strip() or option.strip()
            for option, match in zip(options, matches)
        ]
    return [strip_label(option) for option in options]


def _match_key(value: str) -> str:
    return " ".join(value.split()).casefold()


def resolve_answer(answer: str, options: list[str]) -> str:
    """
    Map a model answer onto one of the options.

    Returns:
        The matching option, exactly as it appears in ``options``.

    Raises:
        InvalidQuestion: If the answer matches no option.
    """
    candidates = [
        answer.strip(),
        strip_label(answer),
        _LETTER_DOT.sub("", answer, count=1),
    ]
    keys = [_match_key(option) for option in options]

    for candidate in candidates:
        key = _match_key(candidate)
        if key and key in keys:
            return options[keys.index(key)]

    letter = _LETTER_ANSWER.match(answer.strip())
    if letter:
        index = ord(letter.group(1).lower()) - ord("a")
        if index < len(options):
            return options[index]

    raise InvalidQuestion(f"correct answer {answer!r} matches none of the options")


def normalize_question(
    item: Any,
    *,
    topic_id: str | None = None,
    subtopic_id: str | None = None,
) -> Question:
    """
    Validate one raw item and build a Question from it.

    Raises:
        InvalidQuestion: Missing text, wrong option count, blank options or an
            answer that is not one of the options.
        pydantic.ValidationError: The item is not an object of the expected shape.
    """
    if not isinstance(item, dict):
        raise InvalidQuestion(f"expected an object, got {type(item).__name__}")

    raw = RawQuestion.model_validate(item)

    text = strip_label(raw.text)
    if not text:
        raise InvalidQuestion("question text is empty")

    options = strip_option_labels(raw.options)
    if len(options) != OPTION_COUNT:
        raise InvalidQuestion(f"expected {OPTION_COUNT} options, got {len(options)}")
    if any(not option for option in options):
        raise InvalidQuestion("blank option")

    if not raw.correct_answer.strip():
        raise InvalidQuestion("correct answer is missing")
    correct_answer = resolve_answer(raw.correct_answer, options)

    explanation = (raw.explanation or "").strip() or None
    points = raw.points if raw.points and raw.points > 0 else 1

    return Question(
        text=text,
        options=options,
        correct_answer=correct_answer,
        type=QuestionType.MCQ,
        explanation=explanation,
        points=points,
        topic_id=topic_id,
        subtopic_id=subtopic_id,
    )
