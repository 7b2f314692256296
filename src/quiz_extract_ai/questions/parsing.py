"""
Parsing of raw model output into question items.

Model output is untrusted. ``parse_response`` never raises: it returns either
``ParsedQuestions`` with the raw item dicts or ``MalformedResponse`` with the
reason the output could not be used.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

# A fenced block after leading prose, with or without a language tag
_FENCED_BLOCK = re.compile(r"```[A-Za-z0-9_+-]*[ \t]*\r?\n?(.*?)```", re.DOTALL)
_OPENING_FENCE = re.compile(r"^```[A-Za-z0-9_+-]*[ \t]*\r?\n?")


@dataclass(frozen=True)
class ParsedQuestions:
    """Structured output was found."""

    items: list[Any] = field(default_factory=list)
    # True when the items came from the bracket-scan fallback
    recovered: bool = False


@dataclass(frozen=True)
class MalformedResponse:
    """Nothing usable could be recovered from the output."""

    raw: str
    reason: str


ParseOutcome = ParsedQuestions | MalformedResponse


def sanitize_response(raw: str | None) -> str:
    """
    Strip code-fence markup and surrounding whitespace from model output.

    Only a fence that wraps the output, or a fenced block after a line of
    prose, is removed. Backticks inside JSON string values are left alone.
    """
    content = (raw or "").strip()

    if content.startswith("```"):
        content = _OPENING_FENCE.sub("", content, count=1)
        # A missing closing fence means the output was cut off at max_tokens
        if content.rstrip().endswith("```"):
            content = content.rstrip()[:-3]
        return content.strip()

    if content[:1] in "[{":
        return content

    match = _FENCED_BLOCK.search(content)
    if match:
        return match.group(1).strip()
    return content


def parse_response(raw: str | None) -> ParseOutcome:
    """
    Parse model output into question items.

    Accepts ``{"questions": [...]}`` (the requested shape), a bare array of
    question objects, or a single question object. When the output is not
    valid JSON, the span from the first ``[`` to the last ``]`` is tried as
    a last resort and accepted only if it is an array of objects.
    """
    raw = raw or ""
    if not raw.strip():
        return MalformedResponse(raw=raw, reason="empty response")

    content = sanitize_response(raw)
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        items = _scan_for_array(raw)
        if items is not None:
            return ParsedQuestions(items=items, recovered=True)
        if not content:
            return MalformedResponse(raw=raw, reason="empty response")
        return MalformedResponse(raw=raw, reason=f"invalid JSON: {e.msg} at position {e.pos}")

    items = _question_items(data)
    if items is None:
        return MalformedResponse(raw=raw, reason="no 'questions' array in response")
    return ParsedQuestions(items=items)


def _question_items(data: Any) -> list[Any] | None:
    if isinstance(data, list):
        return data

    if not isinstance(data, dict):
        return None

    for key, value in data.items():
        if isinstance(key, str) and key.strip().lower() == "questions":
            return value if isinstance(value, list) else None

    # A lone question object instead of a wrapper
    if "options" in data and ("text" in data or "question" in data):
        return [data]

    return None


def _scan_for_array(raw: str) -> list[dict[str, Any]] | None:
    start = raw.find("[")
    end = raw.rfind("]")
    if start == -1 or end <= start:
        return None

    try:
        data = json.loads(raw[start : end + 1])
    except json.JSONDecodeError:
        return None

    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        return None
    return data
