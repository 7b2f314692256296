"""Tests for sanitizing and parsing raw model output."""

from __future__ import annotations

import json

import pytest

from quiz_extract_ai.questions.parsing import (
    MalformedResponse,
    ParsedQuestions,
    parse_response,
    sanitize_response,
)

ITEM = {"text": "2+2=?", "options": ["3", "4", "5", "6"], "correctAnswer": "4"}
WRAPPED = json.dumps({"questions": [ITEM]})


class TestSanitize:
    @pytest.mark.parametrize(
        "raw",
        [
            f"```json\n{WRAPPED}\n```",
            f"```\n{WRAPPED}\n```",
            f"  ```JSON\n{WRAPPED}```  ",
            f"Here you go:\n```json\n{WRAPPED}\n```\nLet me know!",
        ],
    )
    def test_fences_removed(self, raw):
        assert sanitize_response(raw) == WRAPPED

    def test_unclosed_fence(self):
        assert sanitize_response(f"```json\n{WRAPPED}") == WRAPPED

    def test_plain_text_untouched(self):
        assert sanitize_response(f"\n {WRAPPED} \n") == WRAPPED

    def test_backticks_inside_json_strings_kept(self):
        raw = json.dumps({"questions": [dict(ITEM, text="What does ```code``` make?")]})
        assert sanitize_response(raw) == raw

    def test_fenced_json_with_backticks_inside(self):
        inner = json.dumps({"questions": [dict(ITEM, text="What does ```code``` make?")]})
        assert sanitize_response(f"```json\n{inner}\n```") == inner

    def test_none(self):
        assert sanitize_response(None) == ""


class TestParse:
    def test_fenced_and_unfenced_parse_identically(self):
        assert parse_response(f"```json\n{WRAPPED}\n```") == parse_response(WRAPPED)

    def test_wrapped_object(self):
        outcome = parse_response(WRAPPED)
        assert isinstance(outcome, ParsedQuestions)
        assert outcome.items == [ITEM]
        assert not outcome.recovered

    def test_bare_array(self):
        assert parse_response(json.dumps([ITEM, ITEM])).items == [ITEM, ITEM]

    def test_single_question_object(self):
        assert parse_response(json.dumps(ITEM)).items == [ITEM]

    def test_questions_key_case_insensitive(self):
        assert parse_response(json.dumps({"Questions": [ITEM]})).items == [ITEM]

    def test_empty_questions(self):
        outcome = parse_response('{"questions": []}')
        assert isinstance(outcome, ParsedQuestions)
        assert outcome.items == []

    def test_array_recovered_from_prose(self):
        raw = f"Sure! The questions are {json.dumps([ITEM])} and that is all."
        outcome = parse_response(raw)
        assert isinstance(outcome, ParsedQuestions)
        assert outcome.recovered
        assert outcome.items == [ITEM]

    def test_unfenced_reply_with_backticks_in_text(self):
        question = dict(ITEM, text="In Markdown, what does ```code``` create?")
        outcome = parse_response(json.dumps({"questions": [question]}))
        assert isinstance(outcome, ParsedQuestions)
        assert outcome.items == [question]
        assert not outcome.recovered

    def test_empty_fenced_block_falls_back_to_array_scan(self):
        outcome = parse_response(f"Answer: ``` ``` {json.dumps([ITEM])}")
        assert isinstance(outcome, ParsedQuestions)
        assert outcome.recovered
        assert outcome.items == [ITEM]

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "   ",
            "I could not find any questions in this document.",
            "{not json at all",
            '{"questions": "none"}',
            '{"answer": 42}',
            "[1, 2, 3] is not a question list",
            '"just a string"',
        ],
    )
    def test_unusable_output_is_malformed(self, raw):
        outcome = parse_response(raw)
        assert isinstance(outcome, MalformedResponse)
        assert outcome.raw == raw
        assert outcome.reason
