"""Tests for AI question extraction with a stubbed model."""

from __future__ import annotations

import json
import logging

import pytest
from conftest import FakeLLMProvider

from quiz_extract_ai.config import Settings
from quiz_extract_ai.errors import GenerationFailure
from quiz_extract_ai.llm import FallbackLLMProvider
from quiz_extract_ai.questions import SYSTEM_PROMPT, QuestionExtractor
from quiz_extract_ai.questions import extractor as extractor_module
from quiz_extract_ai.questions.prompt import TRUNCATION_NOTE

SOURCE_TEXT = "Q: 2+2=? a) 3 b) 4 c) 5 d) 6 Answer: b) 4"
REPLY = json.dumps(
    {
        "questions": [
            {
                "text": "2+2=?",
                "options": ["3", "4", "5", "6"],
                "correctAnswer": "4",
                "type": "mcq",
                "points": 1,
            }
        ]
    }
)


def mcq(text: str, answer: str = "b", options: list[str] | None = None) -> dict:
    return {
        "text": text,
        "options": options or ["a", "b", "c", "d"],
        "correctAnswer": answer,
        "type": "mcq",
        "points": 1,
    }


@pytest.mark.asyncio
async def test_single_question_extracted():
    extractor = QuestionExtractor(FakeLLMProvider(REPLY))

    questions = await extractor.extract_questions(SOURCE_TEXT)

    assert len(questions) == 1
    question = questions[0]
    assert question.text == "2+2=?"
    assert question.correct_answer == "4"
    assert question.correct_answer in question.options


@pytest.mark.asyncio
async def test_prompt_contains_text_and_system_prompt():
    llm = FakeLLMProvider(REPLY)
    await QuestionExtractor(llm).extract_questions(SOURCE_TEXT)

    messages = llm.calls[0]
    assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
    assert messages[1]["role"] == "user"
    assert SOURCE_TEXT in messages[1]["content"]
    assert "correctAnswer" in messages[1]["content"]


@pytest.mark.asyncio
async def test_empty_text_with_empty_reply():
    llm = FakeLLMProvider('{"questions": []}')
    assert await QuestionExtractor(llm).extract_questions("") == []
    assert len(llm.calls) == 1


@pytest.mark.asyncio
async def test_empty_text_can_skip_model():
    llm = FakeLLMProvider(REPLY)
    extractor = QuestionExtractor(llm, skip_model_on_empty_text=True)
    assert await extractor.extract_questions("  \n ") == []
    assert llm.calls == []


@pytest.mark.asyncio
async def test_topic_ids_attached_to_every_question():
    reply = json.dumps({"questions": [mcq("First?"), mcq("Second?")]})
    extractor = QuestionExtractor(FakeLLMProvider(reply))

    questions = await extractor.extract_questions("text", topic_id="t-1", subtopic_id="s-9")

    assert [q.topic_id for q in questions] == ["t-1", "t-1"]
    assert [q.subtopic_id for q in questions] == ["s-9", "s-9"]


@pytest.mark.asyncio
async def test_same_input_same_content_new_ids():
    extractor = QuestionExtractor(FakeLLMProvider(REPLY))

    first = await extractor.extract_questions(SOURCE_TEXT, topic_id="t")
    second = await extractor.extract_questions(SOURCE_TEXT, topic_id="t")

    strip_id = lambda q: {k: v for k, v in q.to_dict().items() if k != "id"}  # noqa: E731
    assert [strip_id(q) for q in first] == [strip_id(q) for q in second]
    assert first[0].id != second[0].id


@pytest.mark.asyncio
async def test_fenced_reply_parsed():
    extractor = QuestionExtractor(FakeLLMProvider(f"```json\n{REPLY}\n```"))
    questions = await extractor.extract_questions(SOURCE_TEXT)
    assert [q.correct_answer for q in questions] == ["4"]


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", ["Sorry, I cannot help with that.", "", "{broken"])
async def test_unparseable_reply_returns_empty(reply, caplog):
    extractor = QuestionExtractor(FakeLLMProvider(reply))

    with caplog.at_level(logging.WARNING, logger="quiz_extract_ai"):
        assert await extractor.extract_questions(SOURCE_TEXT) == []

    assert "malformed" in caplog.text.lower()


@pytest.mark.asyncio
async def test_invalid_questions_dropped_individually():
    reply = json.dumps(
        {
            "questions": [
                mcq("Valid one?"),
                mcq("Three options?", options=["a", "b", "c"]),
                mcq("Answer not an option?", answer="z"),
                "not an object",
                mcq("Valid two?", answer="D"),
            ]
        }
    )
    extractor = QuestionExtractor(FakeLLMProvider(reply))

    questions = await extractor.extract_questions("text")

    assert [q.text for q in questions] == ["Valid one?", "Valid two?"]
    assert [q.correct_answer for q in questions] == ["b", "d"]
    assert all(len(q.options) == 4 for q in questions)


@pytest.mark.asyncio
async def test_long_text_truncated_before_prompting():
    llm = FakeLLMProvider(REPLY)
    await QuestionExtractor(llm, max_input_chars=10).extract_questions("x" * 50)

    prompt = llm.calls[0][1]["content"]
    assert "x" * 10 + TRUNCATION_NOTE in prompt
    assert "x" * 11 not in prompt


@pytest.mark.asyncio
async def test_model_error_raises_generation_failure():
    cause = ConnectionError("network unreachable")
    extractor = QuestionExtractor(FakeLLMProvider(error=cause))

    with pytest.raises(GenerationFailure) as exc_info:
        await extractor.extract_questions(SOURCE_TEXT)

    assert exc_info.value.__cause__ is cause
    assert exc_info.value.provider == "fake"
    assert exc_info.value.model == "fake-model"
    assert not exc_info.value.is_client_error


def test_from_settings_builds_configured_provider():
    settings = Settings(
        generation={
            "provider": "openai",
            "api_key": "sk-test",
            "model": "gpt-4o",
            "temperature": 0.5,
            "fallback_provider": "openrouter",
            "fallback_api_key": "sk-or-test",
        },
        extraction={"max_input_chars": 1000},
    )

    extractor = QuestionExtractor.from_settings(settings)

    assert isinstance(extractor.provider, FallbackLLMProvider)
    assert extractor.provider.model == "gpt-4o"
    assert extractor.provider.fallback_provider.name == "openrouter"


def test_from_settings_requires_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(ValueError, match="API key"):
        QuestionExtractor.from_settings(Settings(generation={"api_key": ""}))


@pytest.mark.asyncio
@pytest.mark.parametrize("points", ["1e999", "Infinity", "-Infinity", "NaN"])
async def test_non_finite_points_do_not_fail_request(points):
    reply = (
        '{"questions": [{"text": "2+2=?", "options": ["3", "4", "5", "6"],'
        f' "correctAnswer": "4", "points": {points}}}]}}'
    )
    questions = await QuestionExtractor(FakeLLMProvider(reply)).extract_questions("t")

    assert [(q.text, q.points) for q in questions] == [("2+2=?", 1)]


@pytest.mark.asyncio
async def test_unexpected_item_error_drops_only_that_item(monkeypatch, caplog):
    real_normalize = extractor_module.normalize_question

    def normalize(item, **kwargs):
        if item["text"] == "Bad?":
            raise OverflowError("cannot convert float infinity to integer")
        return real_normalize(item, **kwargs)

    monkeypatch.setattr(extractor_module, "normalize_question", normalize)
    reply = json.dumps({"questions": [mcq("Bad?"), mcq("Good?")]})

    with caplog.at_level(logging.WARNING, logger="quiz_extract_ai"):
        questions = await QuestionExtractor(FakeLLMProvider(reply)).extract_questions("text")

    assert [q.text for q in questions] == ["Good?"]
    assert "OverflowError" in caplog.text


@pytest.mark.asyncio
async def test_backticks_inside_question_text():
    reply = json.dumps(
        {
            "questions": [
                mcq(
                    "In Markdown, what does ```code``` create?",
                    answer="a code block",
                    options=["a heading", "a code block", "a link", "a table"],
                )
            ]
        }
    )
    questions = await QuestionExtractor(FakeLLMProvider(reply)).extract_questions("text")

    assert [q.correct_answer for q in questions] == ["a code block"]
    assert "```code```" in questions[0].text
