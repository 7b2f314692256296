"""End-to-end tests: document bytes in, questions out."""

from __future__ import annotations

import io
import json

import pytesseract
import pytest
from conftest import FakeLLMProvider, FakeOCR, make_docx, make_png, ocr_ok
from PIL import Image

from quiz_extract_ai.config import Settings
from quiz_extract_ai.errors import GenerationFailure, UnsupportedFormatError
from quiz_extract_ai.extraction import TextExtractor
from quiz_extract_ai.ocr import TesseractOCR
from quiz_extract_ai.pipeline import QuestionPipeline
from quiz_extract_ai.questions import QuestionExtractor

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


def build_pipeline(llm: FakeLLMProvider, ocr=None) -> QuestionPipeline:
    return QuestionPipeline(TextExtractor(ocr), QuestionExtractor(llm))


@pytest.mark.asyncio
async def test_text_file_to_question():
    llm = FakeLLMProvider(REPLY)
    pipeline = build_pipeline(llm)
    data = b"Q: 2+2=? a) 3 b) 4 c) 5 d) 6 Answer: b) 4"

    questions = await pipeline.run(data, "quiz.txt", topic_id="math", subtopic_id="sums")

    assert len(questions) == 1
    assert questions[0].correct_answer == "4"
    assert questions[0].correct_answer in questions[0].options
    assert questions[0].topic_id == "math"
    assert "Q: 2+2=?" in llm.calls[0][1]["content"]


@pytest.mark.asyncio
async def test_image_without_ocr_engine(monkeypatch):
    def not_installed(*args, **kwargs):
        raise pytesseract.TesseractNotFoundError()

    monkeypatch.setattr(pytesseract, "image_to_string", not_installed)
    buffer = io.BytesIO()
    Image.new("RGB", (40, 20), "white").save(buffer, format="BMP")

    text_extractor = TextExtractor(TesseractOCR())
    text = await text_extractor.extract(buffer.getvalue(), "scan.bmp")
    assert text == ""

    llm = FakeLLMProvider('{"questions": []}')
    assert await QuestionExtractor(llm).extract_questions(text) == []


@pytest.mark.asyncio
async def test_unsupported_extension_rejected_before_model_call():
    llm = FakeLLMProvider(REPLY)

    with pytest.raises(UnsupportedFormatError, match="notes.xyz"):
        await build_pipeline(llm).run(b"data", "notes.xyz")

    assert llm.calls == []


@pytest.mark.asyncio
async def test_docx_picture_text_reaches_model():
    llm = FakeLLMProvider(REPLY)
    ocr = FakeOCR([ocr_ok("Q7. Which gas do plants absorb?")])
    data = make_docx(["Body question?"], images=[make_png("black")])

    await build_pipeline(llm, ocr).run(data, "exam.docx")

    prompt = llm.calls[0][1]["content"]
    assert "Body question?" in prompt
    assert "Which gas do plants absorb?" in prompt


@pytest.mark.asyncio
async def test_generation_failure_propagates():
    pipeline = build_pipeline(FakeLLMProvider(error=TimeoutError("timed out")))

    with pytest.raises(GenerationFailure):
        await pipeline.run(b"some text", "quiz.txt")


@pytest.mark.asyncio
async def test_aclose_releases_provider():
    llm = FakeLLMProvider()
    await build_pipeline(llm).aclose()
    assert llm.closed


def test_from_settings():
    settings = Settings(
        generation={"api_key": "sk-test"},
        ocr={"enabled": False},
        extraction={"pdf_markdown": True},
    )

    pipeline = QuestionPipeline.from_settings(settings)

    assert pipeline.question_extractor.provider.name == "openai"
    assert pipeline.text_extractor.get_extractor("a.pdf").name == "pymupdf4llm"
    assert pipeline.text_extractor.get_extractor("a.png").name == "image_disabled"

