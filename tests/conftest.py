from __future__ import annotations

import io
import logging
from typing import Any

import fitz
import pytest
from docx import Document
from PIL import Image

from quiz_extract_ai.llm.base import LLMProvider, LLMResponse
from quiz_extract_ai.logging_config import PACKAGE_LOGGER
from quiz_extract_ai.ocr.base import OCRProvider, OCRResult, OCRStatus


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo configure_logging so caplog sees package records."""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


# ====================
# Document builders
# ====================


def make_png(color: str = "white", size: tuple[int, int] = (32, 32)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_pdf(*pages: str) -> bytes:
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def make_docx(paragraphs: list[str], images: list[bytes] | None = None) -> bytes:
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    for blob in images or []:
        doc.add_picture(io.BytesIO(blob))
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


# ====================
# Fakes
# ====================


class FakeOCR(OCRProvider):
    """OCR stand-in returning scripted results, one per call."""

    def __init__(self, results: list[OCRResult | Exception] | None = None):
        self.results = list(results or [])
        self.calls = 0

    @property
    def name(self) -> str:
        return "fake"

    def recognize(self, image_bytes: bytes) -> OCRResult:
        self.calls += 1
        if not self.results:
            return OCRResult(status=OCRStatus.EMPTY, engine=self.name)
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def ocr_ok(text: str) -> OCRResult:
    return OCRResult(content=text, status=OCRStatus.OK, engine="fake")


def ocr_status(status: OCRStatus) -> OCRResult:
    return OCRResult(status=status, engine="fake", metadata={"error": status.value})


class FakeLLMProvider(LLMProvider):
    """LLM stand-in that records prompts and returns a canned reply."""

    def __init__(self, reply: str = '{"questions": []}', error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[list[dict[str, str]]] = []
        self.closed = False

    @property
    def name(self) -> str:
        return "fake"

    @property
    def model(self) -> str:
        return "fake-model"

    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float = 0.3,
        max_tokens: int = 4096,
        **kwargs: Any,
    ) -> LLMResponse:
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.reply, input_tokens=10, output_tokens=20, model=self.model)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_llm() -> FakeLLMProvider:
    return FakeLLMProvider()
