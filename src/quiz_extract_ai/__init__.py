"""
quiz-extract-ai: AI-powered question extraction from exam documents.

This package provides tools for:
- Text extraction from PDF, DOCX, TXT and image uploads
- Tesseract OCR for images and pictures embedded in Word documents
- Turning extracted text into validated multiple-choice questions with an LLM
"""

__version__ = "0.1.0"

from quiz_extract_ai.config import Settings, load_config
from quiz_extract_ai.errors import (
    DocumentDecodeError,
    GenerationFailure,
    QuizExtractError,
    UnsupportedFormatError,
)
from quiz_extract_ai.extraction import TextExtractor
from quiz_extract_ai.health import CheckResult, ReadinessReport, check_readiness
from quiz_extract_ai.models import Question, QuestionType
from quiz_extract_ai.ocr import OCRResult, OCRStatus, TesseractOCR
from quiz_extract_ai.pipeline import QuestionPipeline
from quiz_extract_ai.questions import QuestionExtractor

__all__ = [
    # Config
    "Settings",
    "load_config",
    # Errors
    "QuizExtractError",
    "UnsupportedFormatError",
    "DocumentDecodeError",
    "GenerationFailure",
    # Models
    "Question",
    "QuestionType",
    # OCR
    "OCRResult",
    "OCRStatus",
    "TesseractOCR",
    # Extraction
    "TextExtractor",
    "QuestionExtractor",
    "QuestionPipeline",
    # Readiness
    "CheckResult",
    "ReadinessReport",
    "check_readiness",
]
