"""
Text extraction for quiz-extract-ai.

Provides one extractor per supported upload format:
- PdfExtractor for PDFs (PyMuPDF, optional pymupdf4llm markdown)
- DocxExtractor for Word documents, with OCR of embedded pictures
- PlainTextExtractor for .txt files
- ImageExtractor for scanned images (OCR)

TextExtractor dispatches between them by filename suffix.
"""

from quiz_extract_ai.extraction.base import DocumentExtractor
from quiz_extract_ai.extraction.docx import IMAGE_TEXT_MARKER, DocxExtractor
from quiz_extract_ai.extraction.extractor import TextExtractor
from quiz_extract_ai.extraction.image import ImageExtractor
from quiz_extract_ai.extraction.pdf import PdfExtractor
from quiz_extract_ai.extraction.text import PlainTextExtractor

__all__ = [
    "DocumentExtractor",
    "TextExtractor",
    "PdfExtractor",
    "DocxExtractor",
    "PlainTextExtractor",
    "ImageExtractor",
    "IMAGE_TEXT_MARKER",
]
