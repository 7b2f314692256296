"""
PyMuPDF-based text extraction for PDFs.

Plain mode concatenates each page's text in reading order. Markdown mode
uses pymupdf4llm, which keeps tables and headings legible for the model.
"""

from __future__ import annotations

import logging

import fitz  # PyMuPDF
import pymupdf4llm

from quiz_extract_ai.errors import DocumentDecodeError
from quiz_extract_ai.extraction.base import DocumentExtractor

logger = logging.getLogger(__name__)


class PdfExtractor(DocumentExtractor):
    """Extract text from PDFs with embedded text layers."""

    SUPPORTED_EXTENSIONS = frozenset({".pdf"})

    def __init__(self, markdown: bool = False):
        """
        Initialize PDF extractor.

        Args:
            markdown: Emit pymupdf4llm markdown instead of plain page text.
        """
        self._markdown = markdown

    @property
    def name(self) -> str:
        return "pymupdf4llm" if self._markdown else "pymupdf"

    async def extract(self, data: bytes, filename: str) -> str:
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            raise DocumentDecodeError(filename, str(e)) from e

        with doc:
            if doc.needs_pass:
                raise DocumentDecodeError(filename, "document is password protected")

            if self._markdown:
                text = pymupdf4llm.to_markdown(doc)
            else:
                text = "".join(page.get_text("text", sort=True) for page in doc)

            logger.debug("Extracted %d chars from %d PDF pages", len(text), doc.page_count)
            return text
