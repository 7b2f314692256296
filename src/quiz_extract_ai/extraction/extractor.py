"""
Suffix-based dispatch across the format-specific extractors.
"""

from __future__ import annotations

import logging

from quiz_extract_ai.config import Settings
from quiz_extract_ai.errors import UnsupportedFormatError
from quiz_extract_ai.extraction.base import DocumentExtractor, file_suffix
from quiz_extract_ai.extraction.docx import DocxExtractor
from quiz_extract_ai.extraction.image import ImageExtractor
from quiz_extract_ai.extraction.pdf import PdfExtractor
from quiz_extract_ai.extraction.text import PlainTextExtractor
from quiz_extract_ai.ocr import DisabledOCR, OCRProvider, create_ocr_provider

logger = logging.getLogger(__name__)


class TextExtractor:
    """
    Convert an uploaded file into plain text.

    The extractor is chosen strictly by the filename's suffix
    (case-insensitive). Instances hold only configuration and can serve
    concurrent requests.
    """

    def __init__(
        self,
        ocr: OCRProvider | None = None,
        *,
        pdf_markdown: bool = False,
        max_concurrent_images: int = 1,
    ):
        """
        Initialize the extractor set.

        Args:
            ocr: OCR adapter for images and embedded DOCX pictures.
            pdf_markdown: Use pymupdf4llm markdown output for PDFs.
            max_concurrent_images: Parallel OCR calls per DOCX document.
        """
        self._extractors: list[DocumentExtractor] = [
            PdfExtractor(markdown=pdf_markdown),
            DocxExtractor(ocr, max_concurrent_images=max_concurrent_images),
            PlainTextExtractor(),
            # Images stay a supported format without OCR; they just yield no text
            ImageExtractor(ocr or DisabledOCR()),
        ]

    @classmethod
    def from_settings(cls, settings: Settings) -> TextExtractor:
        return cls(
            create_ocr_provider(settings.ocr),
            pdf_markdown=settings.extraction.pdf_markdown,
            max_concurrent_images=settings.ocr.max_concurrent_images,
        )

    @property
    def supported_extensions(self) -> set[str]:
        return {ext for e in self._extractors for ext in e.SUPPORTED_EXTENSIONS}

    def get_extractor(self, filename: str) -> DocumentExtractor:
        """
        Find the extractor for a filename.

        Raises:
            UnsupportedFormatError: If no extractor handles the suffix.
        """
        for extractor in self._extractors:
            if extractor.can_handle(filename):
                return extractor
        raise UnsupportedFormatError(filename)

    async def extract(self, data: bytes, filename: str | None) -> str:
        """
        Extract text from an uploaded file.

        Args:
            data: Raw file contents.
            filename: Original filename; only its suffix is used.

        Returns:
            Extracted text. Empty when there is no filename or no suffix.

        Raises:
            UnsupportedFormatError: Unknown suffix.
            DocumentDecodeError: A PDF or DOCX that cannot be opened.
        """
        if not filename or not file_suffix(filename):
            return ""

        extractor = self.get_extractor(filename)
        text = await extractor.extract(data, filename)
        logger.info("Extracted %d chars from %s using %s", len(text), filename, extractor.name)
        return text
