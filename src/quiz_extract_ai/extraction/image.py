"""
Text extraction for scanned images: the whole file is one picture for OCR.
"""

from __future__ import annotations

import asyncio
import logging

from quiz_extract_ai.extraction.base import DocumentExtractor
from quiz_extract_ai.ocr import OCRProvider, OCRStatus

logger = logging.getLogger(__name__)


class ImageExtractor(DocumentExtractor):
    """Route raster image uploads through the OCR adapter."""

    SUPPORTED_EXTENSIONS = OCRProvider.SUPPORTED_EXTENSIONS

    def __init__(self, ocr: OCRProvider):
        self._ocr = ocr

    @property
    def name(self) -> str:
        return f"image_{self._ocr.name}"

    async def extract(self, data: bytes, filename: str) -> str:
        result = await asyncio.to_thread(self._ocr.recognize, data)
        if result.status not in (OCRStatus.OK, OCRStatus.EMPTY):
            logger.warning(
                "No text recognized in %s (%s): %s",
                filename,
                result.status.value,
                result.metadata.get("error", ""),
            )
        return result.content
