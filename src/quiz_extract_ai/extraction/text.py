"""
Direct text extraction for plain text files.

No OCR needed - the bytes are decoded and returned verbatim.
"""

from __future__ import annotations

import logging

from quiz_extract_ai.extraction.base import DocumentExtractor

logger = logging.getLogger(__name__)


class PlainTextExtractor(DocumentExtractor):
    """
    Extract text from plain text uploads.

    This is a pass-through extractor. UTF-8 is tried first (with or without
    BOM); legacy single-byte encodings are the fallback, and latin-1 accepts
    any byte sequence, so decoding never fails.
    """

    SUPPORTED_EXTENSIONS = frozenset({".txt"})
    FALLBACK_ENCODINGS = ("cp1252", "latin-1")

    @property
    def name(self) -> str:
        return "text_direct"

    async def extract(self, data: bytes, filename: str) -> str:
        return self.decode(data)

    def decode(self, data: bytes) -> str:
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError:
            pass

        for encoding in self.FALLBACK_ENCODINGS:
            try:
                content = data.decode(encoding)
                logger.debug("Decoded text upload as %s", encoding)
                return content
            except UnicodeDecodeError:
                continue

        # Unreachable with latin-1 in the list, kept for custom subclasses
        return data.decode("utf-8", errors="replace")
