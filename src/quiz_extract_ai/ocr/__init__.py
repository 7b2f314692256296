"""
OCR adapter for quiz-extract-ai.

Recognizes text in raster images (standalone uploads and pictures embedded in
Word documents). Failure-tolerant: providers report problems through
``OCRResult.status`` instead of raising.
"""

from quiz_extract_ai.config import OCRConfig
from quiz_extract_ai.ocr.base import DisabledOCR, OCRProvider, OCRResult, OCRStatus
from quiz_extract_ai.ocr.tesseract import TesseractOCR, resolve_tessdata_dir, tesseract_version


def create_ocr_provider(config: OCRConfig) -> OCRProvider:
    """Build the OCR provider described by the configuration."""
    if not config.enabled:
        return DisabledOCR()
    return TesseractOCR.from_config(config)


__all__ = [
    "OCRResult",
    "OCRStatus",
    "OCRProvider",
    "DisabledOCR",
    "TesseractOCR",
    "create_ocr_provider",
    "resolve_tessdata_dir",
    "tesseract_version",
]
