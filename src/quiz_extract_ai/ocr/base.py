"""
Base classes and interfaces for OCR providers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class OCRStatus(str, Enum):
    """Outcome of a single recognition attempt."""

    OK = "ok"
    EMPTY = "empty"  # engine ran, found no text
    INVALID_IMAGE = "invalid_image"
    ENGINE_UNAVAILABLE = "engine_unavailable"
    FAILED = "failed"


@dataclass
class OCRResult:
    """Result from OCR processing."""

    content: str = ""
    status: OCRStatus = OCRStatus.EMPTY
    engine: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """Check if content is empty or whitespace only."""
        return not self.content or not self.content.strip()

    @property
    def word_count(self) -> int:
        """Count words in content."""
        return len(self.content.split()) if self.content else 0

    @property
    def engine_unavailable(self) -> bool:
        """True when no further recognition can succeed in this process."""
        return self.status == OCRStatus.ENGINE_UNAVAILABLE


class OCRProvider(ABC):
    """
    Abstract base class for OCR providers.

    Implementations must never raise from ``recognize``: every failure is
    reported through ``OCRResult.status``.
    """

    SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp"}

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        ...

    @abstractmethod
    def recognize(self, image_bytes: bytes) -> OCRResult:
        """
        Recognize text in a single image.

        Args:
            image_bytes: Encoded image (PNG, JPEG, BMP, ...).

        Returns:
            OCRResult with best-effort text and a status.
        """
        ...

    def recognize_text(self, image_bytes: bytes) -> str:
        """Recognize text, returning an empty string on any failure."""
        return self.recognize(image_bytes).content


class DisabledOCR(OCRProvider):
    """Stand-in used when OCR is turned off in configuration."""

    @property
    def name(self) -> str:
        return "disabled"

    def recognize(self, image_bytes: bytes) -> OCRResult:
        return OCRResult(
            status=OCRStatus.ENGINE_UNAVAILABLE,
            engine=self.name,
            metadata={"reason": "OCR disabled in configuration"},
        )
