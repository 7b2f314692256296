"""
Base class for format-specific text extractors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import PurePath


def file_suffix(filename: str) -> str:
    """Lower-cased suffix of a filename, '' if it has none."""
    return PurePath(filename).suffix.lower()


class DocumentExtractor(ABC):
    """Converts the raw bytes of one document format into plain text."""

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset()

    @property
    @abstractmethod
    def name(self) -> str:
        """Extractor name for logging."""
        ...

    def can_handle(self, filename: str) -> bool:
        """Check if this extractor can handle the file."""
        return file_suffix(filename) in self.SUPPORTED_EXTENSIONS

    @abstractmethod
    async def extract(self, data: bytes, filename: str) -> str:
        """
        Extract plain text from a document.

        Args:
            data: Raw file contents.
            filename: Original filename, used for diagnostics.

        Returns:
            Extracted text (possibly empty).
        """
        ...
