"""
Exception hierarchy for quiz-extract-ai.

Caller-input errors are marked with ``is_client_error`` so request handlers
can map them to a 4xx-style rejection. Everything else is a server-side fault.
"""

from __future__ import annotations


class QuizExtractError(Exception):
    """Base class for all quiz-extract-ai errors."""

    is_client_error: bool = False


class UnsupportedFormatError(QuizExtractError):
    """The uploaded file's extension is not one we know how to read."""

    is_client_error = True

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"Unsupported file type: {filename}")


class DocumentDecodeError(QuizExtractError):
    """A PDF or DOCX upload could not be opened."""

    is_client_error = True

    def __init__(self, filename: str, reason: str = ""):
        self.filename = filename
        self.reason = reason
        message = f"Could not read document: {filename}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class GenerationFailure(QuizExtractError):
    """The remote language model call failed (network, auth, rate limit, ...)."""

    def __init__(self, message: str, *, provider: str = "", model: str = ""):
        self.provider = provider
        self.model = model
        super().__init__(message)
