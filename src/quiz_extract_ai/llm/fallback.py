"""
Fallback LLM provider wrapper.

Automatically retries failed requests with a secondary provider.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from quiz_extract_ai.llm.base import ChatMessage, LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class FallbackLLMProvider(LLMProvider):
    """
    LLM provider wrapper with automatic fallback.

    Attempts requests with the primary provider first. If the primary fails,
    the same messages are sent to the fallback provider. Only when both fail
    does the error reach the caller.
    """

    def __init__(self, primary: LLMProvider, fallback: LLMProvider):
        """
        Initialize fallback provider wrapper.

        Args:
            primary: Primary LLM provider to try first.
            fallback: Fallback LLM provider to use if primary fails.
        """
        self._primary = primary
        self._fallback = fallback

    @property
    def name(self) -> str:
        """Provider name."""
        return f"{self._primary.name}+{self._fallback.name}"

    @property
    def model(self) -> str:
        """Current model name (from primary provider)."""
        return self._primary.model

    @property
    def primary_provider(self) -> LLMProvider:
        return self._primary

    @property
    def fallback_provider(self) -> LLMProvider:
        return self._fallback

    async def complete(
        self,
        messages: list[ChatMessage],
        *,
        temperature: float = 0.3,
        max_tokens: int = 4096,
        **kwargs: Any,
    ) -> LLMResponse:
        """
        Generate a completion with automatic fallback.

        Raises:
            Exception: The fallback provider's error, chained to the primary's,
                if both providers fail.
        """
        start_time = time.perf_counter()

        try:
            response = await self._primary.complete(
                messages,
                temperature=temperature,
                max_tokens=max_tokens,
                **kwargs,
            )
            response.metadata["provider_used"] = "primary"
            return response

        except Exception as e:
            primary_error = e
            logger.warning(
                "Primary provider %s (%s) failed, switching to fallback %s (%s): %s: %s",
                self._primary.name,
                self._primary.model,
                self._fallback.name,
                self._fallback.model,
                type(e).__name__,
                e,
            )

        try:
            response = await self._fallback.complete(
                messages,
                temperature=temperature,
                max_tokens=max_tokens,
                **kwargs,
            )
        except Exception as fallback_error:
            logger.error(
                "Both providers failed (primary: %s, fallback: %s)",
                primary_error,
                fallback_error,
            )
            raise fallback_error from primary_error

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "Fallback provider %s (%s) succeeded after %.0fms",
            self._fallback.name,
            self._fallback.model,
            elapsed_ms,
        )
        response.metadata["provider_used"] = "fallback"
        response.metadata["primary_error"] = str(primary_error)
        response.metadata["primary_error_type"] = type(primary_error).__name__
        return response

    async def aclose(self) -> None:
        await self._primary.aclose()
        await self._fallback.aclose()
