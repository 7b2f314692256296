"""
OpenAI-compatible LLM provider.

Talks to the OpenAI API directly or to OpenRouter, which exposes the same
chat-completions interface for Claude, GPT, Gemini, DeepSeek, etc.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from openai import AsyncOpenAI

from quiz_extract_ai.llm.base import ChatMessage, LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class OpenAICompatibleProvider(LLMProvider):
    """
    Chat-completions provider for OpenAI and OpenRouter endpoints.

    Retries failed requests with exponential backoff and re-raises the last
    error once the attempts are exhausted.
    """

    BASE_URLS = {
        "openai": "https://api.openai.com/v1",
        "openrouter": "https://openrouter.ai/api/v1",
    }

    # Model aliases for convenience
    MODELS = {
        "openai": {
            "default": "gpt-4o-mini",
            "fast": "gpt-4o-mini",
            "quality": "gpt-4o",
        },
        "openrouter": {
            "default": "anthropic/claude-sonnet-4.5",
            "fast": "anthropic/claude-3-haiku",
            "quality": "anthropic/claude-3-opus",
            "deepseek": "deepseek/deepseek-chat",
            "gemini": "google/gemini-pro-1.5",
        },
    }

    def __init__(
        self,
        api_key: str,
        model: str = "default",
        *,
        flavor: str = "openai",
        base_url: str | None = None,
        timeout: float = 120.0,
        max_retries: int = 3,
        json_mode: bool = True,
    ):
        """
        Initialize provider.

        Args:
            api_key: API key for the endpoint.
            model: Model key (from MODELS) or full model name.
            flavor: "openai" or "openrouter"; picks base URL and aliases.
            base_url: Override the API base URL.
            timeout: Request timeout in seconds.
            max_retries: Maximum attempts per request.
            json_mode: Ask the endpoint for a JSON object response format.
        """
        self._flavor = flavor
        self._model_name = self.MODELS.get(flavor, {}).get(model, model)
        self._max_retries = max(1, max_retries)
        self._json_mode = json_mode

        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url or self.BASE_URLS.get(flavor, self.BASE_URLS["openai"]),
            timeout=timeout,
            # Retries are handled here so backoff is uniform across flavors
            max_retries=0,
        )

    @property
    def name(self) -> str:
        """Provider name."""
        return self._flavor

    @property
    def model(self) -> str:
        """Current model name."""
        return self._model_name

    async def aclose(self) -> None:
        await self._client.close()

    async def complete(
        self,
        messages: list[ChatMessage],
        *,
        temperature: float = 0.3,
        max_tokens: int = 4096,
        **kwargs: Any,
    ) -> LLMResponse:
        """
        Generate a chat completion.

        Args:
            messages: List of message dicts.
            temperature: Sampling temperature.
            max_tokens: Maximum output tokens.
            **kwargs: Additional options passed to the API.

        Returns:
            LLMResponse with content and usage stats.
        """
        if self._json_mode:
            kwargs.setdefault("response_format", {"type": "json_object"})

        start_time = time.perf_counter()
        last_error: Exception | None = None

        for attempt in range(self._max_retries):
            try:
                response = await self._client.chat.completions.create(
                    model=self._model_name,
                    messages=messages,  # type: ignore[arg-type]
                    temperature=temperature,
                    max_tokens=max_tokens,
                    **kwargs,
                )

                latency_ms = (time.perf_counter() - start_time) * 1000
                content = response.choices[0].message.content or ""
                usage = response.usage

                return LLMResponse(
                    content=content.strip(),
                    input_tokens=usage.prompt_tokens if usage else 0,
                    output_tokens=usage.completion_tokens if usage else 0,
                    model=self._model_name,
                    latency_ms=latency_ms,
                    metadata={
                        "provider": self._flavor,
                        "finish_reason": response.choices[0].finish_reason,
                        "attempt": attempt + 1,
                    },
                )

            except Exception as e:
                last_error = e
                logger.warning(
                    "%s request failed (attempt %d/%d): %s",
                    self._flavor,
                    attempt + 1,
                    self._max_retries,
                    e,
                )
                if attempt < self._max_retries - 1:
                    # Exponential backoff
                    await asyncio.sleep(2**attempt)

        raise last_error or RuntimeError(f"{self._flavor} request failed after retries")
