"""
Base classes for LLM providers.

The question extractor only needs text in, text out; providers hide the
endpoint, retries and usage accounting behind ``chat``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

# {"role": "system" | "user" | "assistant", "content": "..."}
ChatMessage = dict[str, str]


@dataclass
class LLMResponse:
    """One completion returned by a provider, with usage accounting."""

    content: str
    input_tokens: int = 0
    output_tokens: int = 0
    model: str = ""
    latency_ms: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class LLMProvider(ABC):
    """
    A remote chat-completion endpoint.

    Errors from the endpoint propagate to the caller once the provider's own
    retry policy is exhausted. Callers own the provider and should ``aclose``
    it when done.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short provider identifier used in logs and errors."""
        ...

    @property
    @abstractmethod
    def model(self) -> str:
        """Resolved model name sent to the endpoint."""
        ...

    @abstractmethod
    async def complete(
        self,
        messages: list[ChatMessage],
        *,
        temperature: float = 0.3,
        max_tokens: int = 4096,
        **kwargs: Any,
    ) -> LLMResponse:
        """
        Send a conversation and return the model's reply.

        Args:
            messages: Conversation so far, oldest first.
            temperature: Sampling temperature (0.0 to 2.0).
            max_tokens: Upper bound on generated tokens.
            **kwargs: Passed through to the endpoint (e.g. ``response_format``).
        """
        ...

    async def chat(
        self,
        user_prompt: str,
        *,
        system_prompt: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 4096,
        **kwargs: Any,
    ) -> LLMResponse:
        """Single-turn convenience wrapper around ``complete``."""
        messages: list[ChatMessage] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})
        return await self.complete(
            messages, temperature=temperature, max_tokens=max_tokens, **kwargs
        )

    async def aclose(self) -> None:
        """Release network resources held by the provider."""
        return None
