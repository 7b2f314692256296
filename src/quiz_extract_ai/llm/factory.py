"""
LLM provider factory.

Creates the appropriate LLM provider based on configuration.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from quiz_extract_ai.config import GenerationConfig
from quiz_extract_ai.llm.base import LLMProvider


class LLMProviderType(str, Enum):
    """Available LLM provider types."""

    OPENAI = "openai"
    OPENROUTER = "openrouter"


def create_llm_provider(
    provider_type: LLMProviderType | str,
    *,
    api_key: str | None = None,
    model: str = "default",
    **kwargs: Any,
) -> LLMProvider:
    """
    Create an LLM provider instance.

    Args:
        provider_type: Type of provider to create (openai or openrouter).
        api_key: API key for the endpoint.
        model: Model name or alias.
        **kwargs: Additional provider-specific options.

    Returns:
        LLMProvider instance.

    Raises:
        ValueError: If provider_type is invalid or the API key is missing.

    Examples:
        provider = create_llm_provider("openai", api_key="sk-...", model="gpt-4o-mini")

        provider = create_llm_provider(
            "openrouter",
            api_key="sk-or-...",
            model="anthropic/claude-3.5-sonnet"
        )
    """
    # Normalize provider type
    if isinstance(provider_type, str):
        provider_type = provider_type.lower().replace("_", "-")
        try:
            provider_type = LLMProviderType(provider_type)
        except ValueError:
            valid = [p.value for p in LLMProviderType]
            raise ValueError(
                f"Invalid provider type: {provider_type}. Valid options: {valid}"
            ) from None

    if not api_key:
        raise ValueError(f"{provider_type.value} provider requires an API key")

    from quiz_extract_ai.llm.openai_compat import OpenAICompatibleProvider

    return OpenAICompatibleProvider(
        api_key=api_key,
        model=model,
        flavor=provider_type.value,
        **kwargs,
    )


def create_llm_provider_from_config(config: GenerationConfig) -> LLMProvider:
    """
    Build the provider described by the generation config.

    When a fallback provider is configured the result is a
    FallbackLLMProvider wrapping both.
    """
    options: dict[str, Any] = {
        "timeout": config.timeout_seconds,
        "max_retries": config.max_retries,
        "json_mode": config.json_mode,
    }

    primary = create_llm_provider(
        config.provider.value,
        api_key=config.api_key,
        model=config.model,
        base_url=config.base_url or None,
        **options,
    )

    if config.fallback_provider is None:
        return primary

    from quiz_extract_ai.llm.fallback import FallbackLLMProvider

    fallback = create_llm_provider(
        config.fallback_provider.value,
        api_key=config.fallback_api_key,
        model=config.fallback_model,
        **options,
    )
    return FallbackLLMProvider(primary=primary, fallback=fallback)
