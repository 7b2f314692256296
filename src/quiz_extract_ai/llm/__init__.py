"""
LLM provider abstraction layer.

Supports OpenAI-compatible chat endpoints:
- OpenAI (default)
- OpenRouter: pay-per-token access to Claude, GPT, Gemini, DeepSeek, etc.

A primary provider can be paired with a fallback that takes over on failure.
"""

from quiz_extract_ai.llm.base import LLMProvider, LLMResponse
from quiz_extract_ai.llm.factory import (
    LLMProviderType,
    create_llm_provider,
    create_llm_provider_from_config,
)
from quiz_extract_ai.llm.fallback import FallbackLLMProvider

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "LLMProviderType",
    "FallbackLLMProvider",
    "create_llm_provider",
    "create_llm_provider_from_config",
]
