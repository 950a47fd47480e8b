"""LLM providers module."""

from critique_engine.llm.providers.anthropic import AnthropicProvider
from critique_engine.llm.providers.gemini import GeminiProvider
from critique_engine.llm.providers.openai import OpenAIProvider

__all__ = [
    "OpenAIProvider",
    "AnthropicProvider",
    "GeminiProvider",
]
