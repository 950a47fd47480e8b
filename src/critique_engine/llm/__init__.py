"""LLM integration module.

Provides:
- LLMProvider abstract base class for different LLM backends
- Concrete providers for OpenAI, Anthropic, Gemini
- GenerationBackend, the async contract the session layer calls
"""

from critique_engine.llm.backend import GenerationBackend, ProviderGenerationBackend
from critique_engine.llm.base import LLMProvider, LLMResponse, get_provider
from critique_engine.llm.providers import AnthropicProvider, GeminiProvider, OpenAIProvider

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "get_provider",
    "GenerationBackend",
    "ProviderGenerationBackend",
    "OpenAIProvider",
    "AnthropicProvider",
    "GeminiProvider",
]
