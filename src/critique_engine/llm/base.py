"""Base types and abstract classes for LLM integration."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from critique_engine.constants.llm_config import DEFAULT_MODELS


@dataclass
class LLMResponse:
    """Response from an LLM provider.

    Attributes:
        content: The text content of the response.
        model: The model used for generation.
        input_tokens: Number of input tokens.
        output_tokens: Number of output tokens.
        cost_usd: Estimated cost in USD.
    """

    content: str
    model: str
    input_tokens: int
    output_tokens: int
    cost_usd: float

    @property
    def total_tokens(self) -> int:
        """Total tokens used (input + output)."""
        return self.input_tokens + self.output_tokens


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    Implementations handle API authentication, the system/user message split
    of their API, and cost calculation. They are synchronous; the async engine
    reaches them through ``ProviderGenerationBackend``.
    """

    model: str

    @abstractmethod
    def complete(self, prompt: str, system_prompt: str | None = None, **kwargs) -> LLMResponse:
        """Execute a completion request.

        Args:
            prompt: The user prompt text.
            system_prompt: Optional system instructions.
            **kwargs: Additional provider-specific parameters.

        Returns:
            LLMResponse with the completion result.
        """
        pass

    @abstractmethod
    def estimate_cost(self, input_tokens: int, output_tokens: int) -> float:
        """Estimate cost for given token counts.

        Args:
            input_tokens: Number of input tokens.
            output_tokens: Number of output tokens.

        Returns:
            Estimated cost in USD.
        """
        pass


def get_provider(provider_name: str, model: str | None = None, **kwargs) -> LLMProvider:
    """Factory function to get an LLM provider.

    Args:
        provider_name: Name of provider ("openai", "anthropic", "gemini")
        model: Optional model name. Uses default if not specified.
        **kwargs: Additional provider-specific arguments.

    Returns:
        Configured LLMProvider instance.

    Raises:
        ValueError: If provider_name is unknown.

    Examples:
        >>> provider = get_provider("openai")  # default model
        >>> provider = get_provider("anthropic", "claude-sonnet-4-5-20250929")
    """
    # Import here to avoid circular imports
    from critique_engine.llm.providers.anthropic import AnthropicProvider
    from critique_engine.llm.providers.gemini import GeminiProvider
    from critique_engine.llm.providers.openai import OpenAIProvider

    providers = {
        "openai": OpenAIProvider,
        "anthropic": AnthropicProvider,
        "gemini": GeminiProvider,
    }

    if provider_name not in providers:
        raise ValueError(
            f"Unknown provider: {provider_name}. Available: {list(providers.keys())}"
        )

    provider_class = providers[provider_name]
    model = model or DEFAULT_MODELS.get(provider_name)

    return provider_class(model=model, **kwargs)
