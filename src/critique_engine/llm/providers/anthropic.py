"""Anthropic provider implementation."""

import os

from anthropic import Anthropic

from critique_engine.constants.llm_config import (
    DEFAULT_MODEL_ANTHROPIC,
    DEFAULT_TEMPERATURE,
    MAX_OUTPUT_TOKENS_ANTHROPIC,
)
from critique_engine.constants.llm_pricing import estimate_cost
from critique_engine.llm.base import LLMProvider, LLMResponse


class AnthropicProvider(LLMProvider):
    """Anthropic Messages API provider.

    Args:
        api_key: Anthropic API key. If not provided, reads from ANTHROPIC_API_KEY env var.
        model: Model to use. Defaults to Claude Haiku 4.5.
        temperature: Temperature for sampling.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL_ANTHROPIC,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        if not self.api_key:
            raise ValueError(
                "ANTHROPIC_API_KEY not found. Set it as environment variable or pass api_key."
            )

        self.model = model
        self.temperature = temperature
        self.client = Anthropic(api_key=self.api_key)

    def complete(self, prompt: str, system_prompt: str | None = None, **kwargs) -> LLMResponse:
        """Execute a completion request.

        The Messages API takes the system prompt as a top-level ``system``
        parameter rather than as a message.
        """
        request: dict = {
            "model": kwargs.get("model", self.model),
            "messages": [{"role": "user", "content": prompt}],
            "temperature": kwargs.get("temperature", self.temperature),
            "max_tokens": kwargs.get("max_tokens", MAX_OUTPUT_TOKENS_ANTHROPIC),
        }
        if system_prompt:
            request["system"] = system_prompt

        response = self.client.messages.create(**request)

        content = response.content[0].text if response.content else ""
        input_tokens = response.usage.input_tokens
        output_tokens = response.usage.output_tokens

        return LLMResponse(
            content=content,
            model=response.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            cost_usd=self.estimate_cost(input_tokens, output_tokens),
        )

    def estimate_cost(self, input_tokens: int, output_tokens: int) -> float:
        try:
            return estimate_cost(
                provider="anthropic",
                model=self.model,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
            )
        except KeyError:
            # Unknown model: return 0
            return 0.0
