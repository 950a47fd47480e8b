"""OpenAI provider implementation."""

import os

from openai import OpenAI

from critique_engine.constants.llm_config import (
    DEFAULT_MODEL_OPENAI,
    DEFAULT_TEMPERATURE,
    MAX_OUTPUT_TOKENS_OPENAI,
)
from critique_engine.constants.llm_pricing import estimate_cost
from critique_engine.llm.base import LLMProvider, LLMResponse


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions provider.

    Args:
        api_key: OpenAI API key. If not provided, reads from OPENAI_API_KEY env var.
        model: Model to use. Defaults to gpt-4.1-mini.
        temperature: Temperature for sampling.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL_OPENAI,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        if not self.api_key:
            raise ValueError(
                "OPENAI_API_KEY not found. Set it as environment variable or pass api_key."
            )

        self.model = model
        self.temperature = temperature
        self.client = OpenAI(api_key=self.api_key)

    def complete(self, prompt: str, system_prompt: str | None = None, **kwargs) -> LLMResponse:
        """Execute a completion request.

        Args:
            prompt: The user prompt.
            system_prompt: Optional system message, sent before the prompt.
            **kwargs: Additional parameters (model, temperature, max_tokens).

        Returns:
            LLMResponse with the completion result.
        """
        model = kwargs.get("model", self.model)
        temperature = kwargs.get("temperature", self.temperature)
        max_tokens = kwargs.get("max_tokens", MAX_OUTPUT_TOKENS_OPENAI)

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        response = self.client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )

        content = response.choices[0].message.content or ""
        input_tokens = response.usage.prompt_tokens
        output_tokens = response.usage.completion_tokens

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
                provider="openai",
                model=self.model,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
            )
        except KeyError:
            # Unknown model: return 0
            return 0.0
