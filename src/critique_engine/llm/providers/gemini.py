"""Gemini provider implementation."""

import os

from google import genai
from google.genai import types

from critique_engine.constants.llm_config import (
    DEFAULT_MODEL_GEMINI,
    DEFAULT_TEMPERATURE,
    MAX_OUTPUT_TOKENS_GEMINI,
)
from critique_engine.constants.llm_pricing import estimate_cost
from critique_engine.llm.base import LLMProvider, LLMResponse


class GeminiProvider(LLMProvider):
    """Google Gemini API provider.

    Args:
        api_key: Google API key. If not provided, reads from GOOGLE_API_KEY env var.
        model: Model to use. Defaults to gemini-2.5-flash.
        temperature: Temperature for sampling.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL_GEMINI,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        self.api_key = api_key or os.environ.get("GOOGLE_API_KEY")
        if not self.api_key:
            raise ValueError(
                "GOOGLE_API_KEY not found. Set it as environment variable or pass api_key."
            )

        self.model = model
        self.temperature = temperature
        self._client = genai.Client(api_key=self.api_key)

    def complete(self, prompt: str, system_prompt: str | None = None, **kwargs) -> LLMResponse:
        """Execute a completion request.

        Args:
            prompt: The user prompt.
            system_prompt: Optional system instruction.
            **kwargs: Additional parameters (temperature, max_output_tokens).

        Returns:
            LLMResponse with the completion result.
        """
        config_kwargs: dict = {
            "temperature": kwargs.get("temperature", self.temperature),
            "max_output_tokens": kwargs.get("max_output_tokens", MAX_OUTPUT_TOKENS_GEMINI),
        }
        if system_prompt:
            config_kwargs["system_instruction"] = system_prompt

        # Add thinking_budget=0 for flash models to avoid expensive internal thinking
        if "flash" in self.model:
            config_kwargs["thinking_config"] = types.ThinkingConfig(thinking_budget=0)

        response = self._client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(**config_kwargs),
        )

        content = response.text or ""

        input_tokens = 0
        output_tokens = 0
        if getattr(response, "usage_metadata", None):
            input_tokens = response.usage_metadata.prompt_token_count or 0
            output_tokens = response.usage_metadata.candidates_token_count or 0

        return LLMResponse(
            content=content,
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            cost_usd=self.estimate_cost(input_tokens, output_tokens),
        )

    def estimate_cost(self, input_tokens: int, output_tokens: int) -> float:
        try:
            return estimate_cost(
                provider="gemini",
                model=self.model,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
            )
        except KeyError:
            return 0.0
