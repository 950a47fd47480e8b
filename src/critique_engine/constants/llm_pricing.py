"""LLM pricing reference.

Prices are per 1 MILLION tokens (standard tier, no batch discount: critique
generation is interactive).
"""

from dataclasses import dataclass
from typing import Literal


@dataclass
class ModelPricing:
    """Pricing for a single model."""

    input: float  # $ per 1M input tokens
    output: float  # $ per 1M output tokens
    cached_input: float | None = None  # $ per 1M cached input tokens (if supported)
    notes: str = ""


OPENAI_PRICING: dict[str, ModelPricing] = {
    "gpt-4.1": ModelPricing(input=2.00, output=8.00, cached_input=0.50),
    "gpt-4.1-mini": ModelPricing(input=0.40, output=1.60, cached_input=0.10),
    "gpt-4.1-nano": ModelPricing(input=0.10, output=0.40, cached_input=0.025),
    "gpt-4o": ModelPricing(input=2.50, output=10.00, cached_input=1.25),
    "gpt-4o-mini": ModelPricing(
        input=0.15,
        output=0.60,
        cached_input=0.075,
        notes="Very cheap, good quality",
    ),
}

ANTHROPIC_PRICING: dict[str, ModelPricing] = {
    "claude-sonnet-4-5-20250929": ModelPricing(input=3.00, output=15.00, cached_input=0.30),
    "claude-haiku-4-5-20251001": ModelPricing(
        input=1.00,
        output=5.00,
        cached_input=0.10,
        notes="Fast and cheap",
    ),
}

GEMINI_PRICING: dict[str, ModelPricing] = {
    "gemini-2.5-pro": ModelPricing(input=1.25, output=10.00, cached_input=0.125),
    "gemini-2.5-flash": ModelPricing(input=0.30, output=2.50, cached_input=0.03),
    "gemini-2.5-flash-lite": ModelPricing(
        input=0.10,
        output=0.40,
        cached_input=0.01,
        notes="Cheapest Gemini 2.5",
    ),
}


def get_pricing(provider: Literal["openai", "anthropic", "gemini"], model: str) -> ModelPricing:
    """Get pricing for a model.

    Raises:
        KeyError: If provider or model is not found.
    """
    pricing_map = {
        "openai": OPENAI_PRICING,
        "anthropic": ANTHROPIC_PRICING,
        "gemini": GEMINI_PRICING,
    }
    return pricing_map[provider][model]


def estimate_cost(
    provider: str,
    model: str,
    input_tokens: int,
    output_tokens: int,
    use_cache: bool = False,
) -> float:
    """Estimate cost for an API call in USD.

    Raises:
        KeyError: If the model has no pricing entry.
    """
    pricing = get_pricing(provider, model)

    if use_cache and pricing.cached_input:
        input_cost = input_tokens * pricing.cached_input / 1_000_000
    else:
        input_cost = input_tokens * pricing.input / 1_000_000

    output_cost = output_tokens * pricing.output / 1_000_000
    return input_cost + output_cost
