"""Async generation backend used by the session layer.

The engine only needs ``generate(user_prompt, system_prompt) -> text``.
``ProviderGenerationBackend`` adapts a synchronous ``LLMProvider`` to that
contract by running each call in a worker thread, so the event loop keeps
serving other toggles while a completion is outstanding.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

from critique_engine.errors import GenerationFailure
from critique_engine.llm.base import LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class GenerationBackend(ABC):
    """Opaque remote text generator."""

    @abstractmethod
    async def generate(self, user_prompt: str, system_prompt: str) -> str:
        """Generate text for a prompt.

        Raises:
            GenerationFailure: If the backend rejected the request.
        """
        pass


class ProviderGenerationBackend(GenerationBackend):
    """Generation backend on top of an ``LLMProvider``.

    Keeps running totals of calls, tokens and cost for the session.
    """

    def __init__(self, provider: LLMProvider, **completion_kwargs) -> None:
        self.provider = provider
        self.completion_kwargs = completion_kwargs
        self.calls = 0
        self.total_tokens = 0
        self.total_cost_usd = 0.0

    async def generate(self, user_prompt: str, system_prompt: str) -> str:
        self.calls += 1
        logger.info(f"Generation call #{self.calls} ({self.provider.model})")
        try:
            response: LLMResponse = await asyncio.to_thread(
                self.provider.complete,
                user_prompt,
                system_prompt=system_prompt,
                **self.completion_kwargs,
            )
        except Exception as e:
            raise GenerationFailure(f"{type(e).__name__}: {e}") from e

        self.total_tokens += response.total_tokens
        self.total_cost_usd += response.cost_usd
        logger.debug(
            f"Generation #{self.calls}: {response.input_tokens} in / "
            f"{response.output_tokens} out tokens, ${response.cost_usd:.5f}"
        )
        return response.content
