"""Shared fixtures: a scripted generation backend and sample critique text."""

from __future__ import annotations

import asyncio

import pytest

from critique_engine.errors import GenerationFailure
from critique_engine.llm.backend import GenerationBackend
from critique_engine.prompts import TONE_INSTRUCTIONS
from critique_engine.storage import InMemoryAnalysisLogStore

NOTES = ["Use a single entrance for all visitors", "Replace the ramp with stairs"]

ANALYSIS_TEXT = (
    "The single entrance creates congestion at peak hours ** ** "
    "1. Stairs exclude wheelchair users entirely ** ** "
    "Budget for signage was never discussed"
)
ANALYSIS_POINTS = (
    "The single entrance creates congestion at peak hours",
    "Stairs exclude wheelchair users entirely",
    "Budget for signage was never discussed",
)
REFRESHED_TEXT = "Emergency exits are too far apart ** ** Lighting plan is missing"
REFRESHED_POINTS = ("Emergency exits are too far apart", "Lighting plan is missing")
SIMPLIFIED_TEXT = "Entrance gets crowded ** ** Stairs block wheelchairs ** ** No signage budget"
AGGRESSIVE_TEXT = "This entrance is a disaster ** ** Stairs are unacceptable ** ** Signage is ignored"
PERSUASIVE_TEXT = "Consider a second entrance ** ** What if we kept the ramp ** ** Let's budget signage"


async def spin(times: int = 20) -> None:
    """Let pending tasks run up to their next real suspension point."""
    for _ in range(times):
        await asyncio.sleep(0)


class ScriptedBackend(GenerationBackend):
    """Generation backend answering from a script, keyed by the kind of prompt.

    Kinds: ``analysis``, ``simplify`` and the tone values. A list of responses
    is consumed one per call (the last one repeats). Calls of a kind listed in
    ``gates`` wait for that event; kinds in ``failures`` raise GenerationFailure.
    """

    def __init__(self, responses: dict | None = None) -> None:
        self.responses = {
            "analysis": ANALYSIS_TEXT,
            "simplify": SIMPLIFIED_TEXT,
            "aggressive": AGGRESSIVE_TEXT,
            "persuasive": PERSUASIVE_TEXT,
            "critical": "Evidence is lacking ** ** Rigor is missing ** ** Costs are unexamined",
        }
        self.responses.update(responses or {})
        self.calls: list[tuple[str, str, str]] = []
        self.gates: dict[str, asyncio.Event] = {}
        self.failures: set[str] = set()

    @staticmethod
    def kind_of(system_prompt: str) -> str:
        if system_prompt.startswith("You are analyzing design decisions"):
            return "analysis"
        if system_prompt.startswith("Please simplify"):
            return "simplify"
        for tone, instruction in TONE_INSTRUCTIONS.items():
            if system_prompt.startswith(instruction):
                return tone.value
        return "normal"

    def count(self, kind: str) -> int:
        return sum(1 for call in self.calls if call[0] == kind)

    def prompts(self, kind: str) -> list[tuple[str, str]]:
        return [(user, system) for k, user, system in self.calls if k == kind]

    async def generate(self, user_prompt: str, system_prompt: str) -> str:
        kind = self.kind_of(system_prompt)
        index = self.count(kind)
        self.calls.append((kind, user_prompt, system_prompt))

        gate = self.gates.get(kind)
        if gate is not None:
            await gate.wait()
        if kind in self.failures:
            raise GenerationFailure(f"{kind} backend unavailable")

        response = self.responses[kind]
        if isinstance(response, list):
            return response[min(index, len(response) - 1)]
        return response


@pytest.fixture
def backend() -> ScriptedBackend:
    return ScriptedBackend()


@pytest.fixture
def log_store() -> InMemoryAnalysisLogStore:
    return InMemoryAnalysisLogStore()
