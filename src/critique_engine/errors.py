"""Exceptions raised by the critique engine.

Only GenerationFailure is meant to reach a user. PersistenceFailure is raised by
log stores and always caught by the engine. Degenerate merge input, stale
results and theme reconciliation misses are not exceptions at all.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from critique_engine.models import VariantKey


class CritiqueEngineError(Exception):
    """Base class for critique engine errors."""


class GenerationFailure(CritiqueEngineError):
    """The generation backend failed or returned text without any points."""

    def __init__(self, message: str, key: VariantKey | None = None):
        super().__init__(message)
        self.key = key


class PersistenceFailure(CritiqueEngineError):
    """Best-effort write to or read from the analysis log failed."""
