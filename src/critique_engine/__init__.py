"""Critique synthesis and variant cache engine.

Turns generated design critiques into discrete points, merges them across
analysis runs, and serves full/simplified and tone variants of the current
point set without regenerating what has already been produced.
"""

__version__ = "0.1.0"

from critique_engine.errors import CritiqueEngineError, GenerationFailure, PersistenceFailure
from critique_engine.models import (
    PointSet,
    SessionSnapshot,
    SessionState,
    SimplificationLevel,
    Theme,
    ThemeColor,
    ThemedGrouping,
    ThemeGroup,
    Tone,
    Variant,
    VariantKey,
    VariantStatus,
)
from critique_engine.session import SynthesisCoordinator, VariantCache
from critique_engine.synthesis import merge_similar_points, reduce_points, split_points
from critique_engine.themes import assign_points

__all__ = [
    "CritiqueEngineError",
    "GenerationFailure",
    "PersistenceFailure",
    "PointSet",
    "SessionSnapshot",
    "SessionState",
    "SimplificationLevel",
    "Theme",
    "ThemeColor",
    "ThemedGrouping",
    "ThemeGroup",
    "Tone",
    "Variant",
    "VariantKey",
    "VariantStatus",
    "SynthesisCoordinator",
    "VariantCache",
    "assign_points",
    "merge_similar_points",
    "reduce_points",
    "split_points",
]
