"""Synthesized point set: deduplicated, capped union of every historical run.

Always recomputed from the full history; nothing here is cached.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from critique_engine.constants import MERGE_SIMILARITY_THRESHOLD, SYNTHESIS_CAP, TOPIC_WORD_COUNT
from critique_engine.errors import PersistenceFailure
from critique_engine.models import PointSet
from critique_engine.synthesis.merger import merge_similar_points
from critique_engine.synthesis.reducer import reduce_points
from critique_engine.synthesis.splitter import clean_point

if TYPE_CHECKING:
    from critique_engine.storage import AnalysisLogStore

logger = logging.getLogger(__name__)


def union_point_sets(point_sets: Iterable[Sequence[str]]) -> PointSet:
    """Concatenate point sets, dropping exact duplicates (first occurrence wins)."""
    seen: set[str] = set()
    union: list[str] = []
    for point_set in point_sets:
        for point in point_set:
            if point not in seen:
                seen.add(point)
                union.append(point)
    return tuple(union)


def format_synthesized_point(point: str) -> str:
    """Strip leading numbers/bullets and capitalize the first letter."""
    cleaned = clean_point(point)
    return cleaned[:1].upper() + cleaned[1:]


def synthesize_points(
    point_sets: Iterable[Sequence[str]],
    cap: int = SYNTHESIS_CAP,
    threshold: float = MERGE_SIMILARITY_THRESHOLD,
    topic_word_count: int = TOPIC_WORD_COUNT,
) -> PointSet:
    """Merge points from many runs and, if still too many, reduce them to ``cap``.

    Args:
        point_sets: Every historical point set (full and simplified alike).
        cap: Maximum size of the synthesized point set.
        threshold: Similarity threshold for merging.
        topic_word_count: Significant words per topic key when reducing.

    Returns:
        Formatted synthesized point set, at most ``cap`` points.
    """
    all_points = union_point_sets(point_sets)
    merged = merge_similar_points(all_points, threshold)
    logger.debug(f"Synthesis: {len(all_points)} unique points, {len(merged)} after merging")

    if len(merged) > cap:
        merged = reduce_points(merged, cap, topic_word_count)

    formatted = (format_synthesized_point(point) for point in merged)
    return union_point_sets([[point for point in formatted if point]])


async def load_synthesized_points(
    store: AnalysisLogStore,
    cap: int = SYNTHESIS_CAP,
    threshold: float = MERGE_SIMILARITY_THRESHOLD,
    topic_word_count: int = TOPIC_WORD_COUNT,
) -> PointSet:
    """Read the whole analysis history and synthesize it.

    A failing log store yields an empty point set; the failure is logged.
    """
    try:
        point_sets = await store.load_all_historical_point_sets()
    except PersistenceFailure as e:
        logger.warning(f"Could not load analysis history: {e}")
        return ()

    return synthesize_points(
        point_sets, cap=cap, threshold=threshold, topic_word_count=topic_word_count
    )
