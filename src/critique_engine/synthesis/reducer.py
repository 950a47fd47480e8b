"""Hard-cap a merged point set by clustering points on a crude topic key.

Lossy: only used for the cross-run synthesized point set, when merging alone
leaves more than ``cap`` points.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from critique_engine.constants import SYNTHESIS_CAP, TOPIC_MIN_WORD_LENGTH, TOPIC_WORD_COUNT
from critique_engine.models import PointSet

logger = logging.getLogger(__name__)


def topic_key(point: str, word_count: int = TOPIC_WORD_COUNT) -> str:
    """First ``word_count`` significant (longer than 3 chars) lowercase words of a point.

    >>> topic_key("The budget will overrun because nobody planned contingency")
    'budget will overrun'
    """
    significant = [word for word in point.lower().split() if len(word) >= TOPIC_MIN_WORD_LENGTH]
    return " ".join(significant[:word_count])


def reduce_points(
    points: Sequence[str],
    cap: int = SYNTHESIS_CAP,
    word_count: int = TOPIC_WORD_COUNT,
) -> PointSet:
    """Keep the shortest point per topic, shortest first, at most ``cap`` of them.

    Point sets already within the cap are returned unchanged.

    Args:
        points: Merged point set.
        cap: Maximum number of points to return.
        word_count: Significant words per topic key.

    Returns:
        Point set with ``len(result) <= cap``.

    Raises:
        ValueError: If cap is negative.
    """
    if cap < 0:
        raise ValueError(f"cap must be non-negative, got {cap}")

    items = tuple(points)
    if len(items) <= cap:
        return items

    topics: dict[str, list[str]] = {}
    for point in items:
        topics.setdefault(topic_key(point, word_count), []).append(point)

    # sorted() is stable, so equal lengths keep first-seen order
    representatives = [sorted(group, key=len)[0] for group in topics.values()]
    reduced = tuple(sorted(representatives, key=len)[:cap])

    logger.info(
        f"Reduced {len(items)} points across {len(topics)} topics to {len(reduced)} (cap {cap})"
    )
    return reduced
